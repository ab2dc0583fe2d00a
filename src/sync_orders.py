#!/usr/bin/env python3
import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sync community order spreadsheets into the local order store.")
    p.add_argument(
        "--mode",
        default="current",
        choices=["current", "all", "model3", "everything"],
        help="Which configured sources to sync (default: current quarter only)",
    )
    p.add_argument("--db", default="", help="Path to the SQLite order store (default: ORDER_SYNC_DB_PATH)")
    p.add_argument("--settings", default="", help="Path to the settings JSON (default: ORDER_SYNC_SETTINGS_PATH)")
    p.add_argument("--env-file", default="", help="Extra .env file to load before reading configuration")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")
    if args.env_file:
        load_dotenv(args.env_file, override=True)

    # Imported late so --env-file can still influence module-level config
    from order_sync import config
    from order_sync.sync import run_sync, sources_for_mode
    from server import db
    from server import settings as app_settings

    db.init_db(Path(args.db) if args.db else config.DB_PATH)
    app_settings.init_settings(Path(args.settings) if args.settings else config.SETTINGS_PATH)

    result = run_sync(sources_for_mode(args.mode), store=db, settings_store=app_settings)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 1 if result.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
