#!/usr/bin/env python3
"""Print how a configured sheet lines up with its column layout.

Fetches one source, shows the detected header with column letters, and the
first few data rows as normalized records. Nothing is written.
"""
import argparse
import sys
from dataclasses import asdict, fields
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'src'))

from order_sync.columns import get_schema_variant  # type: ignore
from order_sync.io import find_header_row, parse_csv_numbered  # type: ignore
from order_sync.sheets_client import SheetsConfig, build_session, fetch_csv  # type: ignore
from order_sync.sync import ALL_SOURCES  # type: ignore
from order_sync.transform import transform_rows  # type: ignore


def column_letter(i: int) -> str:
    out = ''
    i += 1
    while i:
        i, r = divmod(i - 1, 26)
        out = chr(65 + r) + out
    return out


def main() -> int:
    labels = [s.label for s in ALL_SOURCES]
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument('label', choices=labels, help='Configured source label')
    p.add_argument('--rows', type=int, default=3, help='Number of data rows to show')
    args = p.parse_args()

    source = next(s for s in ALL_SOURCES if s.label == args.label)
    variant = get_schema_variant(source.schema_variant)
    cfg = SheetsConfig()
    with build_session(cfg) as session:
        numbered = parse_csv_numbered(fetch_csv(session, cfg, source.remote_id, source.tab_id))
    rows = [cells for _, cells in numbered]
    if len(rows) < 2:
        print(f'{source.label}: no data rows')
        return 1

    header_idx = find_header_row(rows, variant.line.header_markers)
    print(f'=== {source.label} (gid={source.tab_id}, variant={variant.key}) ===')
    print(f'Header row index: {header_idx}')
    mapped = {getattr(variant.columns, f.name): f.name for f in fields(variant.columns) if getattr(variant.columns, f.name) is not None}
    for i, h in enumerate(rows[header_idx]):
        print(f'  {column_letter(i)} ({i}): "{h}" -> {mapped.get(i, "-")}')

    print('\n=== Sample records ===')
    body = numbered[header_idx + 1:]
    records = transform_rows([cells for _, cells in body], variant.columns, variant.line,
                             row_numbers=[number for number, _ in body])
    for rec in records[: args.rows]:
        print(f'Row {rec.row_number}:')
        for k, v in asdict(rec).items():
            if v is not None and k != 'row_number':
                print(f'  {k}: {v}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
