from __future__ import annotations
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Protocol, Sequence

import requests

from . import config
from .columns import get_schema_variant
from .io import find_header_row, parse_csv_numbered
from .merge import OrderStore, SyncResult, sync_records
from .sheets_client import SheetFetchError, SheetsConfig, build_session, fetch_csv
from .transform import transform_rows


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceConfig:
    remote_id: str
    tab_id: str
    schema_variant: str
    label: str


# To find a tab id open the tab in a browser and read #gid=... from the URL.
MODEL_Y_SOURCES: List[SourceConfig] = [
    SourceConfig(config.MODEL_Y_SPREADSHEET_ID, "0", "model_y_q3", "Q3 2025"),
    SourceConfig(config.MODEL_Y_SPREADSHEET_ID, "957284045", "model_y", "Q4 2025"),
    SourceConfig(config.MODEL_Y_SPREADSHEET_ID, "1666102380", "model_y", "Current Quarter"),
]
CURRENT_QUARTER_SOURCES: List[SourceConfig] = [MODEL_Y_SOURCES[-1]]
MODEL_3_SOURCES: List[SourceConfig] = [
    SourceConfig(config.MODEL_3_SPREADSHEET_ID, "1666102380", "model_3", "Model 3 Data"),
]
ALL_SOURCES: List[SourceConfig] = MODEL_Y_SOURCES + MODEL_3_SOURCES

SOURCE_MODES: Dict[str, List[SourceConfig]] = {
    "current": CURRENT_QUARTER_SOURCES,
    "all": MODEL_Y_SOURCES,
    "model3": MODEL_3_SOURCES,
    "everything": ALL_SOURCES,
}


def sources_for_mode(mode: str) -> List[SourceConfig]:
    if mode not in SOURCE_MODES:
        raise ValueError(f"Unknown sync mode: {mode!r} (expected one of {', '.join(SOURCE_MODES)})")
    return list(SOURCE_MODES[mode])


class SettingsStore(Protocol):
    def upsert_sync_metadata(self, last_sync_time: datetime, last_sync_count: int) -> None: ...


@dataclass
class AggregateSyncResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    sheets: List[SyncResult] = field(default_factory=list)

    def add(self, result: SyncResult) -> None:
        self.created += result.created
        self.updated += result.updated
        self.skipped += result.skipped
        self.errors.extend(result.errors)
        self.sheets.append(result)

    def to_dict(self) -> Dict:
        return asdict(self)


FetchFn = Callable[[SourceConfig], str]


def sync_source(source: SourceConfig, store: OrderStore, fetch: FetchFn) -> SyncResult:
    """Fetch, parse, normalize and merge one source. Never raises for
    transport or shape problems; those come back as a single error entry."""
    variant = get_schema_variant(source.schema_variant)
    label = source.label
    try:
        text = fetch(source)
    except (requests.RequestException, SheetFetchError) as e:
        log.warning(f"[Sync {label}] fetch failed: {e}")
        return SyncResult(label=label, errors=[f"Failed to fetch {label}: {e}"])

    numbered = parse_csv_numbered(text)
    rows = [cells for _, cells in numbered]
    log.info(f"[Sync {label}] tab={source.tab_id} variant={variant.key} rows parsed={len(rows)}")
    if len(rows) < 2:
        log.warning(f"[Sync {label}] no data rows")
        return SyncResult(label=label, errors=[f"No data rows found in sheet {label}"])

    header_idx = find_header_row(rows, variant.line.header_markers)
    header = rows[header_idx]
    log.info(f"[Sync {label}] header row at index {header_idx} with {len(header)} columns")
    log.debug(f"[Sync {label}] headers: {' | '.join(header)}")

    body = rows[header_idx + 1 :]
    sheet_rows = [number for number, _ in numbered[header_idx + 1 :]]
    records = transform_rows(body, variant.columns, variant.line, row_numbers=sheet_rows)
    log.info(f"[Sync {label}] data rows={len(body)} with names={len(records)}")

    result = sync_records(store, records, label=label)
    log.info(
        f"[Sync {label}] created={result.created} updated={result.updated} "
        f"skipped={result.skipped} errors={len(result.errors)}"
    )
    return result


def _sync_sources(
    sources: Sequence[SourceConfig],
    store: OrderStore,
    session: requests.Session,
    cfg: SheetsConfig,
) -> AggregateSyncResult:
    def fetch(source: SourceConfig) -> str:
        return fetch_csv(session, cfg, source.remote_id, source.tab_id)

    total = AggregateSyncResult()
    for source in sources:
        total.add(sync_source(source, store, fetch))
    return total


def run_sync(
    sources: Sequence[SourceConfig],
    store: OrderStore,
    settings_store: SettingsStore,
    session: Optional[requests.Session] = None,
    sheets_cfg: Optional[SheetsConfig] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> AggregateSyncResult:
    """Sync each source in order and record the run in the settings store."""
    cfg = sheets_cfg or SheetsConfig()
    if session is None:
        with build_session(cfg) as owned:
            total = _sync_sources(sources, store, owned, cfg)
    else:
        total = _sync_sources(sources, store, session, cfg)

    finished = (now or (lambda: datetime.now(timezone.utc)))()
    settings_store.upsert_sync_metadata(finished, total.created + total.updated)
    log.info(
        f"Sync finished: sources={len(total.sheets)} created={total.created} "
        f"updated={total.updated} skipped={total.skipped} errors={len(total.errors)}"
    )
    return total
