from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol

from .normalize import default_range_for_trim
from .transform import NormalizedOrderRecord


log = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"


class OrderStore(Protocol):
    def find_order(self, name: str, order_date: Optional[str], vehicle_type: str) -> Optional[Dict]: ...

    def create_order(self, data: Dict) -> Dict: ...

    def update_order(self, order_id: str, data: Dict) -> Dict: ...


@dataclass
class SyncResult:
    label: str = ""
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def merge_record(store: OrderStore, record: NormalizedOrderRecord) -> str:
    """Create or update the stored order for ``record``'s natural key.

    Returns ``"created"`` or ``"updated"``. Store errors propagate.
    """
    existing = store.find_order(record.name, record.order_date, record.vehicle_type)
    data = record.to_order_data()
    if existing:
        if data.get("range") is None:
            # sheets without a range column keep whatever range is stored
            data.pop("range", None)
        store.update_order(existing["id"], data)
        return UPDATED
    if data.get("range") is None:
        data["range"] = default_range_for_trim(record.model)
    store.create_order(data)
    return CREATED


def sync_records(
    store: OrderStore,
    records: Iterable[NormalizedOrderRecord],
    label: str = "",
) -> SyncResult:
    result = SyncResult(label=label)
    for record in records:
        if not record.name:
            result.skipped += 1
            continue
        try:
            outcome = merge_record(store, record)
        except Exception as e:
            where = f" (row {record.row_number})" if record.row_number is not None else ""
            msg = f"Failed to sync {record.name}{where}: {e}"
            log.warning(f"[Sync {label}] {msg}")
            result.errors.append(msg)
            result.skipped += 1
            continue
        if outcome == CREATED:
            result.created += 1
        else:
            result.updated += 1
    return result
