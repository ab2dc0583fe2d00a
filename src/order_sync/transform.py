from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional, Sequence

from .columns import ColumnMap
from .io import cell_at
from .normalize import (
    clean_value,
    days_between,
    normalize_autopilot,
    normalize_color,
    normalize_country,
    normalize_drive,
    normalize_interior,
    normalize_model,
    normalize_tow_hitch,
    normalize_wheels,
    parse_number,
)
from .vehicles import VehicleLine


log = logging.getLogger(__name__)


@dataclass
class NormalizedOrderRecord:
    name: str
    vehicle_type: str
    order_date: Optional[str] = None
    country: Optional[str] = None
    model: Optional[str] = None
    range: Optional[str] = None
    drive: Optional[str] = None
    color: Optional[str] = None
    interior: Optional[str] = None
    wheels: Optional[str] = None
    tow_hitch: Optional[str] = None
    autopilot: Optional[str] = None
    delivery_window: Optional[str] = None
    delivery_location: Optional[str] = None
    vin: Optional[str] = None
    vin_received_date: Optional[str] = None
    papers_received_date: Optional[str] = None
    production_date: Optional[str] = None
    type_approval: Optional[str] = None
    type_variant: Optional[str] = None
    delivery_date: Optional[str] = None
    order_to_production: Optional[int] = None
    order_to_vin: Optional[int] = None
    order_to_delivery: Optional[int] = None
    order_to_papers: Optional[int] = None
    papers_to_delivery: Optional[int] = None
    row_number: Optional[int] = None

    def to_order_data(self) -> Dict:
        """Business fields keyed by the order store's column names."""
        return {
            _camel(f.name): getattr(self, f.name)
            for f in fields(self)
            if f.name != "row_number"
        }


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def transform_row(
    row: Sequence[str],
    cols: ColumnMap,
    line: VehicleLine,
    row_number: Optional[int] = None,
) -> Optional[NormalizedOrderRecord]:
    """Build one record from a data row; ``None`` when the name cell is empty."""
    def cell(index: Optional[int]) -> Optional[str]:
        return clean_value(cell_at(row, index))

    name = cell(cols.name)
    if not name:
        return None

    model = normalize_model(cell(cols.model))
    order_date = cell(cols.order_date)
    vin_received = cell(cols.vin_received_date)
    papers_received = cell(cols.papers_received_date)
    production = cell(cols.production_date)
    delivery = cell(cols.delivery_date)

    def metric(index: int, start: Optional[str], end: Optional[str]) -> Optional[int]:
        value = parse_number(cell_at(row, index))
        return value if value is not None else days_between(start, end)

    return NormalizedOrderRecord(
        name=name,
        vehicle_type=line.vehicle_type,
        order_date=order_date,
        country=normalize_country(cell(cols.country)),
        model=model,
        range=line.range_from(cell(cols.battery), model),
        drive=normalize_drive(cell(cols.drive)),
        color=normalize_color(cell(cols.color)),
        interior=normalize_interior(cell(cols.interior)),
        wheels=normalize_wheels(cell(cols.wheels)),
        tow_hitch=line.tow_hitch_from(normalize_tow_hitch(cell(cols.tow_hitch)), model),
        autopilot=normalize_autopilot(cell(cols.autopilot)),
        delivery_window=cell(cols.delivery_window),
        delivery_location=cell(cols.delivery_location),
        vin=cell(cols.vin),
        vin_received_date=vin_received,
        papers_received_date=papers_received,
        production_date=production,
        type_approval=cell(cols.type_approval),
        type_variant=cell(cols.type_variant),
        delivery_date=delivery,
        order_to_production=metric(cols.order_to_production, order_date, production),
        order_to_vin=metric(cols.order_to_vin, order_date, vin_received),
        order_to_delivery=metric(cols.order_to_delivery, order_date, delivery),
        order_to_papers=metric(cols.order_to_papers, order_date, papers_received),
        papers_to_delivery=metric(cols.papers_to_delivery, papers_received, delivery),
        row_number=row_number,
    )


def transform_rows(
    rows: Iterable[Sequence[str]],
    cols: ColumnMap,
    line: VehicleLine,
    row_numbers: Optional[Sequence[int]] = None,
) -> List[NormalizedOrderRecord]:
    """Transform data rows, dropping those without a name.

    ``row_numbers`` gives each row's position in the sheet; without it rows
    are numbered from 1.
    """
    out: List[NormalizedOrderRecord] = []
    for offset, row in enumerate(rows):
        number = row_numbers[offset] if row_numbers is not None else offset + 1
        record = transform_row(row, cols, line, row_number=number)
        if record is None:
            continue
        out.append(record)
    log.debug(f"transform_rows: {len(out)} record(s) with names for {line.vehicle_type}")
    return out
