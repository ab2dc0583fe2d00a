from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .vehicles import MODEL_3, MODEL_Y, VehicleLine


@dataclass(frozen=True)
class ColumnMap:
    """0-based column index per semantic field for one sheet layout."""

    name: int
    order_date: int
    country: int
    model: int
    drive: int
    color: int
    interior: int
    wheels: int
    tow_hitch: int
    autopilot: int
    delivery_window: int
    delivery_location: int
    vin: int
    vin_received_date: int
    papers_received_date: int
    production_date: int
    type_approval: int
    type_variant: int
    delivery_date: int
    order_to_production: int
    order_to_vin: int
    order_to_delivery: int
    order_to_papers: int
    papers_to_delivery: int
    battery: Optional[int] = None


# Benutzerdaten Q4 2025 and later. Columns 14 and 20 are blank.
MODEL_Y_COLUMNS = ColumnMap(
    name=0,
    order_date=1,
    country=2,
    model=3,
    drive=4,
    color=5,
    interior=6,
    wheels=7,
    tow_hitch=8,
    autopilot=9,
    delivery_window=10,
    delivery_location=11,
    vin=12,
    vin_received_date=13,
    papers_received_date=15,
    production_date=16,
    type_approval=17,
    type_variant=18,
    delivery_date=19,
    order_to_production=21,
    order_to_vin=22,
    order_to_delivery=23,
    order_to_papers=24,
    papers_to_delivery=25,
)

# Benutzerdaten Q3 2025: option code sits in T, so delivery moves to U.
MODEL_Y_Q3_COLUMNS = replace(MODEL_Y_COLUMNS, delivery_date=20, order_to_delivery=21)

# Model 3 sheet: extra "Akku" column after Antrieb, column 15 blank,
# column 21 (waiting for VIN) is a computed helper and ignored.
MODEL_3_COLUMNS = ColumnMap(
    name=0,
    order_date=1,
    country=2,
    model=3,
    drive=4,
    battery=5,
    color=6,
    interior=7,
    wheels=8,
    tow_hitch=9,
    autopilot=10,
    delivery_window=11,
    delivery_location=12,
    vin=13,
    vin_received_date=14,
    papers_received_date=16,
    production_date=17,
    type_approval=18,
    type_variant=19,
    delivery_date=20,
    order_to_production=22,
    order_to_vin=23,
    order_to_delivery=24,
    order_to_papers=25,
    papers_to_delivery=26,
)


@dataclass(frozen=True)
class SchemaVariant:
    key: str
    columns: ColumnMap
    line: VehicleLine


SCHEMA_VARIANTS: Dict[str, SchemaVariant] = {
    v.key: v
    for v in (
        SchemaVariant("model_y", MODEL_Y_COLUMNS, MODEL_Y),
        SchemaVariant("model_y_q3", MODEL_Y_Q3_COLUMNS, MODEL_Y),
        SchemaVariant("model_3", MODEL_3_COLUMNS, MODEL_3),
    )
}


def get_schema_variant(key: str) -> SchemaVariant:
    try:
        return SCHEMA_VARIANTS[key]
    except KeyError:
        raise KeyError(f"Unknown schema variant: {key!r}") from None
