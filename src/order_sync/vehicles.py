from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .normalize import MODEL_3_TOW_HITCH_AVAILABLE, map_battery_to_range, map_tow_hitch


RangeHook = Callable[[Optional[str], Optional[str]], Optional[str]]
TowHitchHook = Callable[[Optional[str], Optional[str]], Optional[str]]


def _no_range(battery: Optional[str], model: Optional[str]) -> Optional[str]:
    return None


def _keep_tow_hitch(tow_hitch: Optional[str], model: Optional[str]) -> Optional[str]:
    return tow_hitch


def _model_3_tow_hitch(tow_hitch: Optional[str], model: Optional[str]) -> Optional[str]:
    return map_tow_hitch(tow_hitch, model, MODEL_3_TOW_HITCH_AVAILABLE)


@dataclass(frozen=True)
class VehicleLine:
    """Vehicle-specific behavior plugged into the shared row pipeline.

    ``range_from`` receives the cleaned battery cell (``None`` for sheets
    without one) and the normalized trim. ``tow_hitch_from`` receives the
    normalized tow hitch token and the trim and may override the former.
    """

    vehicle_type: str
    header_markers: Tuple[str, ...]
    range_from: RangeHook = _no_range
    tow_hitch_from: TowHitchHook = _keep_tow_hitch


MODEL_Y = VehicleLine(
    vehicle_type="Model Y",
    header_markers=("name", "bestelldatum", "modell"),
)

MODEL_3 = VehicleLine(
    vehicle_type="Model 3",
    header_markers=("name", "bestelldatum", "model"),
    range_from=map_battery_to_range,
    tow_hitch_from=_model_3_tow_hitch,
)
