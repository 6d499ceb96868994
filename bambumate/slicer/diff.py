"""Write recommendations back into a profile and describe what changed."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from bambumate.models.api import Recommendation
from bambumate.profiles.types import EXTRUDER_SLOTS, Profile

_INTEGER_PARAMS = frozenset(
    {
        "nozzle_temperature",
        "nozzle_temperature_initial_layer",
        "cool_plate_temp",
        "hot_plate_temp",
        "textured_plate_temp",
        "filament_retraction_speed",
        "fan_min_speed",
        "fan_max_speed",
        "overhang_fan_speed",
    }
)
_DECIMALS = {
    "filament_retraction_length": 1,
    "filament_flow_ratio": 2,
    "pressure_advance": 3,
}


def format_value(parameter: str, value: float) -> str:
    """Render a value the way Bambu Studio stores that parameter."""
    if parameter in _INTEGER_PARAMS:
        return str(int(round(value)))
    decimals = _DECIMALS.get(parameter)
    if decimals is not None:
        return f"{value:.{decimals}f}"
    return f"{value:g}"


def apply(recommendations: Iterable[Recommendation], profile: Profile) -> Profile:
    """Return a copy of ``profile`` with each recommended value written in.

    Recommendations are expected in priority order; the first one for a
    parameter wins.  Array fields get the value in every extruder slot, scalar
    fields stay scalar, and every other field is left untouched.
    """
    updated = profile.copy()
    applied: set[str] = set()
    for rec in recommendations:
        if rec.parameter in applied:
            continue
        applied.add(rec.parameter)
        text = format_value(rec.parameter, rec.recommended_value)
        existing = profile.get_raw(rec.parameter)
        if isinstance(existing, str):
            updated.set_string(rec.parameter, text)
        elif isinstance(existing, list) and existing:
            updated.set_string_array(rec.parameter, [text] * len(existing))
        else:
            updated.set_string_array(rec.parameter, [text] * EXTRUDER_SLOTS)
    return updated


def profile_diff(base: Profile, updated: Profile) -> Dict[str, Tuple[Optional[object], Optional[object]]]:
    """Fields whose values differ, as ``{key: (before, after)}`` in ``updated`` order."""
    changes: Dict[str, Tuple[Optional[object], Optional[object]]] = {}
    for key, value in updated.items():
        before = base.get_raw(key)
        if before != value:
            changes[key] = (before, value)
    for key, value in base.items():
        if key not in updated:
            changes[key] = (value, None)
    return changes


__all__ = ["apply", "format_value", "profile_diff"]
