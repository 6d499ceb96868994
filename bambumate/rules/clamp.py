"""Clamp recommended values to material-safe ranges."""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from bambumate.materials import MaterialType, constraints_for_material

Range = Tuple[float, float]

NOZZLE_TEMP_PARAMS = frozenset({"nozzle_temperature", "nozzle_temperature_initial_layer"})
BED_TEMP_PARAMS = frozenset({"cool_plate_temp", "hot_plate_temp", "textured_plate_temp"})

# Material-independent limits.
FIXED_RANGES: Dict[str, Range] = {
    "filament_retraction_length": (0.0, 15.0),
    "filament_retraction_speed": (10.0, 100.0),
    "filament_flow_ratio": (0.85, 1.15),
    "fan_min_speed": (0.0, 100.0),
    "fan_max_speed": (0.0, 100.0),
    "overhang_fan_speed": (0.0, 100.0),
    "pressure_advance": (0.0, 0.1),
}


def safe_range(parameter: str, material: MaterialType) -> Optional[Range]:
    """Return ``(min, max)`` for ``parameter`` or None when it is unconstrained."""
    if parameter in NOZZLE_TEMP_PARAMS:
        constraints = constraints_for_material(material)
        return float(constraints.nozzle_temp_min), float(constraints.nozzle_temp_max)
    if parameter in BED_TEMP_PARAMS:
        constraints = constraints_for_material(material)
        return float(constraints.bed_temp_min), float(constraints.bed_temp_max)
    return FIXED_RANGES.get(parameter)


def clamp_to_safe_range(parameter: str, value: float, material: MaterialType) -> Tuple[float, bool]:
    """Return ``(value, was_clamped)``; unknown parameters pass through."""
    bounds = safe_range(parameter, material)
    if bounds is None:
        return value, False
    low, high = bounds
    if value < low:
        return low, True
    if value > high:
        return high, True
    return value, False


__all__ = [
    "BED_TEMP_PARAMS",
    "FIXED_RANGES",
    "NOZZLE_TEMP_PARAMS",
    "clamp_to_safe_range",
    "safe_range",
]
