"""Derive rule-engine inputs from a profile and label its parameters."""
from __future__ import annotations

from typing import Dict, Tuple

from bambumate.materials.types import CLASSIFICATION_ORDER

from .types import Profile

TUNABLE_PARAMETERS: Tuple[str, ...] = (
    "nozzle_temperature",
    "nozzle_temperature_initial_layer",
    "cool_plate_temp",
    "hot_plate_temp",
    "textured_plate_temp",
    "filament_retraction_length",
    "filament_retraction_speed",
    "filament_flow_ratio",
    "pressure_advance",
    "fan_min_speed",
    "fan_max_speed",
    "overhang_fan_speed",
)

PARAMETER_DISPLAY: Dict[str, Tuple[str, str]] = {
    "nozzle_temperature": ("Nozzle Temperature", "C"),
    "nozzle_temperature_initial_layer": ("Initial Layer Nozzle Temp", "C"),
    "cool_plate_temp": ("Bed Temperature (Cool Plate)", "C"),
    "hot_plate_temp": ("Bed Temperature (Hot Plate)", "C"),
    "textured_plate_temp": ("Bed Temperature (Textured)", "C"),
    "filament_retraction_length": ("Retraction Length", "mm"),
    "filament_retraction_speed": ("Retraction Speed", "mm/s"),
    "filament_flow_ratio": ("Flow Ratio", ""),
    "pressure_advance": ("Pressure Advance", ""),
    "fan_min_speed": ("Min Fan Speed", "%"),
    "fan_max_speed": ("Max Fan Speed", "%"),
    "overhang_fan_speed": ("Overhang Fan Speed", "%"),
}

DEFAULT_MATERIAL = "PLA"


def extract_profile_values(profile: Profile) -> Dict[str, float]:
    """Numeric values of the tunable parameters, read from the first extruder slot."""
    values: Dict[str, float] = {}
    for key in TUNABLE_PARAMETERS:
        value = profile.get_float(key)
        if value is not None:
            values[key] = value
    return values


def detect_material_type(profile: Profile) -> str:
    """Material text for a profile: ``filament_type``, then a hint in ``inherits``."""
    filament_type = profile.get_first("filament_type")
    if filament_type:
        return filament_type
    inherits = (profile.inherits or "").upper()
    if inherits:
        for tokens, _family in CLASSIFICATION_ORDER:
            for token in tokens:
                if token in inherits:
                    return token
    return DEFAULT_MATERIAL


def default_profile_values() -> Dict[str, float]:
    """Typical PLA values used when the caller has no profile loaded."""
    return {
        "nozzle_temperature": 200.0,
        "cool_plate_temp": 60.0,
        "filament_retraction_length": 0.8,
        "filament_flow_ratio": 1.0,
        "fan_min_speed": 35.0,
        "fan_max_speed": 70.0,
    }


def parameter_display_info(parameter: str) -> Tuple[str, str]:
    return PARAMETER_DISPLAY.get(parameter, (parameter.replace("_", " "), ""))


def format_change(current: float, recommended: float, unit: str) -> str:
    if unit in {"C", "%", "mm/s"}:
        return f"{current:.0f} -> {recommended:.0f}{unit}"
    if unit == "mm":
        return f"{current:.1f} -> {recommended:.1f}{unit}"
    return f"{current:.2f} -> {recommended:.2f}"


__all__ = [
    "DEFAULT_MATERIAL",
    "PARAMETER_DISPLAY",
    "TUNABLE_PARAMETERS",
    "default_profile_values",
    "detect_material_type",
    "extract_profile_values",
    "format_change",
    "parameter_display_info",
]
