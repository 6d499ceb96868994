"""Material-safe operating ranges and spec validation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .types import MaterialFamily, MaterialType


@dataclass(frozen=True)
class MaterialConstraints:
    """Outer physical bounds for a material; values beyond them are implausible."""

    nozzle_temp_min: int
    nozzle_temp_max: int
    bed_temp_min: int
    bed_temp_max: int


_CONSTRAINTS: Dict[MaterialFamily, MaterialConstraints] = {
    MaterialFamily.PLA: MaterialConstraints(180, 235, 0, 70),
    MaterialFamily.PETG: MaterialConstraints(210, 260, 40, 100),
    MaterialFamily.ABS: MaterialConstraints(210, 270, 70, 120),
    MaterialFamily.ASA: MaterialConstraints(220, 270, 80, 120),
    MaterialFamily.TPU: MaterialConstraints(200, 250, 20, 70),
    MaterialFamily.NYLON: MaterialConstraints(230, 300, 50, 100),
    MaterialFamily.PC: MaterialConstraints(250, 320, 90, 150),
    MaterialFamily.PVA: MaterialConstraints(170, 220, 30, 65),
    MaterialFamily.HIPS: MaterialConstraints(210, 260, 80, 115),
    MaterialFamily.OTHER: MaterialConstraints(150, 400, 0, 120),
}

_BASE_PROFILES: Dict[MaterialFamily, str] = {
    MaterialFamily.PLA: "Generic PLA",
    MaterialFamily.PETG: "Generic PETG",
    MaterialFamily.ABS: "Generic ABS",
    MaterialFamily.ASA: "Generic ASA",
    MaterialFamily.TPU: "Generic TPU",
    MaterialFamily.NYLON: "Generic PA",
    MaterialFamily.PC: "Generic PC",
    MaterialFamily.PVA: "Generic PVA",
    MaterialFamily.HIPS: "Generic HIPS",
    MaterialFamily.OTHER: "Generic PLA",
}


def constraints_for_material(material: MaterialType) -> MaterialConstraints:
    return _CONSTRAINTS[material.family]


def base_profile_name(material: MaterialType) -> str:
    """Name of the Bambu Studio system profile a new filament should inherit."""
    return _BASE_PROFILES[material.family]


class FilamentSpecs(BaseModel):
    """Manufacturer specs for a filament, typically extracted from a product page.

    The range fields (``nozzle_temp_*``, ``bed_temp_*``, ``fan_speed_percent``)
    are what product pages usually publish.  The slicer-level fields below them
    are optional exact values; when present they win over anything derived
    from the ranges.
    """

    name: str
    brand: str
    material: str
    nozzle_temp_min: Optional[int] = None
    nozzle_temp_max: Optional[int] = None
    bed_temp_min: Optional[int] = None
    bed_temp_max: Optional[int] = None
    max_speed_mm_s: Optional[int] = None
    fan_speed_percent: Optional[int] = None
    retraction_distance_mm: Optional[float] = None
    retraction_speed_mm_s: Optional[int] = None
    density_g_cm3: Optional[float] = None
    diameter_mm: Optional[float] = None

    nozzle_temperature: Optional[int] = None
    nozzle_temperature_initial_layer: Optional[int] = None
    hot_plate_temp: Optional[int] = None
    hot_plate_temp_initial_layer: Optional[int] = None
    cool_plate_temp: Optional[int] = None
    cool_plate_temp_initial_layer: Optional[int] = None
    eng_plate_temp: Optional[int] = None
    eng_plate_temp_initial_layer: Optional[int] = None
    textured_plate_temp: Optional[int] = None
    textured_plate_temp_initial_layer: Optional[int] = None
    max_volumetric_speed: Optional[float] = None
    filament_flow_ratio: Optional[float] = None
    pressure_advance: Optional[float] = None
    fan_min_speed: Optional[int] = None
    fan_max_speed: Optional[int] = None
    overhang_fan_speed: Optional[int] = None
    close_fan_the_first_x_layers: Optional[int] = None
    additional_cooling_fan_speed: Optional[int] = None
    slow_down_layer_time: Optional[int] = None
    slow_down_min_speed: Optional[int] = None
    deretraction_speed_mm_s: Optional[int] = None
    bridge_speed: Optional[int] = None
    temperature_vitrification: Optional[int] = None
    filament_cost: Optional[float] = None

    source_url: str = ""
    extraction_confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class ValidationWarning(BaseModel):
    """Non-fatal notice that an extracted value looks implausible."""

    field: str
    message: str
    value: str


def _fmt(value: float) -> str:
    return f"{value:g}"


def validate_specs(specs: FilamentSpecs) -> List[ValidationWarning]:
    """Check extracted specs against the physical range of their material.

    Warnings never block profile generation; they flag values that are more
    likely an extraction mistake than a real manufacturer recommendation.
    """
    warnings: List[ValidationWarning] = []
    constraints = constraints_for_material(MaterialType.classify(specs.material))

    def check_range(field: str, label: str, value: Optional[float], low: float, high: float) -> None:
        if value is None or low <= value <= high:
            return
        warnings.append(
            ValidationWarning(
                field=field,
                message=f"{label} {_fmt(value)}C out of range for {specs.material} ({low}-{high}C)",
                value=_fmt(value),
            )
        )

    nozzle = (constraints.nozzle_temp_min, constraints.nozzle_temp_max)
    bed = (constraints.bed_temp_min, constraints.bed_temp_max)
    check_range("nozzle_temp_min", "Nozzle temp min", specs.nozzle_temp_min, *nozzle)
    check_range("nozzle_temp_max", "Nozzle temp max", specs.nozzle_temp_max, *nozzle)
    check_range("bed_temp_min", "Bed temp min", specs.bed_temp_min, *bed)
    check_range("bed_temp_max", "Bed temp max", specs.bed_temp_max, *bed)

    retraction = specs.retraction_distance_mm
    if retraction is not None and not 0.0 <= retraction <= 15.0:
        warnings.append(
            ValidationWarning(
                field="retraction_distance_mm",
                message=f"Retraction distance {_fmt(retraction)}mm out of range (0-15mm)",
                value=_fmt(retraction),
            )
        )

    speed = specs.retraction_speed_mm_s
    if speed is not None and speed > 100:
        warnings.append(
            ValidationWarning(
                field="retraction_speed_mm_s",
                message=f"Retraction speed {speed}mm/s out of range (0-100mm/s)",
                value=str(speed),
            )
        )

    fan = specs.fan_speed_percent
    if fan is not None and fan > 100:
        warnings.append(
            ValidationWarning(
                field="fan_speed_percent",
                message=f"Fan speed {fan}% out of range (0-100%)",
                value=str(fan),
            )
        )

    diameter = specs.diameter_mm
    if diameter is not None and not 1.0 <= diameter <= 3.5:
        warnings.append(
            ValidationWarning(
                field="diameter_mm",
                message=f"Diameter {_fmt(diameter)}mm out of range (1.0-3.5mm)",
                value=_fmt(diameter),
            )
        )

    return warnings


__all__ = [
    "FilamentSpecs",
    "MaterialConstraints",
    "ValidationWarning",
    "base_profile_name",
    "constraints_for_material",
    "validate_specs",
]
