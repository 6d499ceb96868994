"""Build installable user presets from manufacturer filament specs.

A generated preset starts from the Bambu Studio system profile for the
filament's material family, flattened so it no longer depends on
``inherits``.  Identity fields are replaced and every spec value the
manufacturer published is written over the base values.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from bambumate.errors import BaseProfileNotFound
from bambumate.materials import FilamentSpecs, MaterialType, ValidationWarning, base_profile_name, validate_specs

from .inheritance import MAX_INHERITANCE_DEPTH, resolve_inheritance
from .registry import ProfileRegistry
from .types import Profile, ProfileMetadata

LOGGER = logging.getLogger(__name__)

DEFAULT_PRINTER = "Bambu Lab H2C 0.4 nozzle"

# Bambu Studio widens the temperature slider past the recommended maximum.
RANGE_HIGH_HEADROOM = 20
INITIAL_LAYER_BOOST = 5
TEXTURED_PLATE_OFFSET = 5
FAN_MIN_RATIO = 0.6


@dataclass
class GeneratedProfile:
    profile: Profile
    metadata: ProfileMetadata
    filename: str
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def name(self) -> Optional[str]:
        return self.profile.name


def generate_filament_id() -> str:
    """``P`` followed by seven hex digits (28 random bits)."""
    return f"P{secrets.randbits(28):07x}"


def generate_setting_id() -> str:
    """``PFUS`` followed by fourteen hex digits, the prefix Bambu Studio gives user presets."""
    return f"PFUS{secrets.token_hex(7)}"


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def apply_specs_to_profile(profile: Profile, specs: FilamentSpecs) -> None:
    """Write every known spec value into ``profile`` as two-slot extruder arrays.

    Exact slicer values win; range values fill in what they can.  Fields the
    specs say nothing about keep the base profile's value.
    """

    def put(key: str, value) -> None:
        if value is not None:
            profile.set_dual(key, str(value))

    def put_float(key: str, value: Optional[float], spec: str) -> None:
        if value is not None:
            profile.set_dual(key, format(value, spec))

    nozzle = _first(specs.nozzle_temperature, specs.nozzle_temp_max)
    put("nozzle_temperature", nozzle)
    put(
        "nozzle_temperature_initial_layer",
        _first(specs.nozzle_temperature_initial_layer, None if nozzle is None else nozzle + INITIAL_LAYER_BOOST),
    )
    if specs.nozzle_temp_max is not None:
        put("nozzle_temperature_range_high", specs.nozzle_temp_max + RANGE_HIGH_HEADROOM)
    put("nozzle_temperature_range_low", specs.nozzle_temp_min)

    textured_fallback = None
    if specs.bed_temp_min is not None:
        textured_fallback = max(specs.bed_temp_min - TEXTURED_PLATE_OFFSET, 0)
    plates = (
        ("hot_plate_temp", specs.hot_plate_temp, specs.hot_plate_temp_initial_layer, specs.bed_temp_max),
        ("cool_plate_temp", specs.cool_plate_temp, specs.cool_plate_temp_initial_layer, specs.bed_temp_min),
        ("eng_plate_temp", specs.eng_plate_temp, specs.eng_plate_temp_initial_layer, specs.bed_temp_max),
        ("textured_plate_temp", specs.textured_plate_temp, specs.textured_plate_temp_initial_layer, textured_fallback),
    )
    for key, temp, initial, fallback in plates:
        put(key, _first(temp, fallback))
        put(f"{key}_initial_layer", _first(initial, temp, fallback))

    put_float("filament_max_volumetric_speed", specs.max_volumetric_speed, ".0f")
    put_float("filament_flow_ratio", specs.filament_flow_ratio, ".2f")
    put_float("pressure_advance", specs.pressure_advance, ".3f")

    fan_percent = specs.fan_speed_percent
    put("fan_max_speed", _first(specs.fan_max_speed, fan_percent))
    put("fan_min_speed", _first(specs.fan_min_speed, None if fan_percent is None else int(fan_percent * FAN_MIN_RATIO)))
    put("overhang_fan_speed", specs.overhang_fan_speed)
    put("close_fan_the_first_x_layers", specs.close_fan_the_first_x_layers)
    put("additional_cooling_fan_speed", specs.additional_cooling_fan_speed)

    put("slow_down_layer_time", specs.slow_down_layer_time)
    put("slow_down_min_speed", specs.slow_down_min_speed)

    put_float("filament_retraction_length", specs.retraction_distance_mm, ".1f")
    put("filament_retraction_speed", specs.retraction_speed_mm_s)
    put("filament_deretraction_speed", specs.deretraction_speed_mm_s)

    put("filament_bridge_speed", specs.bridge_speed)
    put_float("filament_density", specs.density_g_cm3, ".2f")
    put("temperature_vitrification", specs.temperature_vitrification)
    put_float("filament_cost", specs.filament_cost, ".2f")

    profile.set_dual("filament_type", specs.material)
    profile.set_dual("filament_vendor", specs.brand)


def _first_int(profile: Profile, key: str) -> Optional[int]:
    value = profile.get_first_array_value(key)
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def _first_float(profile: Profile, key: str) -> Optional[float]:
    value = profile.get_first_array_value(key)
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def extract_specs_from_profile(profile: Profile) -> FilamentSpecs:
    """Read a profile back into specs, e.g. to edit an installed preset."""
    range_high = _first_int(profile, "nozzle_temperature_range_high")
    return FilamentSpecs(
        name=profile.name or "",
        brand=profile.get_first("filament_vendor") or "",
        material=profile.get_first("filament_type") or "",
        nozzle_temp_min=_first_int(profile, "nozzle_temperature_range_low"),
        nozzle_temp_max=None if range_high is None else max(range_high - RANGE_HIGH_HEADROOM, 0),
        bed_temp_min=_first_int(profile, "cool_plate_temp"),
        bed_temp_max=_first_int(profile, "hot_plate_temp"),
        nozzle_temperature=_first_int(profile, "nozzle_temperature"),
        nozzle_temperature_initial_layer=_first_int(profile, "nozzle_temperature_initial_layer"),
        hot_plate_temp=_first_int(profile, "hot_plate_temp"),
        hot_plate_temp_initial_layer=_first_int(profile, "hot_plate_temp_initial_layer"),
        cool_plate_temp=_first_int(profile, "cool_plate_temp"),
        cool_plate_temp_initial_layer=_first_int(profile, "cool_plate_temp_initial_layer"),
        eng_plate_temp=_first_int(profile, "eng_plate_temp"),
        eng_plate_temp_initial_layer=_first_int(profile, "eng_plate_temp_initial_layer"),
        textured_plate_temp=_first_int(profile, "textured_plate_temp"),
        textured_plate_temp_initial_layer=_first_int(profile, "textured_plate_temp_initial_layer"),
        max_volumetric_speed=_first_float(profile, "filament_max_volumetric_speed"),
        filament_flow_ratio=_first_float(profile, "filament_flow_ratio"),
        pressure_advance=_first_float(profile, "pressure_advance"),
        fan_min_speed=_first_int(profile, "fan_min_speed"),
        fan_max_speed=_first_int(profile, "fan_max_speed"),
        overhang_fan_speed=_first_int(profile, "overhang_fan_speed"),
        close_fan_the_first_x_layers=_first_int(profile, "close_fan_the_first_x_layers"),
        additional_cooling_fan_speed=_first_int(profile, "additional_cooling_fan_speed"),
        slow_down_layer_time=_first_int(profile, "slow_down_layer_time"),
        slow_down_min_speed=_first_int(profile, "slow_down_min_speed"),
        retraction_distance_mm=_first_float(profile, "filament_retraction_length"),
        retraction_speed_mm_s=_first_int(profile, "filament_retraction_speed"),
        deretraction_speed_mm_s=_first_int(profile, "filament_deretraction_speed"),
        bridge_speed=_first_int(profile, "filament_bridge_speed"),
        density_g_cm3=_first_float(profile, "filament_density"),
        diameter_mm=_first_float(profile, "filament_diameter"),
        temperature_vitrification=_first_int(profile, "temperature_vitrification"),
        filament_cost=_first_float(profile, "filament_cost"),
        source_url="profile",
        extraction_confidence=1.0,
    )


def generate_profile(
    specs: FilamentSpecs,
    registry: ProfileRegistry,
    target_printer: Optional[str] = None,
    *,
    user_id: str = "",
    max_depth: int = MAX_INHERITANCE_DEPTH,
) -> GeneratedProfile:
    """Create a flattened user preset for ``specs``.

    The base is ``base_profile_name`` for the material family of ``specs``.
    Raises :class:`~bambumate.errors.BaseProfileNotFound` when the registry
    does not have it, and the usual resolution errors when its chain is
    broken.  Implausible spec values do not stop generation; they come back
    as ``warnings``.
    """
    material = MaterialType.classify(specs.material)
    base_name = base_profile_name(material)
    printer = target_printer or DEFAULT_PRINTER
    profile_name = f"{specs.brand} {specs.material} {specs.name} @{printer}"
    LOGGER.debug("Generating %r (material=%s, base=%r)", profile_name, material, base_name)

    base = registry.get_by_name(base_name)
    if base is None:
        raise BaseProfileNotFound(base_name, profile_name)
    profile = resolve_inheritance(base, registry, max_depth=max_depth)

    profile.set_string("name", profile_name)
    profile.set_string("inherits", "")
    profile.set_string("from", "User")
    profile.set_string("filament_id", generate_filament_id())
    profile.set_string("instantiation", "true")
    profile.set_dual("filament_settings_id", profile_name)

    apply_specs_to_profile(profile, specs)
    profile.set_string_array("compatible_printers", [])

    metadata = ProfileMetadata(
        user_id=user_id,
        setting_id=generate_setting_id(),
        updated_time=int(datetime.now(timezone.utc).timestamp()),
    )
    warnings = validate_specs(specs)
    for warning in warnings:
        LOGGER.warning("Spec warning for %r: %s", profile_name, warning.message)

    LOGGER.debug("Generated %r with %d fields from %r", profile_name, profile.field_count, base_name)
    return GeneratedProfile(
        profile=profile,
        metadata=metadata,
        filename=f"{profile_name}.json",
        warnings=warnings,
    )


__all__ = [
    "DEFAULT_PRINTER",
    "GeneratedProfile",
    "apply_specs_to_profile",
    "extract_specs_from_profile",
    "generate_filament_id",
    "generate_profile",
    "generate_setting_id",
]
