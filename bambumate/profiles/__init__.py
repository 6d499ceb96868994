"""Filament profile model, registry, inheritance resolution and generation."""
from __future__ import annotations

from .context import (
    default_profile_values,
    detect_material_type,
    extract_profile_values,
    format_change,
    parameter_display_info,
)
from .generator import (
    DEFAULT_PRINTER,
    GeneratedProfile,
    apply_specs_to_profile,
    extract_specs_from_profile,
    generate_filament_id,
    generate_profile,
    generate_setting_id,
)
from .inheritance import (
    MAX_INHERITANCE_DEPTH,
    SKIP_INHERIT_FIELDS,
    is_fully_flattened,
    is_nil_value,
    resolve_inheritance,
)
from .io import (
    backup_profile,
    info_path_for,
    read_profile,
    read_profile_metadata,
    restore_from_backup,
    write_profile_atomic,
    write_profile_metadata_atomic,
    write_profile_with_metadata,
)
from .registry import ProfileRegistry
from .types import EXTRUDER_SLOTS, ExtruderArray, Profile, ProfileMetadata, ProfileValue

__all__ = [
    "DEFAULT_PRINTER",
    "EXTRUDER_SLOTS",
    "ExtruderArray",
    "GeneratedProfile",
    "MAX_INHERITANCE_DEPTH",
    "Profile",
    "ProfileMetadata",
    "ProfileRegistry",
    "ProfileValue",
    "SKIP_INHERIT_FIELDS",
    "apply_specs_to_profile",
    "backup_profile",
    "default_profile_values",
    "detect_material_type",
    "extract_profile_values",
    "extract_specs_from_profile",
    "format_change",
    "generate_filament_id",
    "generate_profile",
    "generate_setting_id",
    "info_path_for",
    "is_fully_flattened",
    "is_nil_value",
    "parameter_display_info",
    "read_profile",
    "read_profile_metadata",
    "resolve_inheritance",
    "restore_from_backup",
    "write_profile_atomic",
    "write_profile_metadata_atomic",
    "write_profile_with_metadata",
]
