"""Material classification and safe operating ranges."""
from __future__ import annotations

from .constraints import (
    FilamentSpecs,
    MaterialConstraints,
    ValidationWarning,
    base_profile_name,
    constraints_for_material,
    validate_specs,
)
from .types import MaterialFamily, MaterialType

__all__ = [
    "FilamentSpecs",
    "MaterialConstraints",
    "MaterialFamily",
    "MaterialType",
    "ValidationWarning",
    "base_profile_name",
    "constraints_for_material",
    "validate_specs",
]
