"""Flatten ``inherits`` chains into a single self-contained profile."""
from __future__ import annotations

import copy
import logging
from typing import Any, List, Set

from bambumate.errors import CircularInheritance, DepthExceeded, ParentNotFound

from .registry import ProfileRegistry
from .types import Profile

LOGGER = logging.getLogger(__name__)

NIL = "nil"
MAX_INHERITANCE_DEPTH = 10

# Identity and metadata fields that belong to the profile defining them.
# Ancestors never pass these down; the leaf's own values are applied last.
SKIP_INHERIT_FIELDS = frozenset(
    {
        "inherits",
        "name",
        "type",
        "from",
        "instantiation",
        "filament_id",
        "setting_id",
        "include",
        "description",
        "compatible_printers",
        "compatible_prints",
        "compatible_printers_condition",
        "compatible_prints_condition",
        "filament_settings_id",
    }
)


def is_nil_value(value: Any) -> bool:
    """True for ``"nil"`` and for non-empty arrays made only of ``"nil"``."""
    if isinstance(value, str):
        return value == NIL
    if isinstance(value, list):
        return bool(value) and all(item == NIL for item in value)
    return False


def is_fully_flattened(profile: Profile) -> bool:
    """User presets exported by Bambu Studio usually have an empty ``inherits``."""
    return not profile.inherits


def _build_chain(profile: Profile, registry: ProfileRegistry, max_depth: int) -> List[Profile]:
    chain: List[Profile] = [profile]
    visited: Set[str] = set()
    if profile.name:
        visited.add(profile.name)
    if "include" in profile:
        LOGGER.debug("Profile %r has include field %r (not resolved)", profile.name, profile.get_raw("include"))

    current = profile
    while current.inherits:
        parent_name = current.inherits
        if parent_name in visited:
            raise CircularInheritance(parent_name)
        if len(chain) >= max_depth:
            raise DepthExceeded(max_depth, profile.name)
        parent = registry.get_by_name(parent_name)
        if parent is None:
            raise ParentNotFound(parent_name, current.name)
        visited.add(parent_name)
        if "include" in parent:
            LOGGER.debug("Parent profile %r has include field %r (not resolved)", parent_name, parent.get_raw("include"))
        chain.append(parent)
        current = parent
    return chain


def resolve_inheritance(
    profile: Profile,
    registry: ProfileRegistry,
    max_depth: int = MAX_INHERITANCE_DEPTH,
) -> Profile:
    """Return ``profile`` with every inherited field materialised.

    Fields are merged from the root ancestor toward the leaf.  Ancestors
    contribute everything except :data:`SKIP_INHERIT_FIELDS`; the leaf then
    contributes all of its fields.  ``"nil"`` values, at any level, keep
    whatever an earlier ancestor established.

    Raises :class:`~bambumate.errors.ResolutionError` subclasses for missing
    parents, cycles and chains longer than ``max_depth``.  Neither input is
    modified.
    """
    chain = _build_chain(profile, registry, max_depth)
    chain.reverse()

    resolved: dict[str, Any] = {}
    for ancestor in chain[:-1]:
        for key, value in ancestor.items():
            if key in SKIP_INHERIT_FIELDS or is_nil_value(value):
                continue
            resolved[key] = copy.deepcopy(value)

    for key, value in profile.items():
        if is_nil_value(value):
            continue
        resolved[key] = copy.deepcopy(value)

    if len(chain) > 1:
        LOGGER.debug(
            "Resolved %r through %d ancestors into %d fields",
            profile.name,
            len(chain) - 1,
            len(resolved),
        )
    return Profile(resolved)


__all__ = [
    "MAX_INHERITANCE_DEPTH",
    "NIL",
    "SKIP_INHERIT_FIELDS",
    "is_fully_flattened",
    "is_nil_value",
    "resolve_inheritance",
]
