"""Exceptions raised by the profile and rules layers.

Messages are shown to users verbatim, so they name the profiles involved.
"""
from __future__ import annotations


class ProfileError(Exception):
    """Base class for profile handling failures."""


class ResolutionError(ProfileError):
    """An ``inherits`` chain could not be flattened."""


class ParentNotFound(ResolutionError):
    def __init__(self, name: str, referenced_by: str | None) -> None:
        self.name = name
        self.referenced_by = referenced_by
        super().__init__(
            f"Parent profile not found: {name!r} (referenced by {referenced_by or '<unnamed>'!r})"
        )


class BaseProfileNotFound(ParentNotFound):
    """The system profile a new filament is generated from is not in the registry."""

    def __init__(self, name: str, referenced_by: str | None = None) -> None:
        super().__init__(name, referenced_by)
        self.args = (
            f"Base profile {name!r} not found in registry. Are the Bambu Studio system profiles installed?",
        )


class CircularInheritance(ResolutionError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Circular inheritance detected: {name!r} already visited in chain")


class DepthExceeded(ResolutionError):
    def __init__(self, limit: int, profile_name: str | None = None) -> None:
        self.limit = limit
        self.profile_name = profile_name
        super().__init__(
            f"Inheritance chain exceeds maximum depth of {limit} "
            f"for profile {profile_name or '<unnamed>'!r}"
        )


class RulesConfigError(ValueError):
    """A defect rules file could not be read or failed validation."""


__all__ = [
    "BaseProfileNotFound",
    "CircularInheritance",
    "DepthExceeded",
    "ParentNotFound",
    "ProfileError",
    "ResolutionError",
    "RulesConfigError",
]
