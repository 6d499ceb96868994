"""Name-indexed lookup of filament profiles."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .types import Profile

LOGGER = logging.getLogger(__name__)


class ProfileRegistry:
    """Read-only ``name -> Profile`` lookup used to resolve ``inherits`` chains."""

    def __init__(self, profiles: Optional[Mapping[str, Profile]] = None) -> None:
        self._profiles: Dict[str, Profile] = dict(profiles or {})

    @classmethod
    def from_profiles(cls, profiles: Iterable[Profile]) -> "ProfileRegistry":
        """Index profiles by their ``name`` field; later duplicates replace earlier ones."""
        by_name: Dict[str, Profile] = {}
        for profile in profiles:
            name = profile.name
            if not name:
                LOGGER.debug("Skipping profile without a name (%d fields)", profile.field_count)
                continue
            by_name[name] = profile
        return cls(by_name)

    @classmethod
    def from_directory(cls, directory: Path, *, recursive: bool = True) -> "ProfileRegistry":
        """Load every ``*.json`` profile found under ``directory``.

        Files that are not valid JSON objects are logged and skipped so that a
        single corrupt user preset does not hide the rest of the library.
        """
        if not directory.is_dir():
            LOGGER.warning("Profile directory %s does not exist", directory)
            return cls()
        pattern = "**/*.json" if recursive else "*.json"
        profiles: List[Profile] = []
        for path in sorted(directory.glob(pattern)):
            relative = path.relative_to(directory)
            if path.name.startswith("_") or any(part.startswith(".") for part in relative.parts):
                continue
            try:
                profiles.append(Profile.from_json(path.read_text(encoding="utf-8")))
            except (OSError, ValueError, json.JSONDecodeError) as exc:
                LOGGER.warning("Failed to load profile %s: %s", path, exc)
        registry = cls.from_profiles(profiles)
        LOGGER.info("Loaded %d profiles from %s", len(registry), directory)
        return registry

    def get_by_name(self, name: str) -> Optional[Profile]:
        return self._profiles.get(name)

    def names(self) -> List[str]:
        return sorted(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


__all__ = ["ProfileRegistry"]
