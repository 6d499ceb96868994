"""Bambu Studio filament profile model.

A profile is kept as the raw, ordered JSON object it was read from so that
the 100+ fields Bambu Studio writes survive untouched, including fields this
package knows nothing about.  Typed accessors cover the handful of fields the
tuning core reads or writes.

Values come in two shapes:

* a scalar string (``"name": "My PLA"``)
* an extruder array with one string per extruder slot
  (``"nozzle_temperature": ["220", "220"]``)

Everything else (numbers, booleans, nested objects) is preserved semantically,
not byte for byte: ``8.50`` is written back as ``8.5`` and ``\\u00e9`` escapes
come back as the literal character.  Bambu Studio only writes strings, so its
own files still round-trip exactly.
"""
from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

EXTRUDER_SLOTS = 2

ExtruderArray = Tuple[str, ...]
ProfileValue = Union[str, ExtruderArray]


def as_profile_value(raw: Any) -> Optional[ProfileValue]:
    """Return the typed view of a raw JSON value, or None if it has another shape."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        return tuple(raw)
    return None


def _first_number(raw: Any) -> Optional[float]:
    if isinstance(raw, list):
        if not raw:
            return None
        raw = raw[0]
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip().rstrip("%"))
        except ValueError:
            return None
    return None


class Profile:
    """Ordered field map for one filament profile."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(data or {})

    # ------------------------------------------------------------------
    @classmethod
    def from_json(cls, text: str) -> "Profile":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Profile JSON must be an object")
        return cls(data)

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> "Profile":
        return cls(copy.deepcopy(dict(data)))

    def to_json(self) -> str:
        """Serialise with 4-space indentation, matching Bambu Studio's own output."""
        text = json.dumps(self._data, indent=4, ensure_ascii=False)
        if not text.endswith("\n"):
            text += "\n"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def copy(self) -> "Profile":
        return Profile(copy.deepcopy(self._data))

    # ------------------------------------------------------------------
    @property
    def name(self) -> Optional[str]:
        return self._get_str("name")

    @property
    def inherits(self) -> Optional[str]:
        return self._get_str("inherits")

    @property
    def filament_id(self) -> Optional[str]:
        return self._get_str("filament_id")

    @property
    def setting_id(self) -> Optional[str]:
        return self._get_str("setting_id")

    @property
    def filament_type(self) -> Optional[str]:
        return self.get_first_array_value("filament_type")

    @property
    def nozzle_temperature(self) -> Optional[List[str]]:
        return self.get_string_array("nozzle_temperature")

    @property
    def compatible_printers(self) -> Optional[List[str]]:
        return self.get_string_array("compatible_printers")

    @property
    def filament_settings_id(self) -> Optional[List[str]]:
        return self.get_string_array("filament_settings_id")

    # ------------------------------------------------------------------
    def _get_str(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def get(self, key: str) -> Optional[ProfileValue]:
        return as_profile_value(self._data.get(key))

    def get_raw(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def get_first_array_value(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        if isinstance(value, list) and value and isinstance(value[0], str):
            return value[0]
        return None

    def get_string_array(self, key: str) -> Optional[List[str]]:
        value = self._data.get(key)
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        return None

    def get_first(self, key: str) -> Optional[str]:
        """First extruder slot for arrays, the value itself for scalars."""
        return self.get_first_array_value(key) or self._get_str(key)

    def get_float(self, key: str) -> Optional[float]:
        return _first_number(self._data.get(key))

    # ------------------------------------------------------------------
    def set_string(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def set_string_array(self, key: str, values: Sequence[str]) -> None:
        self._data[key] = [str(value) for value in values]

    def set_dual(self, key: str, value: str) -> None:
        """Write the same value into every extruder slot."""
        self.set_string_array(key, [value] * EXTRUDER_SLOTS)

    def set_raw(self, key: str, value: Any) -> None:
        self._data[key] = value

    # ------------------------------------------------------------------
    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(self._data.items())

    def keys(self) -> Iterator[str]:
        return iter(self._data.keys())

    @property
    def field_count(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return list(self._data.items()) == list(other._data.items())

    def __repr__(self) -> str:
        return f"Profile(name={self.name!r}, fields={self.field_count})"


INFO_FIELDS = ("sync_info", "user_id", "setting_id", "base_id", "updated_time")


@dataclass
class ProfileMetadata:
    """Contents of the ``.info`` file Bambu Studio keeps next to each user preset."""

    sync_info: str = ""
    user_id: str = ""
    setting_id: str = ""
    base_id: str = ""
    updated_time: int = 0

    def to_info_string(self) -> str:
        """``key = value`` lines; empty values are written as ``key =`` like Bambu Studio does."""
        lines = []
        for key in INFO_FIELDS:
            value = str(getattr(self, key))
            lines.append(f"{key} = {value}" if value else f"{key} =")
        return "\n".join(lines) + "\n"

    @classmethod
    def from_info_string(cls, text: str) -> "ProfileMetadata":
        meta = cls()
        for line in text.splitlines():
            if " = " in line:
                key, _, value = line.partition(" = ")
            elif line.endswith(" ="):
                key, value = line[:-2], ""
            else:
                continue
            key = key.strip()
            if key == "updated_time":
                try:
                    meta.updated_time = int(value)
                except ValueError:
                    meta.updated_time = 0
            elif key in INFO_FIELDS:
                setattr(meta, key, value)
        return meta


__all__ = [
    "EXTRUDER_SLOTS",
    "ExtruderArray",
    "INFO_FIELDS",
    "Profile",
    "ProfileMetadata",
    "ProfileValue",
    "as_profile_value",
]
