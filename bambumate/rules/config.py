"""Defect rule tables and their TOML loader."""
from __future__ import annotations

import tomllib
from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bambumate.errors import RulesConfigError

DEFAULT_RULES_RESOURCE = "defect_rules.toml"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class DefectInfo(_Frozen):
    display_name: str
    description: str
    severity_range: Tuple[float, float] = (0.0, 1.0)


class Operation(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    SET = "set"


class Adjustment(_Frozen):
    parameter: str = Field(min_length=1)
    operation: Operation
    amount: float
    unit: str = ""
    priority: int = Field(ge=1)
    rationale: str = ""


class DefectRule(_Frozen):
    defect: str
    severity_min: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    adjustments: Tuple[Adjustment, ...]


class ConflictDefinition(_Frozen):
    name: str = ""
    description: str
    parameters: Tuple[str, ...]

    @field_validator("parameters")
    @classmethod
    def _non_empty(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("conflict definitions need at least one parameter")
        return value


class RulesConfig(_Frozen):
    """Defect catalogue, ordered rule list and known conflict groups."""

    defects: Dict[str, DefectInfo]
    rules: Tuple[DefectRule, ...]
    conflicts: Tuple[ConflictDefinition, ...] = ()


def parse_rules(text: str, *, source: str = "<string>") -> RulesConfig:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise RulesConfigError(f"Invalid TOML in {source}: {exc}") from exc
    try:
        return RulesConfig.model_validate(raw)
    except ValidationError as exc:
        raise RulesConfigError(f"Invalid rules in {source}: {exc}") from exc


def load_rules(path: Path) -> RulesConfig:
    """Load a custom rules file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise RulesConfigError(f"Unable to read rules file '{path}': {exc}") from exc
    return parse_rules(text, source=str(path))


def check_rules(config: RulesConfig) -> List[str]:
    """Consistency problems that schema validation cannot see."""
    problems: List[str] = []
    adjusted = set()
    for index, rule in enumerate(config.rules):
        if rule.defect not in config.defects:
            problems.append(f"rules[{index}] references unknown defect '{rule.defect}'")
        if not rule.adjustments:
            problems.append(f"rules[{index}] ({rule.defect}) has no adjustments")
        adjusted.update(adjustment.parameter for adjustment in rule.adjustments)
    for defect_type, info in config.defects.items():
        low, high = info.severity_range
        if not 0.0 <= low <= high <= 1.0:
            problems.append(f"defects.{defect_type} has invalid severity_range [{low}, {high}]")
    for definition in config.conflicts:
        unused = [param for param in definition.parameters if param not in adjusted]
        if unused:
            problems.append(
                f"conflict '{definition.name}' lists parameters no rule adjusts: {', '.join(unused)}"
            )
    return problems


@lru_cache(maxsize=1)
def default_rules() -> RulesConfig:
    """Rules shipped with the package, covering the seven common FDM defects."""
    text = resources.files("bambumate.data").joinpath(DEFAULT_RULES_RESOURCE).read_text(encoding="utf-8")
    return parse_rules(text, source=DEFAULT_RULES_RESOURCE)


__all__ = [
    "Adjustment",
    "ConflictDefinition",
    "DefectInfo",
    "DefectRule",
    "Operation",
    "RulesConfig",
    "check_rules",
    "default_rules",
    "load_rules",
    "parse_rules",
]
