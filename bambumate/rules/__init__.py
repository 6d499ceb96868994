"""Rules that translate detected defects into profile recommendations."""
from __future__ import annotations

from .clamp import clamp_to_safe_range, safe_range
from .config import (
    Adjustment,
    ConflictDefinition,
    DefectInfo,
    DefectRule,
    Operation,
    RulesConfig,
    check_rules,
    default_rules,
    load_rules,
    parse_rules,
)
from .engine import RuleEngine

__all__ = [
    "Adjustment",
    "ConflictDefinition",
    "DefectInfo",
    "DefectRule",
    "Operation",
    "RuleEngine",
    "RulesConfig",
    "check_rules",
    "clamp_to_safe_range",
    "default_rules",
    "load_rules",
    "parse_rules",
    "safe_range",
]
