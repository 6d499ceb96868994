"""Singleton services shared across FastAPI routers."""
from __future__ import annotations

import logging

from bambumate.profiles import ProfileRegistry
from bambumate.rules import RuleEngine, RulesConfig, default_rules, load_rules
from bambumate.settings import settings

LOGGER = logging.getLogger(__name__)


def build_rules() -> RulesConfig:
    if settings.RULES_PATH is not None:
        LOGGER.info("Loading defect rules from %s", settings.RULES_PATH)
        return load_rules(settings.RULES_PATH)
    return default_rules()


def build_registry() -> ProfileRegistry:
    if settings.PROFILES_DIR is None:
        return ProfileRegistry()
    return ProfileRegistry.from_directory(settings.PROFILES_DIR)


RULE_ENGINE = RuleEngine(build_rules())
PROFILE_REGISTRY = build_registry()

__all__ = ["PROFILE_REGISTRY", "RULE_ENGINE", "build_registry", "build_rules"]
