"""Runtime settings for the profile tuning service."""
from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace


def _optional_path(name: str) -> Path | None:
    value = os.getenv(name)
    if not value:
        return None
    return Path(value).expanduser().resolve()


def _comma_separated_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


ENV = os.getenv("ENV", os.getenv("ENVIRONMENT", "development")).strip().lower()
ENVIRONMENT = os.getenv("ENVIRONMENT", ENV).strip().lower()
ALLOWED_CORS_ORIGINS = _comma_separated_list(os.getenv("ALLOWED_ORIGINS"))

# Custom defect rules; the packaged table is used when unset.
RULES_PATH = _optional_path("RULES_PATH")
# Directory of Bambu Studio filament profiles backing the registry.
PROFILES_DIR = _optional_path("PROFILES_DIR")

MAX_INHERITANCE_DEPTH = int(os.getenv("MAX_INHERITANCE_DEPTH", "10"))
if MAX_INHERITANCE_DEPTH < 1:
    raise RuntimeError("MAX_INHERITANCE_DEPTH must be at least 1")

BODY_MAX_MB = int(os.getenv("BODY_MAX_MB", "2"))
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

settings = SimpleNamespace(
    ENV=ENV,
    ENVIRONMENT=ENVIRONMENT,
    ALLOWED_ORIGINS=ALLOWED_CORS_ORIGINS,
    ALLOWED_CORS_ORIGINS=ALLOWED_CORS_ORIGINS,
    RULES_PATH=RULES_PATH,
    PROFILES_DIR=PROFILES_DIR,
    MAX_INHERITANCE_DEPTH=MAX_INHERITANCE_DEPTH,
    BODY_MAX_MB=BODY_MAX_MB,
    RATE_LIMIT_REQUESTS=RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS=RATE_LIMIT_WINDOW_SECONDS,
    LOG_LEVEL=LOG_LEVEL,
)

__all__ = [
    "ENV",
    "ENVIRONMENT",
    "ALLOWED_CORS_ORIGINS",
    "RULES_PATH",
    "PROFILES_DIR",
    "MAX_INHERITANCE_DEPTH",
    "BODY_MAX_MB",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
    "LOG_LEVEL",
    "settings",
]
