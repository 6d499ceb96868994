"""API routers."""
from __future__ import annotations

from . import evaluate, profiles

__all__ = ["evaluate", "profiles"]
