"""Helpers that turn recommendations into profile edits."""
from __future__ import annotations

from .diff import apply, format_value, profile_diff

__all__ = ["apply", "format_value", "profile_diff"]
