"""Data models exchanged with the rule engine and the HTTP API."""
from __future__ import annotations

from .api import (
    Conflict,
    DefectSummary,
    DetectedDefect,
    EvaluateRequest,
    EvaluateResponse,
    EvaluationResult,
    Recommendation,
    ResolveRequest,
    ResolveResponse,
)

__all__ = [
    "Conflict",
    "DefectSummary",
    "DetectedDefect",
    "EvaluateRequest",
    "EvaluateResponse",
    "EvaluationResult",
    "Recommendation",
    "ResolveRequest",
    "ResolveResponse",
]
