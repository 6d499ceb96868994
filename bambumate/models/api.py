"""Pydantic models shared between the API layer and the rule engine."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bambumate.materials import FilamentSpecs, ValidationWarning


class DetectedDefect(BaseModel):
    """A print defect reported by image analysis."""

    model_config = ConfigDict(frozen=True)

    defect_type: str
    severity: float = Field(ge=0.0, le=1.0, description="0 = barely visible, 1 = severe")
    confidence: float = Field(ge=0.0, le=1.0, description="Detector confidence in the finding")


class Recommendation(BaseModel):
    """Suggested new value for one parameter, tied to the defect motivating it."""

    model_config = ConfigDict(frozen=True)

    defect: str
    parameter: str
    current_value: float
    recommended_value: float
    priority: int = Field(ge=1)
    rationale: str
    was_clamped: bool = False

    @property
    def delta(self) -> float:
        return self.recommended_value - self.current_value


class Conflict(BaseModel):
    """Two or more defects asking for incompatible changes."""

    model_config = ConfigDict(frozen=True)

    parameter: str
    conflicting_defects: List[str]
    description: str


class EvaluationResult(BaseModel):
    recommendations: List[Recommendation] = Field(default_factory=list)
    conflicts: List[Conflict] = Field(default_factory=list)


class DefectSummary(BaseModel):
    defect_type: str
    display_name: str
    description: str


class EvaluateRequest(BaseModel):
    """Payload for POST /api/evaluate."""

    defects: List[DetectedDefect] = Field(default_factory=list)
    current_values: Optional[Dict[str, float]] = Field(
        default=None, description="Current profile values; defaults are used when omitted"
    )
    material: Optional[str] = Field(default=None, description="Material text, e.g. 'PLA Basic'")
    profile: Optional[Dict[str, Any]] = Field(
        default=None, description="Raw profile JSON to read current values and material from"
    )


class EvaluateResponse(EvaluationResult):
    material: str
    current_values: Dict[str, float]


class ResolveRequest(BaseModel):
    """Payload for POST /api/profiles/resolve; exactly one of ``name`` or ``profile``."""

    name: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _one_source(self) -> "ResolveRequest":
        if (self.name is None) == (self.profile is None):
            raise ValueError("Provide exactly one of 'name' or 'profile'")
        return self


class ResolveResponse(BaseModel):
    name: Optional[str] = None
    flattened: bool
    field_count: int
    profile: Dict[str, Any]


class GenerateRequest(BaseModel):
    """Payload for POST /api/profiles/generate."""

    specs: FilamentSpecs
    target_printer: Optional[str] = Field(default=None, description="Printer preset name; defaults to the H2C 0.4 nozzle")


class GenerateResponse(BaseModel):
    name: str
    filename: str
    field_count: int
    profile: Dict[str, Any]
    metadata: Dict[str, Any]
    info: str = Field(description="The .info sidecar as Bambu Studio writes it")
    warnings: List[ValidationWarning] = Field(default_factory=list)


__all__ = [
    "Conflict",
    "DefectSummary",
    "DetectedDefect",
    "EvaluateRequest",
    "EvaluateResponse",
    "EvaluationResult",
    "GenerateRequest",
    "GenerateResponse",
    "Recommendation",
    "ResolveRequest",
    "ResolveResponse",
]
