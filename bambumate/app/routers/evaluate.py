"""Defect evaluation endpoints."""
from __future__ import annotations

from typing import Dict, List

import structlog
from fastapi import APIRouter

from bambumate import services
from bambumate.materials import MaterialType
from bambumate.models.api import DefectSummary, EvaluateRequest, EvaluateResponse
from bambumate.profiles import default_profile_values, detect_material_type, extract_profile_values
from bambumate.profiles.context import DEFAULT_MATERIAL

from .profiles import profile_from_payload, resolve_or_422

router = APIRouter(tags=["evaluate"])

_LOG = structlog.get_logger("evaluate")


@router.get("/defects", response_model=List[DefectSummary])
def list_defects() -> List[DefectSummary]:
    """Defect types the loaded rules know how to fix."""
    engine = services.RULE_ENGINE
    summaries: List[DefectSummary] = []
    for defect_type in engine.known_defect_types():
        info = engine.get_defect_info(defect_type)
        if info is None:
            continue
        summaries.append(
            DefectSummary(
                defect_type=defect_type,
                display_name=info.display_name,
                description=info.description,
            )
        )
    return summaries


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(payload: EvaluateRequest) -> EvaluateResponse:
    """Turn detected defects into ranked recommendations.

    Current values come from, in increasing precedence: built-in defaults
    (only when no profile is sent), the resolved ``profile``, and explicit
    ``current_values``.
    """
    current_values: Dict[str, float]
    material_text = payload.material
    if payload.profile is not None:
        resolved = resolve_or_422(profile_from_payload(payload.profile))
        current_values = extract_profile_values(resolved)
        if material_text is None:
            material_text = detect_material_type(resolved)
    else:
        current_values = {} if payload.current_values is not None else default_profile_values()
    if payload.current_values:
        current_values.update(payload.current_values)

    material = MaterialType.classify(material_text or DEFAULT_MATERIAL)
    result = services.RULE_ENGINE.evaluate(payload.defects, current_values, material)

    _LOG.info(
        "evaluate",
        material=str(material),
        defects=[defect.defect_type for defect in payload.defects],
        recommendations=len(result.recommendations),
        conflicts=len(result.conflicts),
        clamped=sum(1 for rec in result.recommendations if rec.was_clamped),
    )
    return EvaluateResponse(
        recommendations=result.recommendations,
        conflicts=result.conflicts,
        material=str(material),
        current_values=current_values,
    )
