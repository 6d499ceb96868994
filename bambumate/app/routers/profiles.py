"""Profile registry, inheritance and generation endpoints."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from bambumate import services
from bambumate.errors import ResolutionError
from bambumate.models.api import GenerateRequest, GenerateResponse, ResolveRequest, ResolveResponse
from bambumate.profiles import Profile, generate_profile, is_fully_flattened, resolve_inheritance
from bambumate.settings import settings

router = APIRouter(tags=["profiles"])


def profile_from_payload(payload: Dict[str, Any]) -> Profile:
    return Profile.from_map(payload)


def resolve_or_422(profile: Profile) -> Profile:
    """Flatten ``profile`` against the shared registry, mapping failures to HTTP 422."""
    if is_fully_flattened(profile):
        return profile
    try:
        return resolve_inheritance(
            profile,
            services.PROFILE_REGISTRY,
            max_depth=settings.MAX_INHERITANCE_DEPTH,
        )
    except ResolutionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/profiles")
def list_profiles() -> List[str]:
    """Names of the profiles available as inheritance parents."""
    return services.PROFILE_REGISTRY.names()


@router.post("/profiles/resolve", response_model=ResolveResponse)
def resolve_profile(payload: ResolveRequest) -> ResolveResponse:
    if payload.name is not None:
        profile = services.PROFILE_REGISTRY.get_by_name(payload.name)
        if profile is None:
            raise HTTPException(status_code=404, detail=f"Profile '{payload.name}' was not found in the registry")
    else:
        profile = profile_from_payload(payload.profile or {})

    flattened = is_fully_flattened(profile)
    resolved = resolve_or_422(profile)
    return ResolveResponse(
        name=resolved.name,
        flattened=flattened,
        field_count=resolved.field_count,
        profile=resolved.to_dict(),
    )


@router.post("/profiles/generate", response_model=GenerateResponse)
def generate(payload: GenerateRequest) -> GenerateResponse:
    """Build a flattened user preset from filament specs; nothing is written to disk."""
    try:
        generated = generate_profile(
            payload.specs,
            services.PROFILE_REGISTRY,
            payload.target_printer,
            max_depth=settings.MAX_INHERITANCE_DEPTH,
        )
    except ResolutionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return GenerateResponse(
        name=generated.name or "",
        filename=generated.filename,
        field_count=generated.profile.field_count,
        profile=generated.profile.to_dict(),
        metadata=asdict(generated.metadata),
        info=generated.metadata.to_info_string(),
        warnings=generated.warnings,
    )
