"""FastAPI entrypoint for the profile tuning service."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from bambumate import __version__, services
from bambumate.app.routers import evaluate as evaluate_router
from bambumate.app.routers import profiles as profiles_router
from bambumate.observability import attach_instrumentation, init_logging
from bambumate.settings import settings

app = FastAPI(title="BambuMate Tuning API", version=__version__)

# ---- Rate limiting ----
_rate_limit = (
    f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW_SECONDS} seconds"
)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_rate_limit],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than the configured cap."""

    def __init__(self, app, max_mb: int):
        super().__init__(app)
        self.max_bytes = max_mb * 1024 * 1024

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        if cl and cl.isdigit() and int(cl) > self.max_bytes:
            return JSONResponse(status_code=413, content={"detail": "Payload too large"})
        return await call_next(request)


app.add_middleware(BodySizeLimitMiddleware, max_mb=settings.BODY_MAX_MB)

init_logging(settings.LOG_LEVEL)
attach_instrumentation(app)


# Configure CORS differently for production vs development.
def _resolve_cors_origins() -> list[str]:
    if settings.ENVIRONMENT != "production":
        return ["*"]
    if not settings.ALLOWED_CORS_ORIGINS:
        raise RuntimeError(
            "ALLOWED_ORIGINS must be set when ENVIRONMENT=production"
        )
    return settings.ALLOWED_CORS_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.get("/health", tags=["ops"])
def health() -> dict[str, object]:
    """Simple readiness probe."""
    return {
        "status": "ok",
        "version": __version__,
        "defect_types": len(services.RULE_ENGINE.known_defect_types()),
        "profiles": len(services.PROFILE_REGISTRY),
        "custom_rules": settings.RULES_PATH is not None,
    }


app.include_router(evaluate_router.router, prefix="/api")
app.include_router(profiles_router.router, prefix="/api")

__all__ = ["app", "limiter"]
