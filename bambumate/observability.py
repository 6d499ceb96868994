"""Structured logging and Prometheus metrics for the API process."""
import logging
import sys
import time

import structlog
from fastapi import FastAPI, Request
from prometheus_fastapi_instrumentator import Instrumentator

RESPONSE_TIME_HEADER = "X-Response-Time-Ms"


def init_logging(level: str = "INFO") -> None:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    logging.basicConfig(stream=sys.stdout, level=numeric_level)


def attach_instrumentation(app: FastAPI) -> None:
    Instrumentator(excluded_handlers=["/metrics"]).instrument(app).expose(app, endpoint="/metrics")

    @app.middleware("http")
    async def _latency(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(path=request.url.path, method=request.method)
        start = time.perf_counter()
        resp = await call_next(request)
        dur_ms = round((time.perf_counter() - start) * 1000, 2)
        resp.headers[RESPONSE_TIME_HEADER] = str(dur_ms)
        structlog.get_logger("bambumate.request").info(
            "req",
            status=resp.status_code,
            duration_ms=dur_ms,
        )
        return resp
