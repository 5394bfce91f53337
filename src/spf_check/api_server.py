"""HTTP front end for the SPF chain resolver.

Endpoints:
  GET /health                                      liveness, empty 200
  GET /api/v1/check-spf?domain=<root>&target=<t>  one chain resolution

Every request builds its own fetcher and resolver; nothing is shared
between requests.
"""

import logging
import time
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from . import __version__
from .config import Settings, load_settings
from .dns_fetcher import create_fetcher
from .exceptions import SpfCheckError
from .report_json import JsonReporter
from .spf_resolver import SpfChainResolver, normalize_domain

logger = logging.getLogger(__name__)


# ── App ────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="SPF Chain Check API",
    description="Checks whether a target domain is included in a domain's SPF chain.",
    version=__version__,
)

_reporter = JsonReporter()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Loaded on first use, not at import time."""
    return load_settings()


# ── Response models ────────────────────────────────────────────────────────────

class SpfCheckResponse(BaseModel):
    found: bool
    checked_domains: int
    domain: str
    target: str
    elapsed_ms: int
    has_spf_record: bool
    spf_record: Optional[str] = None
    included_domains: Optional[list[str]] = None


class ErrorResponse(BaseModel):
    error: str


# ── Error helpers ──────────────────────────────────────────────────────────────

def _error_response(message: str, http_status: int) -> JSONResponse:
    return JSONResponse(status_code=http_status, content=ErrorResponse(error=message).model_dump())


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


# ── Routes ─────────────────────────────────────────────────────────────────────

@app.get("/health", tags=["system"])
def health() -> Response:
    return Response(status_code=200)


@app.get(
    "/api/v1/check-spf",
    tags=["spf"],
    response_model=SpfCheckResponse,
    responses={404: {"model": ErrorResponse}},
)
def check_spf(
    domain: str = Query(..., min_length=1),
    target: str = Query(..., min_length=1),
    settings: Settings = Depends(get_settings),
):
    """Resolve the SPF chain of *domain* and report whether *target* is included."""
    for name, value in (("domain", domain), ("target", target)):
        if not normalize_domain(value):
            return _error_response(f"Invalid request: {name} must not be empty", 400)

    start = time.monotonic()
    resolver = SpfChainResolver(create_fetcher(settings))

    try:
        result = resolver.resolve(domain, target)
    except SpfCheckError as exc:
        logger.warning(
            'Failed to check "%s" for "%s": %s (%dms)', domain, target, exc, _elapsed_ms(start)
        )
        return _error_response(str(exc), settings.error_status)

    elapsed_ms = _elapsed_ms(start)
    logger.info('Successfully checked "%s" for "%s" (%dms)', domain, target, elapsed_ms)
    return JSONResponse(status_code=200, content=_reporter.to_dict(result, domain, target, elapsed_ms))


# ── Global exception handlers ──────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return _error_response(f"Invalid request: {problems}", 400)


@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response("internal error", 500)
