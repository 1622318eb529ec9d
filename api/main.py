"""
ScamRadar API — Main Application

POST /analyze           — Full assessment (Gemini + local indicators)
POST /score             — Local-only scoring against a given probability
POST /url/analyze       — Domain spoofing / suspicious URL check
GET  /indicators        — Indicator catalog
GET  /cache/stats       — Response cache statistics (admin)
POST /cache/clear       — Empty the response cache (admin)
POST /cache/reset-stats — Reset cache hit/miss counters (admin)
GET  /health            — Health check
"""

from __future__ import annotations

import base64
import binascii
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from scamradar import __version__
from scamradar.analyzer import analyze_submission, indicator_rows, score_content
from scamradar.auth import auth_enabled, require_admin_key
from scamradar.cache import response_cache
from scamradar.config import settings
from scamradar.domains import analyze_url
from scamradar.indicators import CATALOG, CATALOG_VERSION
from scamradar.llm import MediaPart
from scamradar.llm.factory import get_provider
from scamradar.logging import get_logger, setup_logging
from scamradar.scorer import risk_level
from scamradar.schemas.scan import (
    AnalyzeRequest,
    AssessmentResponse,
    CacheStatsResponse,
    CatalogResponse,
    HealthResponse,
    ScoreRequest,
    ScoreResponse,
    UrlAnalysisResponse,
    UrlAnalyzeRequest,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; /analyze will return 502")
    logger.info("ScamRadar API starting")
    yield
    logger.info("ScamRadar API shutting down")


app = FastAPI(
    title="ScamRadar API",
    description="Scam risk assessment: LLM judgment blended with a deterministic indicator scan",
    version=f"{__version__} (catalog {CATALOG_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["X-Admin-Key", "Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The assessment could not be completed."},
    )


# Lazy LLM provider
_llm = None


def _get_llm():
    global _llm
    if _llm is None:
        _llm = get_provider(
            settings.LLM_PROVIDER,
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
        )
    return _llm


def _decode_media(encoded: Optional[str], mime_type: str, field: str) -> Optional[MediaPart]:
    if not encoded:
        return None
    if "," in encoded and encoded.startswith("data:"):
        encoded = encoded.split(",", 1)[1]
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(400, f"{field} is not valid base64.")
    if not data:
        return None
    return MediaPart(data=data, mime_type=mime_type)


# ============================================================
# ROUTES
# ============================================================

@app.post("/analyze", response_model=AssessmentResponse)
async def analyze(request: AnalyzeRequest):
    """Assess a submission for scam risk."""
    image = _decode_media(request.image_base64, request.image_mime_type, "image_base64")
    audio = _decode_media(request.audio_base64, request.audio_mime_type, "audio_base64")

    try:
        result = await analyze_submission(
            request.content, llm=_get_llm(), image=image, audio=audio,
        )
    except Exception as e:
        logger.error(
            "LLM provider error during analysis",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        raise HTTPException(502, "LLM provider temporarily unavailable. Please try again.")

    return result


@app.post("/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    """Score content locally against an externally supplied probability."""
    detection, final, breakdown = score_content(
        request.content,
        api_percent=request.api_percent,
        explanation=request.explanation,
    )
    return {
        "risk_percentage": final,
        "risk_level": risk_level(final),
        "local_score": breakdown["local_score"],
        "indicators": indicator_rows(detection),
        "evaluations": detection.to_dict(),
        "score_breakdown": breakdown,
        "catalog_version": CATALOG_VERSION,
    }


@app.post("/url/analyze", response_model=UrlAnalysisResponse)
async def url_analyze(request: UrlAnalyzeRequest):
    """Check a single URL for spoofing and suspicious shapes."""
    return analyze_url(request.url).to_dict()


@app.get("/indicators", response_model=CatalogResponse)
async def indicators():
    """Return the indicator catalog."""
    return {
        "catalog_version": CATALOG_VERSION,
        "total": len(CATALOG),
        "max_possible_severity": CATALOG.max_possible_severity,
        "indicators": [d.to_dict() for d in CATALOG],
    }


@app.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(key_id: Optional[str] = Depends(require_admin_key)):
    return response_cache.get_stats()


@app.post("/cache/clear", response_model=CacheStatsResponse)
async def cache_clear(key_id: Optional[str] = Depends(require_admin_key)):
    """Empty the response cache and reset its counters."""
    await response_cache.clear()
    logger.info("Response cache cleared", extra={"cache_size": 0})
    return response_cache.get_stats()


@app.post("/cache/reset-stats", response_model=CacheStatsResponse)
async def cache_reset_stats(key_id: Optional[str] = Depends(require_admin_key)):
    """Reset cache hit/miss counters, keeping entries."""
    await response_cache.reset_stats()
    return response_cache.get_stats()


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check — no auth required."""
    return {
        "status": "operational",
        "version": __version__,
        "catalog_version": CATALOG_VERSION,
        "llm_provider": settings.LLM_PROVIDER,
        "llm_configured": bool(settings.GEMINI_API_KEY),
        "cache_entries": response_cache.size,
        "admin_auth_enabled": auth_enabled(),
    }


# ============================================================
# MIDDLEWARE
# ============================================================

MAX_BODY_BYTES = 10 * 1_048_576  # base64 media inflates uploads by ~4/3

SECURITY_HEADERS = {
    "X-ScamRadar-Version": __version__,
    "X-Catalog-Version": CATALOG_VERSION,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

UNLOGGED_PATHS = frozenset({"/health"})


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@app.middleware("http")
async def request_pipeline(request: Request, call_next):
    """Body limit, security headers and one access log line per request."""
    start = time.perf_counter()

    length = _declared_length(request)
    if length is not None and length > MAX_BODY_BYTES:
        response = JSONResponse(status_code=413, content={"detail": "Request body too large."})
    else:
        response = await call_next(request)

    response.headers.update(SECURITY_HEADERS)

    path = request.url.path
    if path not in UNLOGGED_PATHS:
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        logger.info(
            "%s %s -> %d (%sms)", request.method, path, response.status_code, duration_ms,
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
