"""
FastAPI application for the SoulMatch compatibility report service
"""
import logging
from datetime import datetime
from functools import lru_cache
from typing import AsyncIterator, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from ai.analysis_engine import generate_cache_key
from ai.llm_client import AIConfig, LLMClient, select_client
from ai.report_cache import ReportCache, build_report_cache
from core.app_logging import setup_logging
from core.codec import decode_soul
from core.errors import CatalogLengthMismatch, ScenarioMismatch, VendorConfigurationFailure
from core.settings import Settings
from matching.compatibility import check_catalog_length, generate_ai_context

load_dotenv()

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def get_report_cache() -> ReportCache:
    settings = get_settings()
    return build_report_cache(settings.redis_url, settings.cache_ttl_seconds)


def get_llm_factory():
    """Dependency returning the vendor selector; overridden in tests."""
    return select_client


setup_logging(get_settings().log_level)

app = FastAPI(title="SoulMatch Report API", version="2.2.0")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Report generation request from the analysis client"""
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    stream: bool = False
    config: Optional[AIConfig] = None
    cache_key: Optional[str] = Field(default=None, alias="cacheKey")


class MatchRequest(BaseModel):
    """Two soul hashes to compare"""
    host: str
    guest: str


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(400, "Invalid request body", str(exc.errors()[:3]))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[Analyze] Unhandled error on %s", request.url.path)
    return error_response(500, "Failed to generate analysis", str(exc))


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/")
@app.get("/health")
async def health_check(cache: ReportCache = Depends(get_report_cache)):
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "soulmatch-report",
        "cache": getattr(cache, "enabled", False),
        "timestamp": datetime.now().isoformat()
    }


# ============================================================================
# REPORT ENDPOINT
# ============================================================================

async def _relay_stream(
    first_chunk: str,
    chunks: AsyncIterator[str],
    cache: ReportCache,
    cache_key: Optional[str],
) -> AsyncIterator[bytes]:
    """Forward vendor deltas as raw text and write the full report back once done."""
    full_text = first_chunk
    if first_chunk:
        yield first_chunk.encode("utf-8")

    try:
        async for chunk in chunks:
            full_text += chunk
            yield chunk.encode("utf-8")
    except Exception as e:
        # Headers are already sent; abort the body so the client sees the failure.
        logger.error("[Analyze] Streaming Error: %s", e)
        raise

    if cache_key and full_text:
        logger.info("[Analyze] Streaming complete. Writing to cache.")
        await cache.set(cache_key, full_text)


@app.post("/api/analyze")
async def analyze(
    body: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
    cache: ReportCache = Depends(get_report_cache),
    llm_factory=Depends(get_llm_factory),
):
    """Return a cached report as JSON, or generate one (streamed as text/plain when asked)"""
    if not body.prompt:
        return error_response(400, "Prompt is required")

    # Cache check
    if body.cache_key:
        logger.info("[Analyze] Checking cache for key: %s", body.cache_key[:80])
        cached_report = await cache.get(body.cache_key)
        if cached_report:
            logger.info("[Analyze] Cache HIT: Returning cached report.")
            return JSONResponse({"reportText": cached_report})

    logger.info("[Analyze] Analyzing prompt: %s...", body.prompt[:50])

    try:
        llm: LLMClient = llm_factory(body.config, settings)
    except VendorConfigurationFailure as e:
        return error_response(500, e.message)

    try:
        if body.stream:
            chunks = llm.stream(body.prompt).__aiter__()
            # Pull the first delta before answering so dispatch failures still get a JSON error.
            try:
                first_chunk = await chunks.__anext__()
            except StopAsyncIteration:
                first_chunk = ""

            return StreamingResponse(
                _relay_stream(first_chunk, chunks, cache, body.cache_key),
                media_type="text/plain; charset=utf-8",
            )

        report_text = await llm.generate(body.prompt)
    except Exception as e:
        logger.exception("[Analyze] API Error")
        return error_response(500, "Failed to generate analysis", str(e))

    if body.cache_key and report_text:
        logger.info("[Analyze] Non-streaming complete. Writing to cache.")
        await cache.set(body.cache_key, report_text)

    return JSONResponse({"reportText": report_text})


# ============================================================================
# MATCH ENDPOINT
# ============================================================================

@app.post("/api/match")
async def match(body: MatchRequest):
    """Decode two soul hashes and score them locally (no AI call)"""
    host_profile = decode_soul(body.host)
    if host_profile is None:
        return error_response(400, "invalid code", "The invite code is invalid or damaged.")

    guest_profile = decode_soul(body.guest)
    if guest_profile is None:
        return error_response(400, "invalid code", "Your code is invalid, please check it.")

    try:
        context = generate_ai_context(host_profile, guest_profile)
        check_catalog_length(host_profile)
        check_catalog_length(guest_profile)
    except ScenarioMismatch as e:
        return error_response(409, "scenario mismatch", e.message)
    except CatalogLengthMismatch as e:
        return error_response(422, "catalog length mismatch", e.message)

    return {
        "score": context.match_score,
        "scenario": context.scenario.value,
        "summary": f"Soul compatibility from your answers: {context.match_score}%",
        "comparisonMatrix": [c.to_dict() for c in context.comparison_matrix],
        "cacheKey": generate_cache_key(host_profile, guest_profile),
    }
