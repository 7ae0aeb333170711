"""
Analysis orchestrator: the client side of the report round trip.

Score and matrix are computed locally and never degrade. The narrative comes
from the report service (cache or live model), streamed to an observer as it
arrives. If the service stays unreachable the result still comes back, with
an offline report built from the prompt itself.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import httpx

from ai.llm_client import AIConfig
from ai.prompt_builder import OFFLINE_MARKER, create_ai_prompt
from core.errors import (
    AnalysisCancelled,
    ReportRequestFailed,
    SoulMatchError,
    TransientNetworkFailure,
)
from core.profile import PROFILE_VERSION, SoulProfile
from core.settings import DEFAULT_MODEL
from matching.compatibility import AIContext, ComparisonPoint, generate_ai_context
from questionnaires.catalog import catalog_length

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze"

MAX_RETRIES = 3
INITIAL_BACKOFF_SECONDS = 1.0
RETRYABLE_STATUSES = {429, 500, 502, 503, 504}

REQUEST_TIMEOUT = httpx.Timeout(90.0, connect=10.0)

# Placeholder for unnamed profiles in the name-based cache key.
ANONYMOUS_NAME = "anonymous"

RetryObserver = Callable[[int], None]
StreamObserver = Callable[[str], None]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class AnalysisResult:
    compatibility_score: int
    summary: str
    details: str
    comparison_matrix: list[ComparisonPoint] = field(default_factory=list)
    offline: bool = False

    def to_dict(self) -> dict:
        return {
            "compatibilityScore": self.compatibility_score,
            "summary": self.summary,
            "details": self.details,
            "comparisonMatrix": [c.to_dict() for c in self.comparison_matrix],
            "offline": self.offline,
        }


# ── Cache key ───────────────────────────────────────────────────────

def _answers_json(profile: SoulProfile) -> str:
    return json.dumps(list(profile.answers), separators=(",", ":"))


def generate_cache_key(profile_a: SoulProfile, profile_b: SoulProfile) -> str:
    """
    Order-independent key for a pair: swapping the profiles yields the
    same key, because compatibility is unordered.
    """
    version = max(profile_a.version or PROFILE_VERSION, profile_b.version or PROFILE_VERSION)

    if (len(profile_a.answers) != catalog_length(profile_a.scenario)
            or len(profile_b.answers) != catalog_length(profile_b.scenario)):
        logger.warning(
            "[Analysis] Answer length mismatch for caching (%d/%d vs %d/%d); using name-based key",
            len(profile_a.answers), catalog_length(profile_a.scenario),
            len(profile_b.answers), catalog_length(profile_b.scenario),
        )
        names = sorted([profile_a.name or ANONYMOUS_NAME, profile_b.name or ANONYMOUS_NAME])
        return f"match_v{version}_{'_'.join(names)}"

    parts = sorted([_answers_json(profile_a), _answers_json(profile_b)])
    return f"match_v{version}_{'|'.join(parts)}"


# ── Retry ───────────────────────────────────────────────────────────

async def _wait(delay: float, cancel: Optional[asyncio.Event], sleep: Sleep):
    if cancel is None:
        await sleep(delay)
        return

    sleeper = asyncio.ensure_future(sleep(delay))
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        sleeper.cancel()
        waiter.cancel()
    if cancel.is_set():
        raise AnalysisCancelled()


async def retry_request(
    client: httpx.AsyncClient,
    request: httpx.Request,
    retries: int = MAX_RETRIES,
    backoff: float = INITIAL_BACKOFF_SECONDS,
    on_retry: Optional[RetryObserver] = None,
    cancel: Optional[asyncio.Event] = None,
    sleep: Sleep = asyncio.sleep,
) -> httpx.Response:
    """
    Send `request`, retrying timeouts, transport errors and 429/5xx with
    exponential backoff (backoff, 2x, 4x ...). Returns an open, successful
    streaming response; the caller must close it.
    """
    attempt = 0
    delay = backoff

    while True:
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled()

        try:
            response = await client.send(request, stream=True)
        except httpx.TransportError as e:
            if attempt >= retries:
                raise TransientNetworkFailure(attempt + 1) from e
            logger.warning("[Analysis] Request failed with %s. Retrying in %.0fms... (Attempt %d)",
                           type(e).__name__, delay * 1000, attempt + 1)
        else:
            if response.is_success:
                return response

            status = response.status_code
            if status not in RETRYABLE_STATUSES:
                body = (await response.aread()).decode("utf-8", errors="replace")
                await response.aclose()
                raise ReportRequestFailed(status, body)

            await response.aclose()
            if attempt >= retries:
                raise TransientNetworkFailure(attempt + 1, status)
            logger.warning("[Analysis] Request failed with status %d. Retrying in %.0fms... (Attempt %d)",
                           status, delay * 1000, attempt + 1)

        attempt += 1
        if on_retry:
            on_retry(attempt)
        await _wait(delay, cancel, sleep)
        delay *= 2


# ── Response consumption ────────────────────────────────────────────

async def consume_report(
    response: httpx.Response,
    on_stream: Optional[StreamObserver] = None,
    cancel: Optional[asyncio.Event] = None,
) -> str:
    """
    Read a report body. A JSON body (cache hit) is delivered whole; a text
    stream is read chunk by chunk and the observer always receives the full
    text accumulated so far, never just the delta.
    """
    content_type = response.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        data = json.loads(await response.aread())
        text = (data.get("reportText") if isinstance(data, dict) else None) or ""
        if on_stream:
            on_stream(text)
        return text

    accumulated = ""
    async for chunk in response.aiter_text():
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled()
        if not chunk:
            continue
        accumulated += chunk
        if on_stream:
            on_stream(accumulated)
    return accumulated


# ── Entry points ────────────────────────────────────────────────────

def build_offline_result(context: AIContext, prompt: str) -> AnalysisResult:
    return AnalysisResult(
        compatibility_score=context.match_score,
        summary=f"Soul compatibility from your answers: {context.match_score}% (offline mode)",
        details=f"{OFFLINE_MARKER}\n\n{prompt}",
        comparison_matrix=context.comparison_matrix,
        offline=True,
    )


async def fetch_ai_analysis(
    profile_a: SoulProfile,
    profile_b: SoulProfile,
    *,
    client: httpx.AsyncClient,
    config: Optional[AIConfig] = None,
    on_retry: Optional[RetryObserver] = None,
    on_stream: Optional[StreamObserver] = None,
    cancel: Optional[asyncio.Event] = None,
    sleep: Sleep = asyncio.sleep,
) -> AnalysisResult:
    """
    Full analysis for a pair of profiles.

    `client` must point at the report service (its base_url). Raises
    ScenarioMismatch before any request if the profiles come from different
    tests, and AnalysisCancelled if `cancel` is set. Every network or vendor
    failure becomes an offline result instead.
    """
    context = generate_ai_context(profile_a, profile_b)
    prompt = create_ai_prompt(context)
    cache_key = generate_cache_key(profile_a, profile_b)

    body = {
        "prompt": prompt,
        "stream": True,
        "config": config.model_dump(by_alias=True, exclude_none=True) if config else None,
        "cacheKey": cache_key,
    }
    request = client.build_request("POST", ANALYZE_PATH, json=body, timeout=REQUEST_TIMEOUT)

    try:
        response = await retry_request(client, request, on_retry=on_retry, cancel=cancel, sleep=sleep)
        try:
            report_text = await consume_report(response, on_stream, cancel)
        finally:
            await response.aclose()
    except AnalysisCancelled:
        logger.info("[Analysis] Cancelled by caller")
        raise
    except (SoulMatchError, httpx.HTTPError, ValueError) as e:
        logger.error("[Analysis] AI Analysis Error: %s", e)
        return build_offline_result(context, prompt)

    return AnalysisResult(
        compatibility_score=context.match_score,
        summary=f"Soul compatibility from your answers: {context.match_score}%",
        details=report_text,
        comparison_matrix=context.comparison_matrix,
    )


async def check_ai_connection(
    endpoint: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    sleep: Sleep = asyncio.sleep,
):
    """
    Probe an endpoint from the settings screen. Our own /api/analyze gets a
    bare prompt; anything else an OpenAI-style chat body. Returns parsed
    JSON or raw text.
    """
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    probe = "Hello, this is a connection test."
    if endpoint.endswith(ANALYZE_PATH):
        body = {"prompt": probe}
    else:
        body = {"model": model or DEFAULT_MODEL, "messages": [{"role": "user", "content": probe}]}

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
    try:
        request = client.build_request("POST", endpoint, json=body, headers=headers)
        response = await retry_request(client, request, sleep=sleep)
        try:
            raw = await response.aread()
        finally:
            await response.aclose()
    finally:
        if owns_client:
            await client.aclose()

    if response.headers.get("content-type", "").startswith("application/json"):
        return json.loads(raw)
    return raw.decode("utf-8", errors="replace")
