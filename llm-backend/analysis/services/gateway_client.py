"""
AI Gateway Client

Sends the structured prompt to the Gemini REST API and returns exactly one
GatewayResult. Expected failures never raise past this boundary.

Retry policy (attempts run one after another, never in parallel):

    request error           -> retry
    undecodable body        -> terminal (malformed_payload)
    2xx                     -> success, parse envelope
    429, 5xx                -> retry
    any other status        -> terminal (upstream_rejected)

Before retry k (k = number of failed attempts so far) the client waits
backoff_base ** k seconds. There is no wait after the final attempt.
"""

import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import httpx

from analysis.models.results import GatewayErr, GatewayErrorKind, GatewayOk, GatewayResult
from config import Settings, get_settings
from shared.utils.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class AttemptOutcome(str, Enum):
    success = "success"
    retry = "retry"
    reject = "reject"


# (first status, last status, outcome); first match wins, no match rejects
STATUS_DECISION_TABLE: tuple[tuple[int, int, AttemptOutcome], ...] = (
    (200, 299, AttemptOutcome.success),
    (429, 429, AttemptOutcome.retry),
    (500, 599, AttemptOutcome.retry),
)


def classify_status(status_code: int) -> AttemptOutcome:
    for first, last, outcome in STATUS_DECISION_TABLE:
        if first <= status_code <= last:
            return outcome
    return AttemptOutcome.reject


def extract_envelope_text(envelope: Any) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None if the envelope lacks it."""
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiGatewayClient:
    """
    Gateway to the generative model.

    `http_client` and `sleep` are injectable so the retry contract can be
    exercised with httpx.MockTransport and a recording sleep.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        max_attempts: int = 3,
        backoff_base: float = 2.0,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.timeout = timeout
        self._http_client = http_client
        self._sleep = sleep

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def backoff_delay(self, failed_attempts: int) -> float:
        """Seconds to wait before the retry that follows `failed_attempts` failures."""
        return self.backoff_base ** failed_attempts

    def build_payload(self, prompt_spec: str, problem_text: str) -> dict[str, Any]:
        parts = [{"text": prompt_spec}]
        if problem_text.strip() not in prompt_spec:
            parts.append({"text": problem_text.strip()})
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

    async def fetch_breakdown(self, prompt_spec: str, problem_text: str) -> GatewayResult:
        """Request a breakdown for `problem_text`. Resolves once, to GatewayOk or GatewayErr."""
        if not problem_text or not problem_text.strip():
            raise ValueError("problem_text must be non-empty")

        payload = self.build_payload(prompt_spec, problem_text)
        if self._http_client is not None:
            return await self._run_attempts(self._http_client, payload)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._run_attempts(client, payload)

    async def _run_attempts(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> GatewayResult:
        start_time = time.time()
        last_error = ""
        last_status: Optional[int] = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay = self.backoff_delay(attempt - 1)
                logger.warning(
                    f"{self.model} attempt {attempt - 1}/{self.max_attempts} failed ({last_error}). "
                    f"Retrying in {delay}s..."
                )
                await self._sleep(delay)

            try:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.api_key},
                    timeout=self.timeout,
                )
            except httpx.DecodingError as e:
                # The body arrived but could not be decoded (bad Content-Encoding).
                logger.error(f"Undecodable {self.model} response: {e}")
                return self._malformed(f"response body could not be decoded: {e}", attempt, start_time)
            except httpx.RequestError as e:
                last_error = f"network error: {e.__class__.__name__}: {e}"
                last_status = None
                continue

            outcome = classify_status(response.status_code)

            if outcome is AttemptOutcome.success:
                return self._parse_response(response, attempt, start_time)

            if outcome is AttemptOutcome.reject:
                self._log_finished("rejected", attempt, start_time, status_code=response.status_code)
                logger.error(
                    f"{self.model} rejected request: {response.status_code} - {response.text[:500]}"
                )
                return GatewayErr(
                    kind=GatewayErrorKind.upstream_rejected,
                    detail=f"HTTP {response.status_code}",
                    attempts=attempt,
                    status_code=response.status_code,
                )

            last_error = f"HTTP {response.status_code}"
            last_status = response.status_code
            logger.error(
                f"Attempt {attempt}: error from {self.model}: {response.status_code} - {response.text[:500]}"
            )

        self._log_finished("failed", self.max_attempts, start_time, error=last_error)
        return GatewayErr(
            kind=GatewayErrorKind.network_exhausted,
            detail=f"failed after {self.max_attempts} attempts; last error: {last_error}",
            attempts=self.max_attempts,
            status_code=last_status,
        )

    def _parse_response(self, response: httpx.Response, attempt: int, start_time: float) -> GatewayResult:
        try:
            envelope = response.json()
        except ValueError:
            return self._malformed("response body is not JSON", attempt, start_time)

        text = extract_envelope_text(envelope)
        if text is None:
            logger.error(f"Unexpected {self.model} response structure: {str(envelope)[:500]}")
            return self._malformed("envelope has no candidates[0].content.parts[0].text", attempt, start_time)

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse model JSON: {text[:200]}...")
            return self._malformed(f"model text is not valid JSON: {e}", attempt, start_time)

        if not isinstance(parsed, dict):
            return self._malformed(f"model JSON is a {type(parsed).__name__}, not an object", attempt, start_time)

        self._log_finished("complete", attempt, start_time, response_length=len(text))
        return GatewayOk(payload=parsed, attempts=attempt)

    def _malformed(self, detail: str, attempt: int, start_time: float) -> GatewayErr:
        self._log_finished("malformed", attempt, start_time, error=detail)
        return GatewayErr(kind=GatewayErrorKind.malformed_payload, detail=detail, attempts=attempt)

    def _log_finished(self, status: str, attempts: int, start_time: float, **extra: Any) -> None:
        logger.info(json.dumps({
            "step": "GATEWAY_CALL",
            "status": status,
            "model": self.model,
            "attempts": attempts,
            "duration_ms": int((time.time() - start_time) * 1000),
            **extra,
        }))


def build_gateway_client(settings: Optional[Settings] = None, **overrides: Any) -> GeminiGatewayClient:
    """Create a client from settings. Raises ConfigurationException when no API key is set."""
    settings = settings or get_settings()
    if not settings.gemini_api_key:
        raise ConfigurationException("GEMINI_API_KEY")

    kwargs = dict(
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        max_attempts=settings.gateway_max_attempts,
        backoff_base=settings.gateway_backoff_base,
        timeout=settings.gateway_timeout,
    )
    kwargs.update(overrides)
    return GeminiGatewayClient(settings.gemini_api_key, **kwargs)
