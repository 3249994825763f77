"""
Unit tests for analysis/services/gateway_client.py

Covers the status decision table, envelope extraction, the retry/backoff
contract and typed failures. All HTTP goes through httpx.MockTransport.
"""

import json

import httpx
import pytest

from analysis.models.results import GatewayErr, GatewayErrorKind, GatewayOk
from analysis.services.gateway_client import (
    AttemptOutcome,
    GeminiGatewayClient,
    build_gateway_client,
    classify_status,
    extract_envelope_text,
)
from config import Settings
from shared.utils.exceptions import ConfigurationException


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _scripted_transport(*script):
    """Transport that replays `script` in order: httpx.Response or an exception to raise."""
    requests: list[httpx.Request] = []
    remaining = list(script)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        item = remaining.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.MockTransport(handler), requests


def _client(transport, sleep, **kwargs) -> GeminiGatewayClient:
    return GeminiGatewayClient(
        "fake-key",
        model="gemini-test",
        api_base="https://gemini.test/v1beta",
        http_client=httpx.AsyncClient(transport=transport),
        sleep=sleep,
        **kwargs,
    )


PROMPT = "Break down this problem: Two Sum"


# ---------------------------------------------------------------------------
# Decision table
# ---------------------------------------------------------------------------

class TestClassifyStatus:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_2xx_is_success(self, status):
        assert classify_status(status) is AttemptOutcome.success

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 599])
    def test_429_and_5xx_retry(self, status):
        assert classify_status(status) is AttemptOutcome.retry

    @pytest.mark.parametrize("status", [301, 400, 401, 403, 404, 422, 428, 430])
    def test_everything_else_rejects(self, status):
        assert classify_status(status) is AttemptOutcome.reject


class TestExtractEnvelopeText:
    def test_reads_first_part_text(self):
        envelope = {"candidates": [{"content": {"parts": [{"text": "{}"}, {"text": "ignored"}]}}]}
        assert extract_envelope_text(envelope) == "{}"

    @pytest.mark.parametrize("envelope", [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        ["not", "a", "dict"],
        None,
    ])
    def test_missing_text_returns_none(self, envelope):
        assert extract_envelope_text(envelope) is None


# ---------------------------------------------------------------------------
# Construction and request shape
# ---------------------------------------------------------------------------

class TestClientSetup:
    def test_endpoint_uses_model(self):
        client = GeminiGatewayClient("k", model="gemini-x", api_base="https://host/v1beta/")
        assert client.endpoint == "https://host/v1beta/models/gemini-x:generateContent"

    def test_backoff_delays_double(self):
        client = GeminiGatewayClient("k", model="m")
        assert [client.backoff_delay(k) for k in (1, 2, 3)] == [2.0, 4.0, 8.0]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            GeminiGatewayClient("k", model="m", max_attempts=0)

    def test_payload_requests_json_and_embeds_problem_once(self):
        client = GeminiGatewayClient("k", model="m")
        payload = client.build_payload(PROMPT, "Two Sum")
        assert payload["generationConfig"] == {"responseMimeType": "application/json"}
        assert payload["contents"][0]["parts"] == [{"text": PROMPT}]

    def test_payload_appends_problem_missing_from_prompt(self):
        client = GeminiGatewayClient("k", model="m")
        payload = client.build_payload("Generic instructions", "  Valid Parentheses ")
        assert payload["contents"][0]["parts"][1] == {"text": "Valid Parentheses"}

    @pytest.mark.asyncio
    async def test_blank_problem_is_a_precondition_error(self, recording_sleep):
        transport, requests = _scripted_transport()
        client = _client(transport, recording_sleep)
        with pytest.raises(ValueError):
            await client.fetch_breakdown(PROMPT, "   ")
        assert requests == []

    @pytest.mark.asyncio
    async def test_sends_api_key_header_and_body(self, recording_sleep, two_sum_response):
        transport, requests = _scripted_transport(two_sum_response)
        client = _client(transport, recording_sleep)

        await client.fetch_breakdown(PROMPT, "Two Sum")

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://gemini.test/v1beta/models/gemini-test:generateContent"
        assert request.headers["x-goog-api-key"] == "fake-key"
        assert "key=" not in str(request.url)
        assert json.loads(request.content)["contents"][0]["parts"][0]["text"] == PROMPT


# ---------------------------------------------------------------------------
# Success and retry contract
# ---------------------------------------------------------------------------

class TestFetchBreakdownRetries:
    @pytest.mark.asyncio
    async def test_first_attempt_success(self, recording_sleep, two_sum_response, sample_breakdown):
        transport, requests = _scripted_transport(two_sum_response)
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayOk)
        assert result.ok is True
        assert result.payload == sample_breakdown
        assert result.attempts == 1
        assert len(requests) == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_two_500s_then_success(self, recording_sleep, two_sum_response):
        transport, requests = _scripted_transport(
            httpx.Response(500, text="boom"),
            httpx.Response(500, text="boom"),
            two_sum_response,
        )
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayOk)
        assert result.attempts == 3
        assert len(requests) == 3
        assert recording_sleep.delays == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_network_error_is_retried(self, recording_sleep, two_sum_response):
        transport, requests = _scripted_transport(
            httpx.ConnectError("connection refused"),
            two_sum_response,
        )
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayOk)
        assert len(requests) == 2
        assert recording_sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_too_many_redirects_is_retried(self, recording_sleep, two_sum_response):
        transport, requests = _scripted_transport(
            httpx.TooManyRedirects("redirect loop"),
            two_sum_response,
        )
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayOk)
        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_429_is_retried(self, recording_sleep, two_sum_response):
        transport, _ = _scripted_transport(httpx.Response(429), two_sum_response)
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_exhaustion_does_not_sleep_after_last_attempt(self, recording_sleep):
        transport, requests = _scripted_transport(
            httpx.Response(503),
            httpx.ConnectError("down"),
            httpx.Response(429),
        )
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayErr)
        assert result.kind is GatewayErrorKind.network_exhausted
        assert result.attempts == 3
        assert result.status_code == 429
        assert len(requests) == 3
        assert recording_sleep.delays == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_403_is_terminal(self, recording_sleep):
        transport, requests = _scripted_transport(httpx.Response(403, text="forbidden"))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayErr)
        assert result.kind is GatewayErrorKind.upstream_rejected
        assert result.status_code == 403
        assert result.attempts == 1
        assert len(requests) == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_400_after_a_retry_is_terminal(self, recording_sleep):
        transport, requests = _scripted_transport(httpx.Response(500), httpx.Response(400))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert result.kind is GatewayErrorKind.upstream_rejected
        assert result.attempts == 2
        assert len(requests) == 2
        assert recording_sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_custom_attempt_budget(self, recording_sleep):
        transport, requests = _scripted_transport(httpx.Response(500))
        client = _client(transport, recording_sleep, max_attempts=1)
        result = await client.fetch_breakdown(PROMPT, "Two Sum")

        assert result.kind is GatewayErrorKind.network_exhausted
        assert len(requests) == 1
        assert recording_sleep.delays == []


# ---------------------------------------------------------------------------
# Malformed payloads
# ---------------------------------------------------------------------------

class TestMalformedPayload:
    @pytest.mark.asyncio
    async def test_body_not_json(self, recording_sleep):
        transport, _ = _scripted_transport(httpx.Response(200, text="<html>oops</html>"))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert result.kind is GatewayErrorKind.malformed_payload

    @pytest.mark.asyncio
    async def test_body_with_broken_content_encoding(self, recording_sleep):
        transport, requests = _scripted_transport(
            httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not-gzip"),
        )
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")

        assert isinstance(result, GatewayErr)
        assert result.kind is GatewayErrorKind.malformed_payload
        assert "could not be decoded" in result.detail
        assert len(requests) == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_envelope_without_candidates(self, recording_sleep):
        transport, _ = _scripted_transport(httpx.Response(200, json={"promptFeedback": {}}))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert result.kind is GatewayErrorKind.malformed_payload

    @pytest.mark.asyncio
    async def test_model_text_not_json(self, recording_sleep, model_response):
        transport, _ = _scripted_transport(model_response("Sure! Here is your breakdown..."))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert result.kind is GatewayErrorKind.malformed_payload
        assert "not valid JSON" in result.detail

    @pytest.mark.asyncio
    async def test_model_json_not_an_object(self, recording_sleep, model_response):
        transport, _ = _scripted_transport(model_response("[1, 2, 3]"))
        result = await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert result.kind is GatewayErrorKind.malformed_payload

    @pytest.mark.asyncio
    async def test_malformed_is_not_retried(self, recording_sleep, model_response):
        transport, requests = _scripted_transport(model_response("not json"))
        await _client(transport, recording_sleep).fetch_breakdown(PROMPT, "Two Sum")
        assert len(requests) == 1
        assert recording_sleep.delays == []


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestBuildGatewayClient:
    def test_missing_key_raises_configuration_exception(self):
        with pytest.raises(ConfigurationException) as exc_info:
            build_gateway_client(Settings(gemini_api_key=""))
        assert exc_info.value.setting_name == "GEMINI_API_KEY"

    def test_uses_settings(self):
        settings = Settings(
            gemini_api_key="abc",
            gemini_model="gemini-custom",
            gateway_max_attempts=5,
            gateway_backoff_base=3.0,
        )
        client = build_gateway_client(settings)
        assert client.api_key == "abc"
        assert client.model == "gemini-custom"
        assert client.max_attempts == 5
        assert client.backoff_delay(2) == 9.0

    def test_overrides_win(self, recording_sleep):
        client = build_gateway_client(Settings(gemini_api_key="abc"), sleep=recording_sleep, max_attempts=2)
        assert client.max_attempts == 2
