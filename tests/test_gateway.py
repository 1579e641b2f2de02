"""
Tests for the AI Gateway Client
===============================

Tests for:
- Code-fence stripping and JSON parsing of model output
- Status mapping of gateway failures
- Missing API key handling
"""

import httpx
import pytest

from pitchscout.errors import GatewayConfigurationError, GatewayError, ResponseParseError
from pitchscout.gateway import AIGatewayClient, parse_json_content, strip_code_fences


# =============================================================================
# FENCE STRIPPING
# =============================================================================

@pytest.mark.parametrize("content,expected", [
    ('```json\n{"a": 1}\n```', '{"a": 1}'),
    ('```json{"a": 1}```', '{"a": 1}'),
    ('Here you go:\n```\n{"a": 1}\n```\nEnjoy', '{"a": 1}'),
    ('{"a": 1}', '{"a": 1}'),
    ("no json at all", "no json at all"),
])
def test_strip_code_fences(content, expected):
    assert strip_code_fences(content) == expected


def test_json_fence_wins_over_plain_fence():
    content = '```\nplain\n```\n```json\n{"b": 2}\n```'
    assert strip_code_fences(content) == '{"b": 2}'


def test_parse_json_content_raises_with_given_message():
    with pytest.raises(ResponseParseError) as exc_info:
        parse_json_content("```json\n{broken\n```", "Failed to parse scouting report")
    assert exc_info.value.message == "Failed to parse scouting report"
    assert exc_info.value.status_code == 500


def test_parse_json_content_accepts_fenced_object():
    assert parse_json_content('```json\n{"overall_score": 70}\n```', "x") == {"overall_score": 70}


# =============================================================================
# STATUS MAPPING
# =============================================================================

@pytest.mark.parametrize("upstream,status,message", [
    (429, 429, "Rate limit exceeded. Please try again later."),
    (402, 402, "Payment required. Please add credits to continue."),
    (400, 500, "AI gateway error: 400"),
    (502, 500, "AI gateway error: 502"),
])
def test_from_status(upstream, status, message):
    error = GatewayError.from_status(upstream)
    assert error.status_code == status
    assert error.message == message
    assert error.upstream_status == upstream


# =============================================================================
# CLIENT
# =============================================================================

def _client(handler, api_key="key") -> AIGatewayClient:
    return AIGatewayClient(
        api_key=api_key,
        url="https://gateway.test/v1/chat/completions",
        model="test/model",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_complete_sends_bearer_key_and_returns_content():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

    gateway = _client(handler)
    assert await gateway.complete([{"role": "user", "content": "hi"}]) == "hello"
    assert seen[0].headers["authorization"] == "Bearer key"
    await gateway.client.aclose()


@pytest.mark.asyncio
async def test_failed_call_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, text="slow down")

    gateway = _client(handler)
    with pytest.raises(GatewayError) as exc_info:
        await gateway.complete([{"role": "user", "content": "hi"}])
    assert exc_info.value.status_code == 429
    assert len(calls) == 1
    await gateway.client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"choices": []},
    {"choices": [{"message": {"content": ""}}]},
    {"choices": [{"message": {}}]},
    {},
])
async def test_empty_content_is_an_error(body):
    gateway = _client(lambda request: httpx.Response(200, json=body))
    with pytest.raises(GatewayError) as exc_info:
        await gateway.complete([{"role": "user", "content": "hi"}])
    assert exc_info.value.message == "No content in AI response"
    await gateway.client.aclose()


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    gateway = _client(handler, api_key="")
    assert gateway.is_configured() is False
    with pytest.raises(GatewayConfigurationError) as exc_info:
        await gateway.complete([{"role": "user", "content": "hi"}])
    assert exc_info.value.message == "AI_GATEWAY_API_KEY is not configured"
    assert calls == []
    await gateway.client.aclose()


@pytest.mark.asyncio
async def test_open_stream_raises_mapped_error():
    gateway = _client(lambda request: httpx.Response(402, text="no credits"))
    with pytest.raises(GatewayError) as exc_info:
        await gateway.open_stream([{"role": "user", "content": "hi"}])
    assert exc_info.value.status_code == 402
    await gateway.client.aclose()
