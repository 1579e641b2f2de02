"""
Tests for Coach Chat
====================

Tests for:
- POST /api/v1/sports-coach-chat (streamed)
- GET /api/v1/chat/messages
"""

import pytest
from httpx import AsyncClient

from pitchscout.models import ChatIntent, ChatMessage, ChatRole
from pitchscout.prompts import CHAT_SYSTEM_PROMPTS
from pitchscout.sse import assemble_message


@pytest.mark.asyncio
async def test_stream_is_relayed_unchanged(client: AsyncClient, auth_headers, gateway_stub):
    expected = gateway_stub.reply_with_stream(["Work on ", "your first ", "touch. ⚽"])

    response = await client.post(
        "/api/v1/sports-coach-chat",
        json={"messages": [{"role": "user", "content": "How do I improve my control?"}]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.content == expected
    assert assemble_message([response.content]) == "Work on your first touch. ⚽"


@pytest.mark.asyncio
async def test_only_the_outbound_user_message_is_persisted(
    client: AsyncClient, session_factory, user_id, auth_headers, gateway_stub
):
    gateway_stub.reply_with_stream(["Sure."])

    await client.post(
        "/api/v1/sports-coach-chat",
        json={
            "messages": [
                {"role": "user", "content": "Hello coach"},
                {"role": "assistant", "content": "Hi! What can I help with?"},
                {"role": "user", "content": "Write my pitch to a club"},
            ],
            "intent": "pitch",
        },
        headers=auth_headers,
    )

    async with session_factory() as session:
        rows = (await session.execute(ChatMessage.__table__.select())).all()
    assert len(rows) == 1
    assert rows[0].user_id == user_id
    assert rows[0].content == "Write my pitch to a club"

    listing = await client.get("/api/v1/chat/messages", headers=auth_headers)
    assert listing.status_code == 200
    assert [(m["role"], m["intent"], m["content"]) for m in listing.json()] == [
        (ChatRole.USER.value, ChatIntent.PITCH.value, "Write my pitch to a club"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("intent", list(ChatIntent))
async def test_intent_selects_system_prompt(client: AsyncClient, auth_headers, gateway_stub, intent):
    gateway_stub.reply_with_stream(["ok"])

    await client.post(
        "/api/v1/sports-coach-chat",
        json={"messages": [{"role": "user", "content": "Help"}], "intent": intent.value},
        headers=auth_headers,
    )

    sent = gateway_stub.requests[0]
    assert sent["stream"] is True
    assert sent["messages"][0] == {"role": "system", "content": CHAT_SYSTEM_PROMPTS[intent]}
    assert sent["messages"][1:] == [{"role": "user", "content": "Help"}]


@pytest.mark.asyncio
async def test_missing_intent_defaults_to_general(client: AsyncClient, auth_headers, gateway_stub):
    gateway_stub.reply_with_stream(["ok"])

    await client.post(
        "/api/v1/sports-coach-chat",
        json={"messages": [{"role": "user", "content": "Help"}]},
        headers=auth_headers,
    )

    system = gateway_stub.requests[0]["messages"][0]["content"]
    assert system == CHAT_SYSTEM_PROMPTS[ChatIntent.GENERAL]


@pytest.mark.asyncio
@pytest.mark.parametrize("intent", ["tactics", "", None, 7])
async def test_unknown_intent_falls_back_to_general(client: AsyncClient, auth_headers, gateway_stub, intent):
    gateway_stub.reply_with_stream(["ok"])

    response = await client.post(
        "/api/v1/sports-coach-chat",
        json={"messages": [{"role": "user", "content": "Hi"}], "intent": intent},
        headers=auth_headers,
    )

    assert response.status_code == 200
    system = gateway_stub.requests[0]["messages"][0]["content"]
    assert system == CHAT_SYSTEM_PROMPTS[ChatIntent.GENERAL]

    listing = await client.get("/api/v1/chat/messages", headers=auth_headers)
    assert listing.json()[0]["intent"] == ChatIntent.GENERAL.value


@pytest.mark.asyncio
@pytest.mark.parametrize("upstream,status,message", [
    (429, 429, "Rate limit exceeded. Please try again later."),
    (402, 402, "Payment required. Please add credits to continue."),
    (500, 500, "AI gateway error: 500"),
])
async def test_upstream_errors_before_streaming(
    client: AsyncClient, auth_headers, gateway_stub, upstream, status, message
):
    gateway_stub.reply_with_status(upstream)

    response = await client.post(
        "/api/v1/sports-coach-chat",
        json={"messages": [{"role": "user", "content": "Hi"}]},
        headers=auth_headers,
    )

    assert response.status_code == status
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": message}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"messages": []},
    {"messages": [{"role": "robot", "content": "Hi"}]},
])
async def test_invalid_chat_bodies_are_422(client: AsyncClient, auth_headers, gateway_stub, body):
    response = await client.post("/api/v1/sports-coach-chat", json=body, headers=auth_headers)
    assert response.status_code == 422
    assert gateway_stub.requests == []
