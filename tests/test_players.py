"""
Tests for Player Endpoints
==========================

Tests for:
- GET /api/v1/players
- GET/PUT /api/v1/players/me
- POST/DELETE /api/v1/players/me/achievements
- GET /api/v1/players/{id}
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from pitchscout.models import PlayerAchievement


PROFILE = {
    "display_name": "Sam Carter",
    "position": "st",
    "age": 17,
    "height_cm": 181,
    "preferred_foot": "Left",
    "nationality": "England",
    "pace": 84,
    "shooting": 72,
}


@pytest.mark.asyncio
async def test_create_and_update_own_profile(client: AsyncClient, user_id, auth_headers):
    missing = await client.get("/api/v1/players/me", headers=auth_headers)
    assert missing.status_code == 404

    created = await client.put("/api/v1/players/me", json=PROFILE, headers=auth_headers)
    assert created.status_code == 200
    assert created.json()["user_id"] == str(user_id)
    assert created.json()["position"] == "ST"
    assert created.json()["passing"] == 50

    updated = await client.put(
        "/api/v1/players/me", json={**PROFILE, "current_club": "Riverside U18"}, headers=auth_headers
    )
    assert updated.json()["id"] == created.json()["id"]
    assert updated.json()["current_club"] == "Riverside U18"

    me = await client.get("/api/v1/players/me", headers=auth_headers)
    assert me.json()["current_club"] == "Riverside U18"


@pytest.mark.asyncio
@pytest.mark.parametrize("change", [
    {"position": "XX"},
    {"age": 9},
    {"pace": 101},
    {"preferred_foot": "Neither"},
    {"display_name": ""},
])
async def test_invalid_profile_fields_are_422(client: AsyncClient, auth_headers, change):
    response = await client.put("/api/v1/players/me", json={**PROFILE, **change}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_profile_requires_authentication(client: AsyncClient):
    response = await client.put("/api/v1/players/me", json=PROFILE)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_shows_public_profiles_with_overall_rating(
    client: AsyncClient, auth_headers, other_auth_headers, make_token
):
    await client.put("/api/v1/players/me", json=PROFILE, headers=auth_headers)
    await client.put(
        "/api/v1/players/me",
        json={"display_name": "Alex Stone", "position": "CB", "physical": 53},
        headers=other_auth_headers,
    )
    await client.put(
        "/api/v1/players/me",
        json={"display_name": "Hidden Player", "position": "ST", "is_public": False},
        headers={"Authorization": f"Bearer {make_token(uuid4())}"},
    )

    response = await client.get("/api/v1/players")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    ratings = {p["display_name"]: p["overall_rating"] for p in data["items"]}
    # (84 + 72 + 50 * 4) / 6 = 59.33; (53 + 50 * 5) / 6 = 50.5
    assert ratings == {"Sam Carter": 59, "Alex Stone": 51}

    strikers = await client.get("/api/v1/players", params={"position": "st"})
    assert [p["display_name"] for p in strikers.json()["items"]] == ["Sam Carter"]


@pytest.mark.asyncio
async def test_list_pagination(client: AsyncClient, make_token):
    for i in range(3):
        await client.put(
            "/api/v1/players/me",
            json={"display_name": f"Player {i}"},
            headers={"Authorization": f"Bearer {make_token(uuid4())}"},
        )

    response = await client.get("/api/v1/players", params={"page": 2, "page_size": 2})
    data = response.json()
    assert data["total"] == 3
    assert data["total_pages"] == 2
    assert len(data["items"]) == 1


@pytest.mark.asyncio
async def test_private_profile_visible_to_owner_only(
    client: AsyncClient, auth_headers, other_auth_headers
):
    created = await client.put(
        "/api/v1/players/me", json={**PROFILE, "is_public": False}, headers=auth_headers
    )
    player_id = created.json()["id"]

    own = await client.get(f"/api/v1/players/{player_id}", headers=auth_headers)
    assert own.status_code == 200

    anonymous = await client.get(f"/api/v1/players/{player_id}")
    assert anonymous.status_code == 404

    other = await client.get(f"/api/v1/players/{player_id}", headers=other_auth_headers)
    assert other.status_code == 404


@pytest.mark.asyncio
async def test_achievements_are_listed_newest_first(client: AsyncClient, auth_headers):
    created = await client.put("/api/v1/players/me", json=PROFILE, headers=auth_headers)
    player_id = created.json()["id"]

    for title, date in [("County Cup", "2024-05-01"), ("Golden Boot", "2025-03-10"), ("Captain", None)]:
        response = await client.post(
            "/api/v1/players/me/achievements",
            json={"title": title, "date": date},
            headers=auth_headers,
        )
        assert response.status_code == 201

    detail = await client.get(f"/api/v1/players/{player_id}")
    assert detail.status_code == 200
    assert [a["title"] for a in detail.json()["achievements"]] == ["Golden Boot", "County Cup", "Captain"]
    assert detail.json()["videos"] == []


@pytest.mark.asyncio
async def test_delete_achievement(client: AsyncClient, auth_headers, other_auth_headers, count_rows):
    await client.put("/api/v1/players/me", json=PROFILE, headers=auth_headers)
    await client.put("/api/v1/players/me", json={"display_name": "Other"}, headers=other_auth_headers)
    achievement = await client.post(
        "/api/v1/players/me/achievements", json={"title": "Player of the Month"}, headers=auth_headers
    )
    achievement_id = achievement.json()["id"]

    foreign = await client.delete(f"/api/v1/players/me/achievements/{achievement_id}", headers=other_auth_headers)
    assert foreign.status_code == 404

    response = await client.delete(f"/api/v1/players/me/achievements/{achievement_id}", headers=auth_headers)
    assert response.status_code == 204
    assert await count_rows(PlayerAchievement) == 0


@pytest.mark.asyncio
async def test_achievement_without_profile_is_404(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/players/me/achievements", json={"title": "Trophy"}, headers=auth_headers
    )
    assert response.status_code == 404
    assert "PUT /players/me" in response.json()["error"]
