"""
BossRush Backend — Profile Endpoint Tests
===========================================

What:  GET /api/user and PATCH /api/user behind the Bearer-token preamble.

What we test:
    ✅ Missing Authorization → 401 before any backend call (GET and PATCH)
    ✅ Rejected token → 401 with the backend message
    ✅ Valid token → own row / own experience only
    ✅ Zero matching profile rows → 500
    ✅ Experience accepts any integer, including a decrease
"""

import pytest

INVALID_TOKEN_MESSAGE = "invalid JWT: unable to parse or verify signature, token is malformed"
SINGLE_ROW_MESSAGE = "JSON object requested, multiple (or no) rows returned"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestAuthorizationPreamble:
    """Shared by both /api/user routes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PATCH"])
    async def test_missing_header(self, test_client, fake_backend, method):
        response = await test_client.request(method, "/api/user", json={"experience": 500})

        assert response.status_code == 401
        assert response.json() == {"error": "Missing Authorization header"}
        assert fake_backend.calls == []

    @pytest.mark.asyncio
    async def test_missing_header_wins_over_bad_body(self, test_client, fake_backend):
        response = await test_client.request(
            "PATCH",
            "/api/user",
            content=b"not json at all",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Missing Authorization header"}
        assert fake_backend.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PATCH"])
    async def test_rejected_token(self, test_client, fake_backend, registered_player, method):
        response = await test_client.request(
            method, "/api/user", headers=bearer("forged"), json={"experience": 1}
        )

        assert response.status_code == 401
        assert response.json() == {"error": INVALID_TOKEN_MESSAGE}
        assert fake_backend.operations() == ["get_user"]

    @pytest.mark.asyncio
    async def test_scheme_without_token(self, test_client, fake_backend):
        response = await test_client.get("/api/user", headers={"Authorization": "Bearer"})

        assert response.status_code == 401
        assert response.json() == {"error": "Auth session missing!"}

    @pytest.mark.asyncio
    async def test_token_is_second_segment(self, test_client, fake_backend, registered_player):
        response = await test_client.get(
            "/api/user", headers={"Authorization": f"Token {registered_player['token']}"}
        )

        assert response.status_code == 200
        assert fake_backend.calls[0] == ("get_user", registered_player["token"])


class TestGetUser:
    """GET /api/user"""

    @pytest.mark.asyncio
    async def test_returns_own_profile(self, test_client, fake_backend, registered_player):
        fake_backend.tables["users"].append(
            {"id": "someone-else", "username": "mallory", "level": 9, "experience": 9999}
        )

        response = await test_client.get("/api/user", headers=bearer(registered_player["token"]))

        assert response.status_code == 200
        assert response.json() == {
            "id": registered_player["id"],
            "username": "alice",
            "level": 3,
            "experience": 120,
        }

    @pytest.mark.asyncio
    async def test_two_backend_calls(self, test_client, fake_backend, registered_player):
        await test_client.get("/api/user", headers=bearer(registered_player["token"]))

        assert fake_backend.operations() == ["get_user", "select"]
        assert fake_backend.calls[1] == ("select", "users", {"id": registered_player["id"]})

    @pytest.mark.asyncio
    async def test_account_without_profile(self, test_client, fake_backend):
        """The orphan left by a failed registration has no row to return."""
        fake_backend.add_identity("orphan-token", "orphan-id", email="orphan@example.com")

        response = await test_client.get("/api/user", headers=bearer("orphan-token"))

        assert response.status_code == 500
        assert response.json() == {"error": SINGLE_ROW_MESSAGE}

    @pytest.mark.asyncio
    async def test_backend_failure(self, test_client, fake_backend, registered_player):
        fake_backend.fail("select", "canceling statement due to statement timeout", table="users")

        response = await test_client.get("/api/user", headers=bearer(registered_player["token"]))

        assert response.status_code == 500
        assert response.json() == {"error": "canceling statement due to statement timeout"}


class TestUpdateUser:
    """PATCH /api/user"""

    @pytest.mark.asyncio
    async def test_sets_only_experience_of_caller(self, test_client, fake_backend, registered_player):
        other = {"id": "someone-else", "username": "mallory", "level": 9, "experience": 9999}
        fake_backend.tables["users"].append(dict(other))

        response = await test_client.patch(
            "/api/user",
            headers=bearer(registered_player["token"]),
            json={"experience": 500},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User updated successfully"}
        users = {row["id"]: row for row in fake_backend.tables["users"]}
        assert users[registered_player["id"]] == {
            "id": registered_player["id"],
            "username": "alice",
            "level": 3,
            "experience": 500,
        }
        assert users["someone-else"] == other

    @pytest.mark.asyncio
    async def test_decrease_is_accepted(self, test_client, fake_backend, registered_player):
        response = await test_client.patch(
            "/api/user",
            headers=bearer(registered_player["token"]),
            json={"experience": 0},
        )

        assert response.status_code == 200
        assert fake_backend.tables["users"][0]["experience"] == 0

    @pytest.mark.asyncio
    async def test_fractional_experience_stored_as_sent(self, test_client, fake_backend, registered_player):
        response = await test_client.patch(
            "/api/user",
            headers=bearer(registered_player["token"]),
            json={"experience": 12.5},
        )

        assert response.status_code == 200
        assert fake_backend.calls[-1] == (
            "update", "users", {"experience": 12.5}, {"id": registered_player["id"]}
        )
        assert fake_backend.tables["users"][0]["experience"] == 12.5

    @pytest.mark.asyncio
    async def test_missing_experience(self, test_client, fake_backend, registered_player):
        response = await test_client.patch(
            "/api/user",
            headers=bearer(registered_player["token"]),
            json={"level": 99},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required field 'experience'"}
        assert "update" not in fake_backend.operations()
        assert fake_backend.tables["users"][0]["level"] == 3

    @pytest.mark.asyncio
    async def test_update_failure(self, test_client, fake_backend, registered_player):
        fake_backend.fail("update", "new row violates row-level security policy", table="users")

        response = await test_client.patch(
            "/api/user",
            headers=bearer(registered_player["token"]),
            json={"experience": 10},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "new row violates row-level security policy"}
