"""API tests for identity, workspace onboarding and health endpoints."""

from commandcenter.api.v1.auth import DEV_TOKEN

WORKSPACES = "/api/v1/workspaces/"


class TestAuth:
    async def test_me(self, client, alice):
        response = await client.get("/api/v1/auth/me", headers=alice.headers)

        assert response.status_code == 200
        assert response.json() == {
            "id": str(alice.user.id),
            "name": "Alice",
            "email": "alice@example.com",
            "image": None,
        }

    async def test_me_requires_token(self, client):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_dev_token_provisions_user_and_workspace(self, client):
        headers = {"Authorization": f"Bearer {DEV_TOKEN}"}

        first = await client.get(f"{WORKSPACES}current", headers=headers)
        assert first.status_code == 200
        assert first.json()["role"] == "owner"

        again = await client.get(f"{WORKSPACES}current", headers=headers)
        assert again.json()["workspace"]["id"] == first.json()["workspace"]["id"]


class TestWorkspaces:
    async def test_current(self, client, alice):
        response = await client.get(f"{WORKSPACES}current", headers=alice.headers)

        assert response.status_code == 200
        assert response.json()["workspace"]["slug"] == "alice-co"
        assert response.json()["role"] == "owner"

    async def test_onboarding_state(self, client, drifter):
        response = await client.get(f"{WORKSPACES}current", headers=drifter.headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NO_WORKSPACE"

    async def test_create_then_work_in_it(self, client, drifter):
        created = await client.post(WORKSPACES, json={"name": "Drifter Labs"}, headers=drifter.headers)
        assert created.status_code == 201
        assert created.json()["workspace"]["slug"] == "drifter-labs"
        assert created.json()["role"] == "owner"

        task = await client.post("/api/v1/tasks/", json={"title": "First"}, headers=drifter.headers)
        assert task.status_code == 201
        assert task.json()["workspace_id"] == created.json()["workspace"]["id"]

    async def test_slug_conflict(self, client, alice, drifter):
        response = await client.post(
            WORKSPACES, json={"name": "Copycat", "slug": "alice-co"}, headers=drifter.headers
        )
        assert response.status_code == 400
        assert response.json()["field"] == "slug"

    async def test_list(self, client, alice):
        await client.post(WORKSPACES, json={"name": "Side Project"}, headers=alice.headers)

        response = await client.get(WORKSPACES, headers=alice.headers)
        assert {m["workspace"]["slug"] for m in response.json()} == {"alice-co", "side-project"}


class TestHealth:
    async def test_liveness(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_readiness(self, client):
        response = await client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": "healthy"}

    async def test_request_id_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"
