"""API tests for project endpoints and the kanban board."""

from uuid import uuid4

PROJECTS = "/api/v1/projects/"
TASKS = "/api/v1/tasks/"


async def create_project(client, account, **fields):
    payload = {"name": "Launch", **fields}
    response = await client.post(PROJECTS, json=payload, headers=account.headers)
    assert response.status_code == 201
    return response.json()


async def create_task(client, account, **fields):
    response = await client.post(TASKS, json={"title": "task", **fields}, headers=account.headers)
    assert response.status_code == 201
    return response.json()


class TestCreateProject:
    async def test_defaults_and_round_trip(self, client, alice):
        created = await create_project(
            client, alice, name="Fundraise", description="Series A", color="#3b82f6"
        )
        assert created["status"] == "active"

        fetched = await client.get(f"{PROJECTS}{created['id']}", headers=alice.headers)
        data = fetched.json()
        assert data["name"] == "Fundraise"
        assert data["description"] == "Series A"
        assert data["color"] == "#3b82f6"
        assert data["status"] == "active"
        assert data["tasks"] == []
        assert data["completion_percentage"] == 0

    async def test_name_required(self, client, alice):
        response = await client.post(PROJECTS, json={"name": ""}, headers=alice.headers)
        assert response.status_code == 400
        assert response.json()["field"] == "name"

    async def test_no_workspace(self, client, drifter):
        response = await client.post(PROJECTS, json={"name": "X"}, headers=drifter.headers)
        assert response.status_code == 404


class TestProjectViews:
    async def test_board_groups_tasks_and_rounds_completion(self, client, alice):
        project = await create_project(client, alice)
        await create_task(client, alice, title="a", projectId=project["id"], status="DONE")
        await create_task(client, alice, title="b", projectId=project["id"], status="IN_PROGRESS")
        await create_task(client, alice, title="c", projectId=project["id"], status="BACKLOG")
        await create_task(client, alice, title="loose")

        response = await client.get(f"{PROJECTS}{project['id']}/board", headers=alice.headers)

        assert response.status_code == 200
        board = response.json()
        assert [c["status"] for c in board["columns"]] == ["BACKLOG", "TODO", "IN_PROGRESS", "DONE"]
        assert {c["status"]: [t["title"] for t in c["tasks"]] for c in board["columns"]} == {
            "BACKLOG": ["c"],
            "TODO": [],
            "IN_PROGRESS": ["b"],
            "DONE": ["a"],
        }
        assert board["total_tasks"] == 3
        assert board["completion_percentage"] == 33

    async def test_empty_board(self, client, alice):
        project = await create_project(client, alice)
        response = await client.get(f"{PROJECTS}{project['id']}/board", headers=alice.headers)
        assert response.json()["completion_percentage"] == 0

    async def test_board_of_other_workspace_is_403(self, client, alice, bob):
        project = await create_project(client, alice)
        response = await client.get(f"{PROJECTS}{project['id']}/board", headers=bob.headers)
        assert response.status_code == 403

    async def test_list_with_progress_and_status_filter(self, client, alice, bob):
        active = await create_project(client, alice, name="Active")
        await create_project(client, alice, name="Paused", status="paused")
        await create_project(client, bob, name="Bob's")
        await create_task(client, alice, projectId=active["id"], status="DONE")
        await create_task(client, alice, projectId=active["id"])

        everything = await client.get(PROJECTS, headers=alice.headers)
        assert {p["name"] for p in everything.json()} == {"Active", "Paused"}

        overview = await client.get(f"{PROJECTS}overview", headers=alice.headers)
        assert len(overview.json()) == 1
        item = overview.json()[0]
        assert item["name"] == "Active"
        assert item["total_tasks"] == 2
        assert item["completed_tasks"] == 1
        assert item["completion_percentage"] == 50

        paused = await client.get(PROJECTS, params={"status": "paused"}, headers=alice.headers)
        assert [p["name"] for p in paused.json()] == ["Paused"]


class TestUpdateDeleteProject:
    async def test_update(self, client, alice):
        project = await create_project(client, alice)
        response = await client.patch(
            f"{PROJECTS}{project['id']}",
            json={"status": "archived", "color": "#000000"},
            headers=alice.headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "archived"
        assert response.json()["color"] == "#000000"
        assert response.json()["name"] == "Launch"

    async def test_update_other_workspace_is_403(self, client, alice, bob):
        project = await create_project(client, alice)
        response = await client.patch(
            f"{PROJECTS}{project['id']}", json={"name": "mine now"}, headers=bob.headers
        )
        assert response.status_code == 403

    async def test_delete_orphans_tasks(self, client, alice):
        project = await create_project(client, alice)
        task = await create_task(client, alice, projectId=project["id"])

        response = await client.delete(f"{PROJECTS}{project['id']}", headers=alice.headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        gone = await client.get(f"{PROJECTS}{project['id']}", headers=alice.headers)
        assert gone.status_code == 404

        orphan = await client.get(f"{TASKS}{task['id']}", headers=alice.headers)
        assert orphan.status_code == 200
        assert orphan.json()["project_id"] is None

    async def test_delete_missing_is_404(self, client, alice):
        response = await client.delete(f"{PROJECTS}{uuid4()}", headers=alice.headers)
        assert response.status_code == 404
