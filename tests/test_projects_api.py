import uuid

import pytest

from tests.factories import make_project, make_wing, valid_project_payload


@pytest.mark.asyncio
async def test_root_and_health(client):
    root = await client.get("/")
    health = await client.get("/api/health")

    assert root.status_code == 200
    assert root.json()["docs"] == "/docs"
    assert health.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_validate_reports_issues(client):
    payload = make_project([make_wing([[1, 1, 1, 1, 1, 1], [1, 1, 1, 1, 1]])]).to_payload()

    response = await client.post("/api/projects/validate", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert [issue["path"] for issue in body["issues"]] == [["wings", 0, "floors", 1, "units"]]
    assert body["message"].startswith("• In wing")


@pytest.mark.asyncio
async def test_validate_accepts_complete_project(client):
    response = await client.post("/api/projects/validate", json=valid_project_payload())

    assert response.json() == {"valid": True, "issues": [], "message": None}


@pytest.mark.asyncio
async def test_validate_wing(client):
    wing = make_wing([[6]], commercial_floor_spans=[[1]]).to_payload()

    project_level = await client.post("/api/projects/wings/validate", json=wing)
    wing_level = await client.post(
        "/api/projects/wings/validate",
        json=wing,
        params={"wing_level_commercial": True},
    )

    assert project_level.json()["valid"] is True
    assert wing_level.json()["valid"] is False
    assert wing_level.json()["issues"][0]["path"] == ["commercialFloors", 0, "units"]


@pytest.mark.asyncio
async def test_malformed_body_is_rejected(client):
    response = await client.post("/api/projects/validate", json={"wings": [{"name": "A"}]})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_rejects_invalid_structure(client):
    response = await client.post("/api/projects", json=make_project([]).to_payload())

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["issues"] == [
        {"path": ["wings"], "message": "At least 1 wing is required in a project."}
    ]
    assert detail["message"] == "• At least 1 wing is required in a project."


@pytest.mark.asyncio
async def test_project_lifecycle(client):
    created = await client.post("/api/projects", json=valid_project_payload())

    assert created.status_code == 201
    body = created.json()
    project_id = body["id"]
    assert body["name"] == "Skyline Residency"
    assert body["status"] == "planning"
    assert body["is_active"] is True
    assert body["structure"]["id"] == project_id
    assert body["structure"]["wings"][0]["floors"][1]["units"][2]["unitSpan"] == 2

    listed = await client.get("/api/projects")
    assert listed.json()["total"] == 1
    assert listed.json()["items"][0]["id"] == project_id

    fetched = await client.get(f"/api/projects/{project_id}")
    assert fetched.status_code == 200
    assert fetched.json()["structure"] == body["structure"]

    renamed = {**body["structure"], "name": "Skyline Phase II"}
    updated = await client.put(f"/api/projects/{project_id}", json=renamed)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Skyline Phase II"
    assert updated.json()["structure"]["name"] == "Skyline Phase II"

    deleted = await client.delete(f"/api/projects/{project_id}")
    assert deleted.status_code == 204

    missing = await client.get(f"/api/projects/{project_id}")
    assert missing.status_code == 404
    assert (await client.get("/api/projects")).json()["total"] == 0


@pytest.mark.asyncio
async def test_update_rejects_invalid_structure(client):
    created = (await client.post("/api/projects", json=valid_project_payload())).json()
    broken = {**created["structure"], "wings": []}

    response = await client.put(f"/api/projects/{created['id']}", json=broken)

    assert response.status_code == 422
    stored = (await client.get(f"/api/projects/{created['id']}")).json()
    assert len(stored["structure"]["wings"]) == 1


@pytest.mark.asyncio
async def test_unknown_project(client):
    unknown = uuid.uuid4()

    assert (await client.get(f"/api/projects/{unknown}")).status_code == 404
    assert (await client.put(f"/api/projects/{unknown}", json=valid_project_payload())).status_code == 404
    assert (await client.delete(f"/api/projects/{unknown}")).status_code == 404
