import pytest
from httpx import AsyncClient
from structlog.testing import capture_logs


@pytest.mark.parametrize("action_id", ["1", "abc", "not-a-uuid!", "%20", "00000000-0000-0000-0000-000000000000"])
async def test_get_action_returns_stub(client: AsyncClient, action_id: str):
    response = await client.get(f"/action/{action_id}")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    data = response.json()
    assert data["id"]
    assert data["action"] == {"name": "rebootDevice", "serial": "testSerial"}


async def test_get_action_ignores_path_id(client: AsyncClient):
    response = await client.get("/action/42")
    assert response.json()["id"] != "42"


async def test_get_action_ids_are_unique(client: AsyncClient):
    first = await client.get("/action/1")
    second = await client.get("/action/1")
    assert first.json()["id"] != second.json()["id"]


async def test_get_action_logs_generated_id(client: AsyncClient):
    with capture_logs() as logs:
        response = await client.get("/action/1")

    requested = [entry for entry in logs if entry["event"] == "action_requested"]
    assert len(requested) == 1
    assert requested[0]["action_id"] == response.json()["id"]


async def test_delete_action(client: AsyncClient):
    response = await client.delete("/action/abc123")
    assert response.status_code == 200
    assert response.content == b""
    assert "content-type" not in response.headers


async def test_delete_action_never_created(client: AsyncClient):
    response = await client.delete("/action/does-not-exist")
    assert response.status_code == 200
    assert response.content == b""


async def test_delete_action_logs_dump_and_id(client: AsyncClient):
    with capture_logs() as logs:
        await client.delete("/action/abc123?force=1", headers={"X-Device": "edge-7"})

    events = [entry["event"] for entry in logs]
    assert events.index("request_dump") < events.index("action_removable")

    dump = next(entry for entry in logs if entry["event"] == "request_dump")["dump"]
    assert dump.startswith("DELETE /action/abc123?force=1 HTTP/1.1\r\n")
    assert "x-device: edge-7" in dump

    removable = next(entry for entry in logs if entry["event"] == "action_removable")
    assert removable["action_id"] == "abc123"


async def test_unsupported_method(client: AsyncClient):
    response = await client.post("/action/1")
    assert response.status_code == 405
    assert response.json() == {"detail": "Method Not Allowed"}


async def test_unknown_path(client: AsyncClient):
    response = await client.get("/other")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
