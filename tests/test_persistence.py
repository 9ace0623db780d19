from __future__ import annotations

import asyncio
import json
import uuid

import httpx

from sysviz.client.persistence import Autosaver, PersistenceGateway
from sysviz.client.session import WorkspaceSession
from sysviz.client.store import DiagramStore
from sysviz.main import app

DESIGN_ID = str(uuid.uuid4())


def _design(**overrides) -> dict:
    design = {
        "id": DESIGN_ID,
        "name": "Checkout",
        "data": {"nodes": [], "edges": []},
        "team_id": None,
        "is_public": False,
        "public_id": "a" * 32,
    }
    design.update(overrides)
    return design


def _mock_gateway(handler) -> PersistenceGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://relay.test")
    return PersistenceGateway(token="token", client=client)


def test_first_save_then_autosave_updates_same_record(database) -> None:
    async def scenario() -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as api:
            registered = await api.post(
                "/api/auth/register",
                json={"username": "writer", "email": "writer@example.com", "password": "secret123"},
            )
            token = registered.json()["token"]
            headers = {"Authorization": f"Bearer {token}"}

            session = WorkspaceSession("new", gateway=PersistenceGateway(token=token, client=api), autosave_delay=0.01)
            session.join()
            node = session.store.add_node("database", {"x": 250, "y": 500}, label="Orders DB")
            assert not session.autosaver.pending

            assert await session.save()
            design_id = session.store.workspace_id
            assert design_id != "new"
            assert session.store.activity_log[0] == "Design created: Untitled System"
            # Группа ретранслятора сменилась вместе с id
            assert session.drain()[-1] == {"type": "join-workspace", "data": design_id}

            edited = {**node, "data": {**node["data"], "latency": 250}}
            session.store.apply_node_changes([{"op": "replace", "id": node["id"], "value": edited}])
            assert session.autosaver.pending
            await session.autosaver.wait()

            mine = (await api.get("/api/designs/mine", headers=headers)).json()
            assert len(mine) == 1
            assert mine[0]["id"] == design_id
            assert mine[0]["data"]["nodes"][0]["data"]["latency"] == 250
            session.close()

    asyncio.run(scenario())


def test_load_hydrates_store(database) -> None:
    async def scenario() -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as api:
            registered = await api.post(
                "/api/auth/register",
                json={"username": "reader", "email": "reader@example.com", "password": "secret123"},
            )
            token = registered.json()["token"]
            created = await api.post(
                "/api/designs",
                json={"name": "Search", "data": {"nodes": [], "edges": []}},
                headers={"Authorization": f"Bearer {token}"},
            )

            store = DiagramStore("new")
            gateway = PersistenceGateway(token=token, client=api)
            assert await gateway.load(store, created.json()["id"])
            assert store.workspace_id == created.json()["id"]
            assert store.design_name == "Search"
            assert store.public_id == created.json()["public_id"]
            assert store.activity_log == ["Loaded design: Search"]

    asyncio.run(scenario())


def test_save_failure_sets_flag() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Server error"})

    async def scenario() -> None:
        gateway = _mock_gateway(handler)
        store = DiagramStore(DESIGN_ID)

        assert await gateway.save(store) is False
        assert gateway.save_failed
        assert not gateway.is_saving
        assert store.activity_log == []
        await gateway.aclose()

    asyncio.run(scenario())


def test_load_failure_resets_graph() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"detail": "Design not found"})

    async def scenario() -> None:
        gateway = _mock_gateway(handler)
        store = DiagramStore(DESIGN_ID)
        store.add_node("cache", {"x": 0, "y": 0})

        assert await gateway.load(store, DESIGN_ID) is False
        assert gateway.load_failed
        assert store.nodes == [] and store.edges == []
        await gateway.aclose()

    asyncio.run(scenario())


def test_sharing_new_workspace_makes_no_request() -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_design(is_public=True))

    async def scenario() -> None:
        gateway = _mock_gateway(handler)
        assert await gateway.toggle_sharing(DiagramStore("new"), True) is False

        store = DiagramStore(DESIGN_ID)
        assert await gateway.toggle_sharing(store, True)
        assert store.is_public
        assert store.activity_log == ["Sharing enabled"]
        await gateway.aclose()

    asyncio.run(scenario())
    assert len(requests) == 1
    assert json.loads(requests[0].content) == {"isPublic": True}
    assert requests[0].headers["authorization"] == "Bearer token"


def test_autosave_coalesces_rapid_edits() -> None:
    puts = []

    def handler(request: httpx.Request) -> httpx.Response:
        puts.append(json.loads(request.content))
        return httpx.Response(200, json=_design())

    async def scenario() -> None:
        gateway = _mock_gateway(handler)
        store = DiagramStore(DESIGN_ID)
        autosaver = Autosaver(gateway, store, delay=0.05)

        for i in range(3):
            store.add_node("webServer", {"x": i * 10, "y": 0})
        await autosaver.wait()

        autosaver.close()
        await gateway.aclose()

    asyncio.run(scenario())
    assert len(puts) == 1
    assert len(puts[0]["data"]["nodes"]) == 3


def test_no_autosave_for_unsaved_workspace() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_design())

    async def scenario() -> None:
        gateway = _mock_gateway(handler)
        store = DiagramStore("new")
        autosaver = Autosaver(gateway, store, delay=0.01)

        store.add_node("cdn", {"x": 0, "y": 0})
        assert not autosaver.pending
        await autosaver.wait()
        await gateway.aclose()

    asyncio.run(scenario())
    assert calls == []


def test_remote_changes_do_not_trigger_autosave() -> None:
    async def scenario() -> None:
        gateway = _mock_gateway(lambda request: httpx.Response(200, json=_design()))
        session = WorkspaceSession(DESIGN_ID, gateway=gateway, autosave_delay=0.01)

        session.handle_message({"type": "node-added", "data": {
            "id": "cache-1", "type": "custom", "position": {"x": 1, "y": 2},
            "data": {"label": "Cache", "type": "cache"},
        }})
        assert [n["id"] for n in session.store.nodes] == ["cache-1"]
        assert not session.autosaver.pending
        session.close()
        await gateway.aclose()

    asyncio.run(scenario())


def test_saved_graph_loads_unchanged_in_another_session(database) -> None:
    async def scenario() -> None:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as api:
            registered = await api.post(
                "/api/auth/register",
                json={"username": "pair", "email": "pair@example.com", "password": "secret123"},
            )
            token = registered.json()["token"]

            writer = WorkspaceSession("new", gateway=PersistenceGateway(token=token, client=api))
            writer.store.apply_edge_changes([{"op": "add", "id": "e1", "value": {"source": "a", "target": "b"}}])
            assert await writer.save()

            reader = WorkspaceSession("new", gateway=PersistenceGateway(token=token, client=api))
            assert await reader.load(writer.store.workspace_id)
            assert reader.store.to_document() == writer.store.to_document()
            assert reader.store.edges == [{"id": "e1", "source": "a", "target": "b"}]
            writer.close()
            reader.close()

    asyncio.run(scenario())


def test_load_rejoins_under_design_id() -> None:
    async def scenario() -> None:
        gateway = _mock_gateway(lambda request: httpx.Response(200, json=_design()))
        session = WorkspaceSession("new", gateway=gateway)
        session.join()
        session.drain()

        assert await session.load(DESIGN_ID)
        assert session.drain() == [{"type": "join-workspace", "data": DESIGN_ID}]

        session.store.add_node("cache", {"x": 0, "y": 0})
        assert session.drain()[0]["data"]["workspaceId"] == DESIGN_ID
        session.close()
        await gateway.aclose()

    asyncio.run(scenario())


def test_failed_load_keeps_current_group() -> None:
    async def scenario() -> None:
        gateway = _mock_gateway(lambda request: httpx.Response(404, json={"detail": "Design not found"}))
        session = WorkspaceSession("new", gateway=gateway)
        session.join()
        session.drain()

        assert not await session.load(DESIGN_ID)
        assert session.drain() == []
        session.close()
        await gateway.aclose()

    asyncio.run(scenario())
