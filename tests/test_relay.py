from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from sysviz.api.ws.relay import hub
from sysviz.client.session import WorkspaceSession
from sysviz.client.transport import relay_url


def _open(client: TestClient, stack):
    ws = stack.enter_context(client.websocket_connect("/ws"))
    welcome = ws.receive_json()
    assert welcome["type"] == "connected"
    return ws, welcome["data"]["session_id"]


def _barrier(ws) -> None:
    """ping/pong: всё, что сокет отправил раньше, уже обработано"""
    ws.send_json({"type": "ping"})
    assert ws.receive_json() == {"type": "pong", "data": None}


def _join(ws, workspace_id: str) -> None:
    ws.send_json({"type": "join-workspace", "data": workspace_id})
    _barrier(ws)


@pytest.fixture
def stack():
    from contextlib import ExitStack

    with ExitStack() as exit_stack:
        yield exit_stack


def test_node_change_fans_out_to_same_workspace_only(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    b, _ = _open(client, stack)
    c, _ = _open(client, stack)
    _join(a, "w1")
    _join(b, "w1")
    _join(c, "w2")

    changes = [{"op": "remove", "id": "n1"}]
    a.send_json({"type": "node-change", "data": {"workspaceId": "w1", "changes": changes}})

    assert b.receive_json() == {"type": "nodes-sync", "data": changes}
    _barrier(a)
    _barrier(c)


def test_edge_change_and_add_node_are_forwarded(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    b, _ = _open(client, stack)
    _join(a, "w1")
    _join(b, "w1")

    edge = {"id": "e1", "source": "x", "target": "y", "animated": False, "style": {}}
    a.send_json({"type": "edge-change", "data": {"workspaceId": "w1", "changes": [{"op": "add", "id": "e1", "value": edge}]}})
    assert b.receive_json() == {"type": "edges-sync", "data": [{"op": "add", "id": "e1", "value": edge}]}

    node = {
        "id": "cache-1",
        "type": "custom",
        "position": {"x": 1, "y": 2},
        "data": {"label": "Cache", "type": "cache", "latency": 10, "throughput": 100},
    }
    a.send_json({"type": "add-node", "data": {"workspaceId": "w1", "node": node}})
    assert b.receive_json() == {"type": "node-added", "data": node}


def test_chat_message_echoes_to_sender(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    b, _ = _open(client, stack)
    _join(a, "w1")
    _join(b, "w1")

    message = {"id": "m1", "user": "Ann", "text": "hello", "timestamp": "12:00:00"}
    a.send_json({"type": "send-message", "data": {"workspaceId": "w1", "message": message}})

    assert a.receive_json() == {"type": "new-message", "data": message}
    assert b.receive_json() == {"type": "new-message", "data": message}


def test_cursor_move_is_keyed_by_session_id(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    b, b_id = _open(client, stack)
    _join(a, "w1")
    _join(b, "w1")

    b.send_json({"type": "cursor-move", "data": {"workspaceId": "w1", "userName": "Bob", "position": {"x": 10, "y": 20}}})
    frame = a.receive_json()
    assert frame["type"] == "user-cursor-move"
    assert frame["data"] == {"userId": b_id, "userName": "Bob", "position": {"x": 10, "y": 20}}
    _barrier(b)


def test_disconnect_notice_is_scoped_to_shared_groups(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    c, _ = _open(client, stack)
    _join(a, "w1")
    _join(c, "w2")

    with client.websocket_connect("/ws") as b:
        b_id = b.receive_json()["data"]["session_id"]
        _join(b, "w1")

    assert a.receive_json() == {"type": "user-disconnected", "data": b_id}
    _barrier(c)
    assert b_id not in hub.sessions
    assert b_id not in hub.members("w1")


def test_global_disconnect_notice_reaches_every_session(client: TestClient, stack, monkeypatch) -> None:
    monkeypatch.setattr(hub, "global_disconnect_notice", True)
    a, _ = _open(client, stack)
    c, _ = _open(client, stack)
    _join(a, "w1")
    _join(c, "w2")

    with client.websocket_connect("/ws") as b:
        b_id = b.receive_json()["data"]["session_id"]
        _join(b, "w1")

    assert a.receive_json() == {"type": "user-disconnected", "data": b_id}
    assert c.receive_json() == {"type": "user-disconnected", "data": b_id}


def test_invalid_frames_get_error_reply(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)

    a.send_text("{broken")
    assert a.receive_json()["type"] == "error"

    a.send_json({"type": "teleport", "data": {}})
    assert a.receive_json()["data"]["message"] == "Unknown event type: teleport"

    a.send_json({"type": "node-change", "data": {"workspaceId": "w1", "changes": [{"op": "replace", "id": "n1"}]}})
    reply = a.receive_json()
    assert reply["type"] == "error"
    assert reply["data"]["event"] == "node-change"

    _barrier(a)


def test_presence_follows_remote_session_lifecycle(client: TestClient, stack) -> None:
    a_ws, _ = _open(client, stack)
    session_a = WorkspaceSession("w1", user_name="Ann")
    session_a.join()
    for frame in session_a.drain():
        a_ws.send_text(json.dumps(frame))
    _barrier(a_ws)

    with client.websocket_connect("/ws") as b_ws:
        session_b = WorkspaceSession("w1", user_name="Bob")
        assert session_b.handle_message(b_ws.receive_text())
        session_b.join()
        session_b.update_cursor({"x": 10, "y": 20})
        for frame in session_b.drain():
            b_ws.send_text(json.dumps(frame))

        assert session_a.handle_message(a_ws.receive_text())
        remote = session_a.presence.get(session_b.session_id)
        assert remote is not None
        assert remote.position == {"x": 10, "y": 20}
        assert remote.name == "Bob"

    assert session_a.handle_message(a_ws.receive_text())
    assert session_b.session_id not in session_a.presence
    assert len(session_a.presence) == 0


def test_relay_url_follows_server_scheme() -> None:
    assert relay_url("http://localhost:5000/") == "ws://localhost:5000/ws"
    assert relay_url("https://sysviz.example.com") == "wss://sysviz.example.com/ws"


def test_rejoin_under_saved_id_keeps_earlier_group(client: TestClient, stack) -> None:
    a, _ = _open(client, stack)
    b, _ = _open(client, stack)
    c, _ = _open(client, stack)
    _join(a, "new")
    _join(a, "design-1")
    _join(b, "new")
    _join(c, "design-1")

    changes = [{"op": "remove", "id": "n1"}]
    b.send_json({"type": "node-change", "data": {"workspaceId": "new", "changes": changes}})
    assert a.receive_json() == {"type": "nodes-sync", "data": changes}

    c.send_json({"type": "node-change", "data": {"workspaceId": "design-1", "changes": changes}})
    assert a.receive_json() == {"type": "nodes-sync", "data": changes}
    _barrier(b)
