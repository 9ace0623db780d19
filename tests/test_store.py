from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from sysviz.client.store import ACTIVITY_LIMIT, DiagramStore
from sysviz.domains.collaboration.schemas import DiffOp


def _recording_store(workspace_id: str = "w1") -> Tuple[DiagramStore, List[Tuple[str, Dict[str, Any]]]]:
    events: List[Tuple[str, Dict[str, Any]]] = []
    store = DiagramStore(workspace_id, emitter=lambda event, data: events.append((event, data)))
    return store, events


def test_add_node_defaults_and_emits() -> None:
    store, events = _recording_store()
    node = store.add_node("loadBalancer", {"x": 1, "y": 2})

    assert node["type"] == "custom"
    assert node["data"] == {"label": "Load Balancer", "type": "loadBalancer", "latency": 10, "throughput": 100}
    assert node["position"] == {"x": 1, "y": 2}
    assert store.nodes == [node]
    assert store.activity_log[0] == "Added Load Balancer node"
    assert events == [("add-node", {"workspaceId": "w1", "node": node})]


def test_add_node_without_emit() -> None:
    store, events = _recording_store()
    store.add_node("cache", {"x": 0, "y": 0}, label="Redis", emit=False)
    assert events == []
    assert store.nodes[0]["data"]["label"] == "Redis"


def test_rapid_add_node_gives_unique_ids() -> None:
    store = DiagramStore()
    for _ in range(200):
        store.add_node("webServer", {"x": 0, "y": 0})
    assert len({node["id"] for node in store.nodes}) == 200


def test_local_changes_apply_in_order_and_emit_batch() -> None:
    store, events = _recording_store()
    a = store.add_node("database", {"x": 0, "y": 0})
    b = store.add_node("cache", {"x": 5, "y": 5})
    events.clear()

    moved = {**a, "position": {"x": 100, "y": 100}}
    batch = [DiffOp.replace(moved), DiffOp.remove(b["id"]), DiffOp.remove("missing")]
    nodes = store.apply_node_changes(batch)

    assert nodes == [moved]
    assert events == [("node-change", {"workspaceId": "w1", "changes": [c.to_wire() for c in batch]})]
    assert store.activity_log[0] == "Applied 3 node changes"


def test_empty_batch_is_not_emitted() -> None:
    store, events = _recording_store()
    store.apply_edge_changes([])
    assert events == []
    assert store.activity_log == []


def test_connect_allows_self_loops_and_duplicates() -> None:
    store, events = _recording_store()
    node = store.add_node("client", {"x": 0, "y": 0})
    events.clear()

    first = store.connect(node["id"], node["id"])
    second = store.connect(node["id"], node["id"])

    assert len(store.edges) == 2
    assert first["id"] != second["id"]
    assert first["source"] == first["target"] == node["id"]
    assert events[0] == ("edge-change", {"workspaceId": "w1", "changes": [{"op": "add", "id": first["id"], "value": first}]})
    assert store.activity_log[0] == "New connection created"


def test_activity_log_keeps_fifty_newest_first() -> None:
    store = DiagramStore()
    for i in range(ACTIVITY_LIMIT + 10):
        store.add_node("note", {"x": i, "y": 0}, label=f"N{i}")

    assert len(store.activity_log) == ACTIVITY_LIMIT
    assert store.activity_log[0] == "Added N59 node"
    assert store.activity_log[-1] == "Added N10 node"


def test_toggle_simulation_animates_every_edge() -> None:
    store = DiagramStore()
    store.connect("a", "b")
    store.connect("b", "c")

    assert store.toggle_simulation() is True
    assert all(edge["animated"] for edge in store.edges)
    assert store.toggle_simulation() is False
    assert not any(edge["animated"] for edge in store.edges)


def test_listeners_fire_on_local_mutations_only() -> None:
    store = DiagramStore()
    calls: List[int] = []
    unsubscribe = store.subscribe(lambda: calls.append(1))

    store.add_node("cdn", {"x": 0, "y": 0})
    store.set_design_name("Checkout")
    store.apply_remote_node_changes([DiffOp.remove("whatever")])
    store.add_activity("no notify")
    assert len(calls) == 2

    unsubscribe()
    store.add_node("cdn", {"x": 0, "y": 0})
    assert len(calls) == 2


def test_hydrate_and_reset() -> None:
    store = DiagramStore("new")
    store.hydrate({
        "id": "abc",
        "name": "Payments",
        "data": {"nodes": [{"id": "n1"}], "edges": []},
        "is_public": True,
        "public_id": "f" * 32,
    })

    assert store.workspace_id == "abc"
    assert not store.is_new()
    assert store.nodes == [{"id": "n1"}]
    assert store.design_name == "Payments"
    assert store.public_id == "f" * 32
    assert store.activity_log[0] == "Loaded design: Payments"

    store.reset()
    assert store.is_new()
    assert store.nodes == [] and store.activity_log == []


def test_hydrate_takes_last_saved_from_record() -> None:
    store = DiagramStore("new")
    store.hydrate({
        "id": "abc",
        "name": "Payments",
        "data": {"nodes": [], "edges": []},
        "updated_at": "2026-01-02T03:04:05+00:00",
    })

    assert store.last_saved == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
