"""Локальное состояние диаграммы одной рабочей сессии."""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from sysviz.domains.collaboration.graph import apply_changes, humanize_type, new_edge_id, new_node_id
from sysviz.domains.collaboration.schemas import DiffOp, Edge, Node, NodeData, Position

logger = logging.getLogger(__name__)

SENTINEL_WORKSPACES = ("new", "default")
ACTIVITY_LIMIT = 50
DEFAULT_DESIGN_NAME = "Untitled System"

Emitter = Callable[[str, Dict[str, Any]], None]
Change = Union[DiffOp, Dict[str, Any]]


class DiagramStore:
    """Узлы и рёбра активного рабочего пространства.

    Локальные изменения применяются сразу, пишут запись в ленту действий
    и уходят в ретранслятор через emitter. Удалённые изменения применяются
    тем же примитивом, но без повторной отправки.
    """

    def __init__(self, workspace_id: str = "default", emitter: Optional[Emitter] = None):
        self.workspace_id = workspace_id
        self.emitter = emitter

        self.nodes: List[Dict[str, Any]] = []
        self.edges: List[Dict[str, Any]] = []
        self.team_id: Optional[str] = None
        self.design_name = DEFAULT_DESIGN_NAME
        self.is_public = False
        self.public_id: Optional[str] = None
        self.last_saved: Optional[datetime] = None
        self.is_simulating = False

        self.activity_log: List[str] = []
        self.messages: List[Dict[str, Any]] = []

        self._listeners: List[Callable[[], None]] = []

    def is_new(self) -> bool:
        return self.workspace_id in SENTINEL_WORKSPACES

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Подписка на локальные изменения, возвращает функцию отписки"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_activity(self, text: str) -> None:
        self.activity_log = [text] + self.activity_log[:ACTIVITY_LIMIT - 1]

    # Локальные изменения

    def apply_node_changes(self, changes: Iterable[Change]) -> List[Dict[str, Any]]:
        changes = _validated(changes)
        if not changes:
            return self.nodes

        self.nodes = apply_changes(changes, self.nodes)
        self.add_activity(_describe(changes, "node"))
        self._emit("node-change", {"changes": [c.to_wire() for c in changes]})
        self._changed()
        return self.nodes

    def apply_edge_changes(self, changes: Iterable[Change]) -> List[Dict[str, Any]]:
        changes = _validated(changes)
        if not changes:
            return self.edges

        self.edges = apply_changes(changes, self.edges)
        self.add_activity(_describe(changes, "edge"))
        self._emit("edge-change", {"changes": [c.to_wire() for c in changes]})
        self._changed()
        return self.edges

    def add_node(
        self,
        node_type: str,
        position: Dict[str, float],
        label: Optional[str] = None,
        emit: bool = True
    ) -> Dict[str, Any]:
        """Создание узла со значениями по умолчанию"""
        label = label or humanize_type(node_type)
        node = Node(
            id=new_node_id(node_type),
            position=Position(**position),
            data=NodeData(label=label, type=node_type)
        ).model_dump(mode="json")

        self.nodes = self.nodes + [node]
        self.add_activity(f"Added {label} node")
        if emit:
            self._emit("add-node", {"node": node})
        self._changed()
        return node

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None
    ) -> Dict[str, Any]:
        """Новое ребро без проверки петель и дубликатов"""
        edge = Edge(
            id=new_edge_id(),
            source=source,
            target=target,
            animated=self.is_simulating,
            sourceHandle=source_handle,
            targetHandle=target_handle
        ).model_dump(mode="json")

        self.edges = self.edges + [edge]
        self.add_activity("New connection created")
        self._emit("edge-change", {"changes": [DiffOp.add(edge).to_wire()]})
        self._changed()
        return edge

    def toggle_simulation(self) -> bool:
        self.is_simulating = not self.is_simulating
        self.edges = [{**edge, "animated": self.is_simulating} for edge in self.edges]
        self.add_activity("Simulation started" if self.is_simulating else "Simulation stopped")
        self._changed()
        return self.is_simulating

    def set_design_name(self, name: str) -> None:
        self.design_name = name
        self._changed()

    # Удалённые изменения: без отправки и без автосохранения

    def apply_remote_node_changes(self, changes: List[DiffOp]) -> None:
        self.nodes = apply_changes(changes, self.nodes)

    def apply_remote_edge_changes(self, changes: List[DiffOp]) -> None:
        self.edges = apply_changes(changes, self.edges)

    def append_remote_node(self, node: Dict[str, Any]) -> None:
        self.nodes = self.nodes + [node]

    # Сохранение и загрузка

    def to_document(self) -> Dict[str, Any]:
        return {"nodes": list(self.nodes), "edges": list(self.edges)}

    def hydrate(self, design: Dict[str, Any]) -> None:
        """Заполнение состояния из загруженной диаграммы"""
        data = design.get("data") or {}
        self.nodes = list(data.get("nodes") or [])
        self.edges = list(data.get("edges") or [])
        self.workspace_id = str(design["id"])
        self.team_id = design.get("team_id")
        self.design_name = design.get("name") or DEFAULT_DESIGN_NAME
        self.is_public = bool(design.get("is_public"))
        self.public_id = design.get("public_id")
        self.last_saved = _parse_timestamp(design.get("updated_at"))
        self.add_activity(f"Loaded design: {self.design_name}")

    def adopt_saved(self, design: Dict[str, Any]) -> None:
        """Новая диаграмма получила id на сервере"""
        self.workspace_id = str(design["id"])
        self.public_id = design.get("public_id")
        self.is_public = bool(design.get("is_public"))
        self.last_saved = _parse_timestamp(design.get("updated_at"))

    def clear_graph(self) -> None:
        self.nodes = []
        self.edges = []

    def reset(self, workspace_id: str = "new") -> None:
        self.workspace_id = workspace_id
        self.nodes = []
        self.edges = []
        self.team_id = None
        self.design_name = DEFAULT_DESIGN_NAME
        self.is_public = False
        self.public_id = None
        self.last_saved = None
        self.is_simulating = False
        self.activity_log = []
        self.messages = []

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        if self.emitter is None:
            return
        self.emitter(event, {"workspaceId": self.workspace_id, **payload})

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()


def _validated(changes: Iterable[Change]) -> List[DiffOp]:
    return [c if isinstance(c, DiffOp) else DiffOp.model_validate(c) for c in changes]


def _describe(changes: List[DiffOp], kind: str) -> str:
    if len(changes) == 1:
        verb = {"add": "Added", "replace": "Updated", "remove": "Removed"}[changes[0].op]
        return f"{verb} {kind} {changes[0].id}"
    return f"Applied {len(changes)} {kind} changes"


def _parse_timestamp(value: Any) -> datetime:
    """updated_at записи; без него время загрузки"""
    if not value:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
