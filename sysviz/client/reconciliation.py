import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from sysviz.client.presence import PresenceTracker
from sysviz.client.store import DiagramStore
from sysviz.domains.collaboration.schemas import ChatMessage, DiffOp, Node, RemoteCursor

logger = logging.getLogger(__name__)


class Reconciler:
    """Применение входящих событий ретранслятора к локальному состоянию.

    Изменения применяются в порядке прихода, последнее применённое
    значение побеждает. Пакет с ошибкой отбрасывается целиком.
    """

    def __init__(self, store: DiagramStore, presence: PresenceTracker):
        self.store = store
        self.presence = presence
        self.session_id: Optional[str] = None

        self._handlers: Dict[str, Callable[[Any], None]] = {
            "connected": self._on_connected,
            "nodes-sync": self._on_nodes_sync,
            "edges-sync": self._on_edges_sync,
            "node-added": self._on_node_added,
            "user-cursor-move": self._on_cursor_move,
            "user-disconnected": self._on_user_disconnected,
            "new-message": self._on_new_message,
            "error": self._on_error,
            "pong": lambda data: None,
        }

    def handle(self, event: str, data: Any) -> bool:
        handler = self._handlers.get(event)
        if handler is None:
            logger.debug(f"Ignoring unknown event {event!r}")
            return False

        try:
            handler(data)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dropped malformed {event} event: {e}")
            return False
        return True

    def _on_connected(self, data: Any) -> None:
        self.session_id = data["session_id"]

    def _on_nodes_sync(self, data: Any) -> None:
        self.store.apply_remote_node_changes([DiffOp.model_validate(c) for c in data])

    def _on_edges_sync(self, data: Any) -> None:
        self.store.apply_remote_edge_changes([DiffOp.model_validate(c) for c in data])

    def _on_node_added(self, data: Any) -> None:
        node = Node.model_validate(data)
        # id не проверяется на совпадение с локальными узлами
        self.store.append_remote_node(data)
        self.store.add_activity(f"New node added: {node.data.label}")

    def _on_cursor_move(self, data: Any) -> None:
        cursor = RemoteCursor.model_validate(data)
        if cursor.userId == self.session_id:
            return
        self.presence.upsert(cursor.userId, cursor.userName, cursor.position.model_dump())

    def _on_user_disconnected(self, data: Any) -> None:
        if not isinstance(data, str):
            raise TypeError("user-disconnected carries a session id string")
        self.presence.remove(data)

    def _on_new_message(self, data: Any) -> None:
        self.store.messages.append(ChatMessage.model_validate(data).model_dump())

    def _on_error(self, data: Any) -> None:
        logger.warning(f"Relay rejected a frame: {data}")
