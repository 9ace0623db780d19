import json
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from pydantic import ValidationError
from fastapi import WebSocket

from sysviz.domains.collaboration.schemas import (
    AddNodePayload, ChangePayload, CursorMovePayload, JoinPayload, SendMessagePayload
)

logger = logging.getLogger(__name__)


def encode_frame(event: str, data: Any = None) -> str:
    return json.dumps({"type": event, "data": data})


class RelayHub:
    """Брокер событий рабочих пространств.

    Хранит только членство в группах: {workspace_id: {session_id: websocket}}
    и обратную карту {session_id: {workspace_id}}. Доставка без подтверждений
    и повторов, неудачная отправка просто теряется.
    """

    def __init__(self, global_disconnect_notice: bool = False):
        self.global_disconnect_notice = global_disconnect_notice
        self.sessions: Dict[str, WebSocket] = {}
        self.groups: Dict[str, Dict[str, WebSocket]] = {}
        self.memberships: Dict[str, Set[str]] = {}

        self._handlers: Dict[str, Callable[[str, Any], Awaitable[None]]] = {
            "ping": self._on_ping,
            "join-workspace": self._on_join,
            "cursor-move": self._on_cursor_move,
            "node-change": self._on_node_change,
            "edge-change": self._on_edge_change,
            "add-node": self._on_add_node,
            "send-message": self._on_send_message,
        }

    async def connect(self, websocket: WebSocket) -> str:
        """Регистрация нового сокета и выдача идентификатора сессии"""
        await websocket.accept()
        session_id = uuid.uuid4().hex
        self.sessions[session_id] = websocket
        self.memberships[session_id] = set()
        logger.info(f"Session {session_id} connected")

        await self.send(session_id, "connected", {"session_id": session_id})
        return session_id

    def join(self, session_id: str, workspace_id: str) -> None:
        """Добавление сессии в группу рабочего пространства"""
        websocket = self.sessions.get(session_id)
        if websocket is None:
            return

        self.groups.setdefault(workspace_id, {})[session_id] = websocket
        self.memberships[session_id].add(workspace_id)
        logger.info(f"Session {session_id} joined workspace {workspace_id}")

    def disconnect(self, session_id: str) -> Set[str]:
        """Удаление сессии из всех групп, возвращает группы, где она состояла"""
        self.sessions.pop(session_id, None)
        joined = self.memberships.pop(session_id, set())

        for workspace_id in joined:
            group = self.groups.get(workspace_id)
            if group is None:
                continue
            group.pop(session_id, None)
            if not group:
                del self.groups[workspace_id]

        logger.info(f"Session {session_id} disconnected from {len(joined)} workspace(s)")
        return joined

    def members(self, workspace_id: str) -> List[str]:
        return list(self.groups.get(workspace_id, {}).keys())

    async def send(self, session_id: str, event: str, data: Any = None) -> bool:
        websocket = self.sessions.get(session_id)
        if websocket is None:
            return False
        return await self._send_frame(session_id, websocket, encode_frame(event, data))

    async def broadcast(
        self,
        workspace_id: str,
        event: str,
        data: Any,
        exclude: Optional[str] = None
    ) -> int:
        """Рассылка события всем сессиям группы"""
        return await self._deliver(self.members(workspace_id), event, data, exclude)

    async def broadcast_all(self, event: str, data: Any, exclude: Optional[str] = None) -> int:
        return await self._deliver(list(self.sessions.keys()), event, data, exclude)

    async def handle_message(self, session_id: str, raw: str) -> None:
        """Разбор входящего кадра и передача обработчику события"""
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Session {session_id} sent invalid JSON")
            await self.send(session_id, "error", {"message": "Invalid JSON"})
            return

        if not isinstance(message, dict):
            logger.warning(f"Session {session_id} sent a non-object frame")
            await self.send(session_id, "error", {"message": "Frame must be an object"})
            return

        event = message.get("type")
        handler = self._handlers.get(event)
        if handler is None:
            logger.warning(f"Session {session_id} sent unknown event {event!r}")
            await self.send(session_id, "error", {"message": f"Unknown event type: {event}"})
            return

        try:
            await handler(session_id, message.get("data"))
        except ValidationError as e:
            logger.warning(f"Invalid {event} payload from session {session_id}: {e.error_count()} error(s)")
            await self.send(session_id, "error", {"message": f"Invalid payload for {event}", "event": event})

    async def handle_disconnect(self, session_id: str) -> None:
        """Отключение транспорта: очистка групп и уведомление user-disconnected"""
        joined = self.disconnect(session_id)

        if self.global_disconnect_notice:
            await self.broadcast_all("user-disconnected", session_id)
            return

        recipients: Set[str] = set()
        for workspace_id in joined:
            recipients.update(self.members(workspace_id))
        await self._deliver(recipients, "user-disconnected", session_id)

    async def _deliver(
        self,
        session_ids: Iterable[str],
        event: str,
        data: Any,
        exclude: Optional[str] = None
    ) -> int:
        frame = encode_frame(event, data)
        delivered = 0

        for session_id in list(session_ids):
            if exclude and session_id == exclude:
                continue
            websocket = self.sessions.get(session_id)
            if websocket is None:
                continue
            if await self._send_frame(session_id, websocket, frame):
                delivered += 1

        return delivered

    async def _send_frame(self, session_id: str, websocket: WebSocket, frame: str) -> bool:
        try:
            await websocket.send_text(frame)
            return True
        except Exception as e:
            # Сообщение теряется, сессию уберёт отключение транспорта
            logger.warning(f"Dropped frame for session {session_id}: {e}")
            return False

    # Обработчики событий

    async def _on_ping(self, session_id: str, data: Any) -> None:
        await self.send(session_id, "pong")

    async def _on_join(self, session_id: str, data: Any) -> None:
        if isinstance(data, str):
            data = {"workspaceId": data}
        payload = JoinPayload.model_validate(data)
        self.join(session_id, payload.workspaceId)

    async def _on_cursor_move(self, session_id: str, data: Any) -> None:
        payload = CursorMovePayload.model_validate(data)
        # Присутствие привязано к идентификатору транспортной сессии
        await self.broadcast(payload.workspaceId, "user-cursor-move", {
            "userId": session_id,
            "userName": payload.userName,
            "position": payload.position.model_dump()
        }, exclude=session_id)

    async def _on_node_change(self, session_id: str, data: Any) -> None:
        payload = ChangePayload.model_validate(data)
        await self.broadcast(
            payload.workspaceId, "nodes-sync",
            [change.to_wire() for change in payload.changes],
            exclude=session_id
        )

    async def _on_edge_change(self, session_id: str, data: Any) -> None:
        payload = ChangePayload.model_validate(data)
        await self.broadcast(
            payload.workspaceId, "edges-sync",
            [change.to_wire() for change in payload.changes],
            exclude=session_id
        )

    async def _on_add_node(self, session_id: str, data: Any) -> None:
        payload = AddNodePayload.model_validate(data)
        await self.broadcast(payload.workspaceId, "node-added", data["node"], exclude=session_id)

    async def _on_send_message(self, session_id: str, data: Any) -> None:
        payload = SendMessagePayload.model_validate(data)
        # Отправитель тоже получает сообщение
        await self.broadcast(payload.workspaceId, "new-message", data["message"])
