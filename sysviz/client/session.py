import asyncio
import json
import logging
import random
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sysviz.client.persistence import Autosaver, PersistenceGateway
from sysviz.client.presence import PresenceTracker
from sysviz.client.reconciliation import Reconciler
from sysviz.client.store import DiagramStore
from sysviz.domains.collaboration.services import encode_frame

logger = logging.getLogger(__name__)


class WorkspaceSession:
    """Состояние одного пользователя в одном рабочем пространстве.

    Исходящие кадры складываются в очередь outbound, транспорт их забирает.
    """

    def __init__(
        self,
        workspace_id: str = "new",
        user_name: str = "Team Member",
        gateway: Optional[PersistenceGateway] = None,
        autosave_delay: Optional[float] = None,
        rng: Optional[random.Random] = None
    ):
        self.user_name = user_name
        self.outbound: "asyncio.Queue[str]" = asyncio.Queue()

        self.store = DiagramStore(workspace_id, emitter=self.emit)
        self.presence = PresenceTracker(rng)
        self.reconciler = Reconciler(self.store, self.presence)

        self.gateway = gateway
        self.autosaver = Autosaver(gateway, self.store, autosave_delay) if gateway else None
        self._joined: Optional[str] = None

    @property
    def session_id(self) -> Optional[str]:
        return self.reconciler.session_id

    def emit(self, event: str, data: Any) -> None:
        self.outbound.put_nowait(encode_frame(event, data))

    def drain(self) -> List[Dict[str, Any]]:
        """Забрать все накопленные исходящие кадры"""
        frames = []
        while not self.outbound.empty():
            frames.append(json.loads(self.outbound.get_nowait()))
        return frames

    def join(self) -> None:
        self._joined = self.store.workspace_id
        self.emit("join-workspace", self.store.workspace_id)

    def handle_message(self, raw: Union[str, Dict[str, Any]]) -> bool:
        """Разбор входящего кадра ретранслятора"""
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Dropped non-JSON frame from relay")
                return False

        if not isinstance(raw, dict):
            logger.warning("Dropped non-object frame from relay")
            return False

        return self.reconciler.handle(raw.get("type"), raw.get("data"))

    def update_cursor(self, position: Dict[str, float], user_name: Optional[str] = None) -> None:
        """Позиция курсора уходит на каждое движение, без троттлинга"""
        self.emit("cursor-move", {
            "workspaceId": self.store.workspace_id,
            "userId": self.session_id,
            "userName": user_name or self.user_name,
            "position": position
        })

    def send_message(self, text: str) -> Dict[str, Any]:
        # Локально не добавляется, сообщение вернётся эхом new-message
        message = {
            "id": uuid.uuid4().hex,
            "user": self.user_name,
            "text": text,
            "timestamp": datetime.now().strftime("%H:%M:%S")
        }
        self.emit("send-message", {"workspaceId": self.store.workspace_id, "message": message})
        return message

    async def save(self, silent: bool = False) -> bool:
        if self.gateway is None:
            raise RuntimeError("Session has no persistence gateway")

        saved = await self.gateway.save(self.store, silent=silent)
        # Первая запись дала диаграмме id, группа ретранслятора меняется вместе с ним
        if saved:
            self._follow_workspace()
        return saved

    async def load(self, design_id: str) -> bool:
        if self.gateway is None:
            raise RuntimeError("Session has no persistence gateway")
        loaded = await self.gateway.load(self.store, design_id)
        if loaded:
            self._follow_workspace()
        return loaded

    async def toggle_sharing(self, is_public: bool) -> bool:
        if self.gateway is None:
            raise RuntimeError("Session has no persistence gateway")
        return await self.gateway.toggle_sharing(self.store, is_public)

    def close(self) -> None:
        if self.autosaver:
            self.autosaver.close()

    def _follow_workspace(self) -> None:
        """Повторный join, если id рабочего пространства сменился после save или load.

        Выхода из прежней группы нет: ретранслятор только добавляет в группы.
        """
        if self._joined is not None and self._joined != self.store.workspace_id:
            self.join()
