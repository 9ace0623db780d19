import asyncio
import logging
from typing import Optional

import websockets
from websockets.exceptions import ConnectionClosed

from sysviz.client.session import WorkspaceSession
from sysviz.client.config import client_settings

logger = logging.getLogger(__name__)


def relay_url(server_url: str) -> str:
    return server_url.rstrip("/").replace("http", "ws", 1) + "/ws"


class RelayConnection:
    """Связь сессии с ретранслятором через websocket"""

    def __init__(self, session: WorkspaceSession, server_url: Optional[str] = None):
        self.session = session
        self.url = relay_url(server_url or client_settings.server_url)

    async def run(self) -> None:
        """Работа до закрытия соединения; переподключения нет"""
        async with websockets.connect(self.url) as ws:
            logger.info(f"Connected to relay {self.url}")
            self.session.join()
            sender = asyncio.create_task(self._pump_outbound(ws))

            try:
                async for raw in ws:
                    self.session.handle_message(raw)
            except ConnectionClosed as e:
                logger.warning(f"Relay connection closed: {e}")
            finally:
                sender.cancel()

    async def _pump_outbound(self, ws) -> None:
        while True:
            frame = await self.session.outbound.get()
            try:
                await ws.send(frame)
            except ConnectionClosed:
                logger.warning("Relay connection lost, outbound frame dropped")
                return
