import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Set

import httpx

from sysviz.client.store import DiagramStore
from sysviz.client.config import client_settings

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Сохранение и загрузка диаграммы через HTTP API.

    Ошибки сети и сервера не пробрасываются: они пишутся в лог
    и отражаются флагами save_failed, load_failed и share_failed.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.token = token
        self.client = client or httpx.AsyncClient(base_url=base_url or client_settings.server_url)
        self.is_saving = False
        self.save_failed = False
        self.load_failed = False
        self.share_failed = False

    def _headers(self) -> dict:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def save(self, store: DiagramStore, silent: bool = False) -> bool:
        """POST для новой диаграммы, PUT для существующей"""
        if not silent:
            self.is_saving = True

        payload = {"name": store.design_name, "data": store.to_document()}

        try:
            if store.is_new():
                payload["teamId"] = store.team_id
                response = await self.client.post("/api/designs", json=payload, headers=self._headers())
                response.raise_for_status()
                store.adopt_saved(response.json())
                store.add_activity(f"Design created: {store.design_name}")
            else:
                response = await self.client.put(
                    f"/api/designs/{store.workspace_id}", json=payload, headers=self._headers()
                )
                response.raise_for_status()
                store.last_saved = datetime.now(timezone.utc)
                if not silent:
                    store.add_activity(f"Design saved: {store.design_name}")

            self.save_failed = False
            return True

        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Failed to save design {store.workspace_id}: {e}")
            self.save_failed = True
            return False

        finally:
            if not silent:
                self.is_saving = False

    async def load(self, store: DiagramStore, design_id: str) -> bool:
        """Загрузка диаграммы; при ошибке граф сбрасывается"""
        try:
            response = await self.client.get(f"/api/designs/{design_id}", headers=self._headers())
            response.raise_for_status()
            store.hydrate(response.json())
            self.load_failed = False
            return True

        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Failed to load design {design_id}: {e}")
            store.clear_graph()
            self.load_failed = True
            return False

    async def toggle_sharing(self, store: DiagramStore, is_public: bool) -> bool:
        # У несохранённой диаграммы делиться нечем
        if store.is_new():
            return False

        try:
            response = await self.client.post(
                f"/api/designs/{store.workspace_id}/share",
                json={"isPublic": is_public},
                headers=self._headers()
            )
            response.raise_for_status()
            design = response.json()
            store.is_public = bool(design["is_public"])
            store.public_id = design["public_id"]
            store.add_activity(f"Sharing {'enabled' if is_public else 'disabled'}")
            self.share_failed = False
            return True

        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Failed to toggle sharing for {store.workspace_id}: {e}")
            self.share_failed = True
            return False

    async def aclose(self) -> None:
        await self.client.aclose()


class Autosaver:
    """Отложенное тихое сохранение после последнего локального изменения"""

    def __init__(self, gateway: PersistenceGateway, store: DiagramStore, delay: Optional[float] = None):
        self.gateway = gateway
        self.store = store
        self.delay = client_settings.autosave_delay_seconds if delay is None else delay

        self._timer: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._unsubscribe = store.subscribe(self.schedule)

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def schedule(self) -> None:
        """Перезапуск таймера; для новой диаграммы автосохранения нет"""
        self.cancel()

        if self.store.is_new():
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Autosave skipped: no running event loop")
            return

        task = loop.create_task(self._run())
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        if self.pending:
            self._timer.cancel()
        self._timer = None

    async def wait(self) -> None:
        """Ожидание всех запущенных автосохранений"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self.cancel()
        self._unsubscribe()

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        # Начатое сохранение уже не отменяется новым изменением
        self._timer = None
        await self.gateway.save(self.store, silent=True)
