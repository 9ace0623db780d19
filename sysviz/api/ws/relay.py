from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

from sysviz.core.config import settings
from sysviz.domains.collaboration.services import RelayHub

logger = logging.getLogger(__name__)

router = APIRouter()

hub = RelayHub(global_disconnect_notice=settings.relay_global_disconnect_notice)


@router.websocket("/ws")
async def relay_endpoint(websocket: WebSocket):
    """WebSocket эндпоинт ретранслятора совместного редактирования"""
    session_id = await hub.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()
            await hub.handle_message(session_id, data)

    except WebSocketDisconnect:
        logger.info(f"Session {session_id} closed the socket")

    except Exception as e:
        logger.error(f"WebSocket error for session {session_id}: {e}")

    finally:
        await hub.handle_disconnect(session_id)
