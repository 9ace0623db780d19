from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
import uuid

from sysviz.db.repositories.activity_repository import ActivityRepository
from sysviz.domains.activity.entities import Activity

logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 50


class ActivityService:
    """Сервис журнала действий"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity_repository = ActivityRepository(session)

    async def log_activity(
        self,
        user_id: uuid.UUID,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        design_id: Optional[str] = None,
        workspace_id: Optional[str] = None
    ) -> Optional[Activity]:
        """Запись действия; ошибка записи не должна ломать основной запрос"""
        activity = Activity.record(user_id, action, details, design_id, workspace_id)
        try:
            return await self.activity_repository.create(activity)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to log activity {action} for user {user_id}: {e}")
            return None

    async def get_activities(
        self,
        user_id: uuid.UUID,
        design_id: Optional[str] = None
    ) -> List[Activity]:
        """Последние действия пользователя"""
        return await self.activity_repository.list_for_user(user_id, design_id, ACTIVITY_LIMIT)
