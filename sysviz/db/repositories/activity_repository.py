from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from sysviz.db.models.activity import Activity as ActivityModel
from sysviz.domains.activity.entities import Activity


class ActivityRepository:
    """Репозиторий журнала действий, только добавление и чтение"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, activity: Activity) -> Activity:
        db_activity = ActivityModel(
            uuid=activity.uuid,
            user_id=activity.user_id,
            action=activity.action,
            details=activity.details,
            design_id=activity.design_id,
            workspace_id=activity.workspace_id,
            created_at=activity.created_at,
            updated_at=activity.created_at
        )

        self.session.add(db_activity)
        await self.session.commit()
        return activity

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        design_id: Optional[str] = None,
        limit: int = 50
    ) -> List[Activity]:
        """Действия пользователя, новые первыми"""
        query = select(ActivityModel).where(ActivityModel.user_id == user_id)
        if design_id:
            query = query.where(ActivityModel.design_id == design_id)

        result = await self.session.execute(
            query.order_by(ActivityModel.created_at.desc()).limit(limit)
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    def _to_domain(self, db_activity: ActivityModel) -> Activity:
        return Activity(
            uuid=db_activity.uuid,
            user_id=db_activity.user_id,
            action=db_activity.action,
            details=db_activity.details,
            design_id=db_activity.design_id,
            workspace_id=db_activity.workspace_id,
            created_at=db_activity.created_at
        )
