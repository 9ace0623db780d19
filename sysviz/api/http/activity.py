from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from sysviz.core.auth import get_current_user
from sysviz.core.db import get_db
from sysviz.domains.activity.schemas import ActivityResponse
from sysviz.domains.activity.services import ActivityService
from sysviz.domains.identity.entities import User

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("", response_model=List[ActivityResponse])
async def get_activities(
    design_id: Optional[str] = Query(None, alias="designId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Последние действия текущего пользователя"""
    activities = await ActivityService(db).get_activities(current_user.uuid, design_id)
    return [ActivityResponse.model_validate(a, from_attributes=True) for a in activities]
