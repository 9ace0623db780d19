from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from sysviz.db.repositories.design_repository import DesignRepository
from sysviz.domains.collaboration.schemas import GraphDocument
from sysviz.domains.activity.entities import Activity
from sysviz.domains.activity.services import ActivityService
from sysviz.domains.designs.entities import Design
from sysviz.domains.designs.schemas import DesignCreate, DesignUpdate

logger = logging.getLogger(__name__)


def stored_graph(document: GraphDocument) -> dict:
    """Граф в том виде, в каком его прислал клиент, без значений по умолчанию"""
    return {
        "nodes": [node.model_dump(mode="json", exclude_unset=True) for node in document.nodes],
        "edges": [edge.model_dump(mode="json", exclude_unset=True) for edge in document.edges]
    }


class DesignService:
    """Сервис сохранения и загрузки диаграмм"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.design_repository = DesignRepository(session)
        self.activity_service = ActivityService(session)

    async def create_design(self, design_data: DesignCreate, user_id: uuid.UUID) -> Design:
        """Создание диаграммы при первом сохранении рабочего пространства"""
        design = Design.create_design(
            created_by=user_id,
            data=stored_graph(design_data.data),
            name=design_data.name,
            workspace_id=design_data.workspace_id,
            team_id=design_data.team_id
        )

        created = await self.design_repository.create(design)
        logger.info(f"Design {created.uuid} created by {user_id}")

        await self.activity_service.log_activity(
            user_id, Activity.CREATED_DESIGN,
            {"designId": str(created.uuid), "name": created.name},
            design_id=str(created.uuid),
            workspace_id=created.workspace_id
        )
        return created

    async def update_design(
        self,
        design_uuid: uuid.UUID,
        update_data: DesignUpdate,
        user_id: uuid.UUID
    ) -> Optional[Design]:
        """Замена графа существующей диаграммы"""
        design = await self.design_repository.get_by_uuid(design_uuid)

        if not design:
            return None

        design.replace_graph(stored_graph(update_data.data), update_data.name)
        updated = await self.design_repository.update_graph(design)

        await self.activity_service.log_activity(
            user_id, Activity.UPDATED_DESIGN,
            {"designId": str(design.uuid), "name": design.name},
            design_id=str(design.uuid),
            workspace_id=design.workspace_id
        )
        return updated

    async def get_design(self, design_uuid: uuid.UUID) -> Optional[Design]:
        """Получение диаграммы по UUID"""
        return await self.design_repository.get_by_uuid(design_uuid)

    async def get_public_design(self, public_id: str) -> Optional[Design]:
        return await self.design_repository.get_public(public_id)

    async def get_user_designs(self, user_id: uuid.UUID) -> List[Design]:
        return await self.design_repository.list_by(created_by=user_id)

    async def get_team_designs(self, team_id: uuid.UUID) -> List[Design]:
        return await self.design_repository.list_by(team_id=team_id)

    async def get_workspace_designs(self, workspace_id: str) -> List[Design]:
        return await self.design_repository.list_by(workspace_id=workspace_id)

    async def toggle_sharing(
        self,
        design_uuid: uuid.UUID,
        is_public: bool,
        user_id: uuid.UUID
    ) -> Optional[Design]:
        """Публикация или снятие публикации, public_id остаётся прежним"""
        design = await self.design_repository.get_by_uuid(design_uuid)

        if not design:
            return None

        if not design.is_owner(user_id):
            raise PermissionError("Not authorized to share this design")

        design.set_visibility(is_public)
        updated = await self.design_repository.update_visibility(design)

        await self.activity_service.log_activity(
            user_id,
            Activity.PUBLISHED_DESIGN if is_public else Activity.UNPUBLISHED_DESIGN,
            {"designId": str(design.uuid), "name": design.name},
            design_id=str(design.uuid)
        )
        return updated
