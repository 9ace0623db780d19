from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
import uuid

from sysviz.db.models.design import Design as DesignModel

if TYPE_CHECKING:
    from sysviz.domains.designs.entities import Design


class DesignRepository:
    """Репозиторий для работы с диаграммами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, design: "Design") -> "Design":
        """Создание новой диаграммы"""
        db_design = DesignModel(
            uuid=design.uuid,
            workspace_id=design.workspace_id,
            team_id=design.team_id,
            name=design.name,
            data=design.data,
            is_public=design.is_public,
            public_id=design.public_id,
            created_by=design.created_by
        )

        self.session.add(db_design)
        try:
            await self.session.commit()
            await self.session.refresh(db_design)
            return self._to_domain(db_design)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid team_id or created_by")

    async def get_by_uuid(self, design_uuid: uuid.UUID) -> Optional["Design"]:
        """Получение диаграммы по UUID"""
        result = await self.session.execute(
            select(DesignModel)
            .where(DesignModel.uuid == design_uuid)
            .execution_options(populate_existing=True)
        )
        db_design = result.scalar_one_or_none()
        return self._to_domain(db_design) if db_design else None

    async def get_public(self, public_id: str) -> Optional["Design"]:
        """Получение опубликованной диаграммы по public_id"""
        result = await self.session.execute(
            select(DesignModel).where(
                DesignModel.public_id == public_id,
                DesignModel.is_public.is_(True)
            )
        )
        db_design = result.scalar_one_or_none()
        return self._to_domain(db_design) if db_design else None

    async def list_by(self, **filters) -> List["Design"]:
        """Список диаграмм по полю, новые изменения первыми"""
        query = select(DesignModel)
        for column, value in filters.items():
            query = query.where(getattr(DesignModel, column) == value)

        result = await self.session.execute(query.order_by(DesignModel.updated_at.desc()))
        return [self._to_domain(db_design) for db_design in result.scalars().all()]

    async def update_graph(self, design: "Design") -> Optional["Design"]:
        """Замена графа и имени, поля публикации не трогаются"""
        stmt = (
            update(DesignModel)
            .where(DesignModel.uuid == design.uuid)
            .values(
                name=design.name,
                data=design.data,
                updated_at=design.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_uuid(design.uuid)

    async def update_visibility(self, design: "Design") -> Optional["Design"]:
        stmt = (
            update(DesignModel)
            .where(DesignModel.uuid == design.uuid)
            .values(is_public=design.is_public, updated_at=design.updated_at)
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_uuid(design.uuid)

    def _to_domain(self, db_design: DesignModel) -> "Design":
        """Преобразование модели БД в доменную сущность"""
        from sysviz.domains.designs.entities import Design

        return Design(
            uuid=db_design.uuid,
            name=db_design.name,
            data=db_design.data or {"nodes": [], "edges": []},
            created_by=db_design.created_by,
            workspace_id=db_design.workspace_id,
            team_id=db_design.team_id,
            is_public=db_design.is_public,
            public_id=db_design.public_id,
            created_at=db_design.created_at,
            updated_at=db_design.updated_at
        )
