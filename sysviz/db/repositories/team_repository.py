from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError
import uuid

from sysviz.db.models.team import Team as TeamModel, TeamMember as TeamMemberModel, Workspace as WorkspaceModel
from sysviz.domains.teams.entities import Team, TeamMember, Workspace


class TeamRepository:
    """Репозиторий для работы с командами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, team: Team) -> Team:
        """Создание команды вместе с участниками"""
        db_team = TeamModel(
            uuid=team.uuid,
            name=team.name,
            code=team.code,
            owner_id=team.owner_id,
            members=[
                TeamMemberModel(user_id=member.user_id, role=member.role.value)
                for member in team.members
            ]
        )

        self.session.add(db_team)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Team code already taken")

        return await self.get_by_uuid(team.uuid)

    async def get_by_uuid(self, team_uuid: uuid.UUID) -> Optional[Team]:
        result = await self.session.execute(
            select(TeamModel)
            .options(selectinload(TeamModel.members))
            .where(TeamModel.uuid == team_uuid)
            .execution_options(populate_existing=True)
        )
        db_team = result.scalar_one_or_none()
        return self._to_domain(db_team) if db_team else None

    async def get_by_code(self, code: str) -> Optional[Team]:
        """Поиск команды по коду приглашения"""
        result = await self.session.execute(
            select(TeamModel)
            .options(selectinload(TeamModel.members))
            .where(TeamModel.code == code)
        )
        db_team = result.scalar_one_or_none()
        return self._to_domain(db_team) if db_team else None

    async def code_exists(self, code: str) -> bool:
        result = await self.session.execute(
            select(TeamModel.uuid).where(TeamModel.code == code)
        )
        return result.scalar_one_or_none() is not None

    async def add_member(self, team_uuid: uuid.UUID, member: TeamMember) -> Team:
        """Добавление участника в команду"""
        self.session.add(TeamMemberModel(
            team_id=team_uuid,
            user_id=member.user_id,
            role=member.role.value
        ))
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("You are already a member of this team")

        return await self.get_by_uuid(team_uuid)

    async def list_for_user(self, user_id: uuid.UUID) -> List[Team]:
        """Команды, где пользователь состоит, новые первыми"""
        result = await self.session.execute(
            select(TeamModel)
            .join(TeamMemberModel, TeamMemberModel.team_id == TeamModel.uuid)
            .options(selectinload(TeamModel.members))
            .where(TeamMemberModel.user_id == user_id)
            .order_by(TeamModel.created_at.desc())
        )
        return [self._to_domain(db_team) for db_team in result.scalars().unique().all()]

    def _to_domain(self, db_team: TeamModel) -> Team:
        """Преобразование модели БД в доменную сущность"""
        return Team(
            uuid=db_team.uuid,
            name=db_team.name,
            code=db_team.code,
            owner_id=db_team.owner_id,
            members=[TeamMember(m.user_id, m.role) for m in db_team.members],
            created_at=db_team.created_at,
            updated_at=db_team.updated_at
        )


class WorkspaceRepository:
    """Репозиторий рабочих пространств команд"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, workspace: Workspace) -> Workspace:
        db_workspace = WorkspaceModel(
            uuid=workspace.uuid,
            team_id=workspace.team_id,
            name=workspace.name,
            description=workspace.description
        )

        self.session.add(db_workspace)
        try:
            await self.session.commit()
            await self.session.refresh(db_workspace)
            return self._to_domain(db_workspace)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid team_id")

    async def list_by_team(self, team_id: uuid.UUID) -> List[Workspace]:
        result = await self.session.execute(
            select(WorkspaceModel)
            .where(WorkspaceModel.team_id == team_id)
            .order_by(WorkspaceModel.created_at.desc())
        )
        return [self._to_domain(row) for row in result.scalars().all()]

    def _to_domain(self, db_workspace: WorkspaceModel) -> Workspace:
        return Workspace(
            uuid=db_workspace.uuid,
            team_id=db_workspace.team_id,
            name=db_workspace.name,
            description=db_workspace.description,
            created_at=db_workspace.created_at,
            updated_at=db_workspace.updated_at
        )
