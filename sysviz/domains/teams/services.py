from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from sysviz.db.repositories.team_repository import TeamRepository, WorkspaceRepository
from sysviz.domains.teams.entities import (
    Team, TeamMember, TeamRole, Workspace, generate_team_code
)

logger = logging.getLogger(__name__)


class TeamService:
    """Сервис команд и их рабочих пространств"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.team_repository = TeamRepository(session)
        self.workspace_repository = WorkspaceRepository(session)

    async def _unique_code(self) -> str:
        code = generate_team_code()
        # Повтор до уникального кода
        while await self.team_repository.code_exists(code):
            code = generate_team_code()
        return code

    async def create_team(self, name: str, owner_id: uuid.UUID) -> Team:
        """Создание команды, создатель единственный владелец"""
        team = Team.create_team(name, owner_id, await self._unique_code())
        created = await self.team_repository.create(team)
        logger.info(f"Team {created.uuid} created by {owner_id}")
        return created

    async def join_team(self, code: str, user_id: uuid.UUID) -> Optional[Team]:
        """Вступление в команду по коду приглашения"""
        team = await self.team_repository.get_by_code(code.strip().upper())

        if not team:
            return None

        if team.is_member(user_id):
            raise ValueError("You are already a member of this team")

        return await self.team_repository.add_member(team.uuid, TeamMember(user_id, TeamRole.EDITOR))

    async def get_my_teams(self, user_id: uuid.UUID) -> List[Tuple[Team, Optional[TeamRole]]]:
        """Команды пользователя вместе с его ролью"""
        teams = await self.team_repository.list_for_user(user_id)
        return [(team, team.role_of(user_id)) for team in teams]

    async def create_workspace(
        self,
        team_id: uuid.UUID,
        name: str,
        description: Optional[str] = None
    ) -> Workspace:
        workspace = Workspace.create_workspace(team_id, name, description)
        return await self.workspace_repository.create(workspace)

    async def get_team_workspaces(self, team_id: uuid.UUID) -> List[Workspace]:
        return await self.workspace_repository.list_by_team(team_id)
