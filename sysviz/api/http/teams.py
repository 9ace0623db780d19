from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from sysviz.core.auth import get_current_user
from sysviz.core.db import get_db
from sysviz.domains.identity.entities import User
from sysviz.domains.teams.entities import Team, TeamRole
from sysviz.domains.teams.schemas import (
    TeamCreate, TeamJoin, TeamResponse, TeamJoinResponse, WorkspaceCreate, WorkspaceResponse
)
from sysviz.domains.teams.services import TeamService

router = APIRouter(prefix="/api/collaboration", tags=["collaboration"])


def team_response(team: Team, role: Optional[TeamRole] = None) -> TeamResponse:
    return TeamResponse(
        id=team.uuid,
        name=team.name,
        code=team.code,
        owner_id=team.owner_id,
        members=[{"user_id": m.user_id, "role": m.role.value} for m in team.members],
        role=role.value if role else None,
        created_at=team.created_at
    )


@router.post("/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание команды"""
    team = await TeamService(db).create_team(team_data.name, current_user.uuid)
    return team_response(team, TeamRole.OWNER)


@router.get("/teams", response_model=List[TeamResponse])
async def get_my_teams(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Команды текущего пользователя"""
    teams = await TeamService(db).get_my_teams(current_user.uuid)
    return [team_response(team, role) for team, role in teams]


@router.post("/teams/join", response_model=TeamJoinResponse)
async def join_team(
    join_data: TeamJoin,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Вступление в команду по коду"""
    try:
        team = await TeamService(db).join_team(join_data.code, current_user.uuid)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not team:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Team not found with this code"
        )

    return TeamJoinResponse(
        message="Successfully joined team",
        team=team_response(team, team.role_of(current_user.uuid))
    )


@router.post("/workspaces", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workspace(
    workspace_data: WorkspaceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        workspace = await TeamService(db).create_workspace(
            workspace_data.team_id,
            workspace_data.name,
            workspace_data.description
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return WorkspaceResponse.model_validate(workspace, from_attributes=True)


@router.get("/teams/{team_id}/workspaces", response_model=List[WorkspaceResponse])
async def get_team_workspaces(
    team_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    workspaces = await TeamService(db).get_team_workspaces(team_id)
    return [WorkspaceResponse.model_validate(w, from_attributes=True) for w in workspaces]
