from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from sysviz.core.auth import get_current_user
from sysviz.core.db import get_db
from sysviz.domains.designs.schemas import DesignCreate, DesignUpdate, DesignResponse, ShareRequest
from sysviz.domains.designs.services import DesignService
from sysviz.domains.identity.entities import User

router = APIRouter(prefix="/api/designs", tags=["designs"])


def to_response(design) -> DesignResponse:
    return DesignResponse.model_validate(design, from_attributes=True)


@router.get("/public/{public_id}", response_model=DesignResponse)
async def get_public_design(
    public_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Просмотр опубликованной диаграммы без авторизации"""
    design = await DesignService(db).get_public_design(public_id)

    if not design:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shared design not found or private"
        )

    return to_response(design)


@router.post("", response_model=DesignResponse, status_code=status.HTTP_201_CREATED)
async def create_design(
    design_data: DesignCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание новой диаграммы"""
    try:
        design = await DesignService(db).create_design(design_data, current_user.uuid)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return to_response(design)


@router.get("/mine", response_model=List[DesignResponse])
async def get_my_designs(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Диаграммы текущего пользователя"""
    designs = await DesignService(db).get_user_designs(current_user.uuid)
    return [to_response(design) for design in designs]


@router.get("/team/{team_id}", response_model=List[DesignResponse])
async def get_team_designs(
    team_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    designs = await DesignService(db).get_team_designs(team_id)
    return [to_response(design) for design in designs]


@router.get("/workspace/{workspace_id}", response_model=List[DesignResponse])
async def get_workspace_designs(
    workspace_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    designs = await DesignService(db).get_workspace_designs(workspace_id)
    return [to_response(design) for design in designs]


@router.get("/{design_id}", response_model=DesignResponse)
async def get_design(
    design_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение диаграммы по UUID"""
    design = await DesignService(db).get_design(design_id)

    if not design:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Design not found"
        )

    return to_response(design)


@router.put("/{design_id}", response_model=DesignResponse)
async def update_design(
    design_id: uuid.UUID,
    update_data: DesignUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление графа диаграммы"""
    design = await DesignService(db).update_design(design_id, update_data, current_user.uuid)

    if not design:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Design not found"
        )

    return to_response(design)


@router.post("/{design_id}/share", response_model=DesignResponse)
async def toggle_sharing(
    design_id: uuid.UUID,
    share_request: ShareRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Включение или отключение публичного доступа"""
    try:
        design = await DesignService(db).toggle_sharing(
            design_id,
            share_request.is_public,
            current_user.uuid
        )
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not design:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Design not found"
        )

    return to_response(design)
