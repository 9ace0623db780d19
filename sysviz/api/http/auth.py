from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sysviz.core.auth import get_current_user
from sysviz.core.db import get_db
from sysviz.domains.identity.entities import User
from sysviz.domains.identity.schemas import UserCreate, UserLogin, UserResponse, AuthResponse
from sysviz.domains.identity.services import IdentityService

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)

    try:
        user, token = await identity_service.register_user(user_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"user": user.to_public_dict(), "token": token}


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Вход пользователя"""
    result = await IdentityService(db).login_user(login_data)

    if not result:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    user, token = result
    return {"user": user.to_public_dict(), "token": token}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Данные текущего пользователя"""
    return current_user.to_public_dict()
