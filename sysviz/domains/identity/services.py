from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from sysviz.db.repositories.user_repository import UserRepository
from sysviz.domains.identity.entities import User
from sysviz.domains.identity.schemas import UserCreate, UserLogin
from sysviz.core.security import create_access_token, verify_token

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    def issue_token(self, user: User) -> str:
        return create_access_token(data={"sub": str(user.uuid), "username": user.username})

    async def register_user(self, user_data: UserCreate) -> Tuple[User, str]:
        """Регистрация нового пользователя"""
        if await self.user_repository.exists(user_data.email, user_data.username):
            raise ValueError("User already exists")

        user = User.create_user(
            email=user_data.email,
            username=user_data.username,
            password=user_data.password
        )
        user = await self.user_repository.create(user)
        logger.info(f"Registered user {user.uuid}")

        return user, self.issue_token(user)

    async def login_user(self, login_data: UserLogin) -> Optional[Tuple[User, str]]:
        """Вход пользователя и создание JWT токена"""
        user = await self.user_repository.get_by_email(login_data.email)

        if not user or not user.is_active:
            return None

        if not user.authenticate(login_data.password):
            return None

        return user, self.issue_token(user)

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            return None

        try:
            user_uuid = uuid.UUID(payload["sub"])
        except (TypeError, ValueError):
            return None

        user = await self.user_repository.get_by_uuid(user_uuid)
        if user is None or not user.is_active:
            return None

        return user
