from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
import uuid

from sysviz.db.models.user import User as UserModel
from sysviz.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            uuid=user.uuid,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            avatar_url=user.avatar_url,
            is_active=user.is_active
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
            await self.session.refresh(db_user)
            return self._to_domain(db_user)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("User already exists")

    async def get_by_uuid(self, user_uuid: uuid.UUID) -> Optional[User]:
        """Получение пользователя по UUID"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.uuid == user_uuid)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None

    async def exists(self, email: str, username: str) -> bool:
        """Проверка занятости email или username"""
        result = await self.session.execute(
            select(UserModel.uuid).where(
                or_(UserModel.email == email, UserModel.username == username)
            )
        )
        return result.first() is not None

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            uuid=db_user.uuid,
            email=db_user.email,
            username=db_user.username,
            password_hash=db_user.password_hash,
            avatar_url=db_user.avatar_url,
            is_active=db_user.is_active,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
