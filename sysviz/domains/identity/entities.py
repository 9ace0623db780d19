import uuid
from datetime import datetime, timezone
from typing import Optional

from sysviz.core.security import get_password_hash, verify_password


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        username: str,
        password_hash: str,
        avatar_url: Optional[str] = None,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.username = username
        self.password_hash = password_hash
        self.avatar_url = avatar_url
        self.is_active = is_active
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def to_public_dict(self) -> dict:
        return {
            "id": str(self.uuid),
            "username": self.username,
            "email": self.email,
            "avatar_url": self.avatar_url
        }

    @classmethod
    def create_user(cls, email: str, username: str, password: str) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            uuid=uuid.uuid4(),
            email=email,
            username=username,
            password_hash=get_password_hash(password)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"User(uuid={self.uuid}, email={self.email}, username={self.username})"
