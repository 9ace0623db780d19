from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
import uuid


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.replace('_', '').replace('-', '').isalnum():
            raise ValueError('Username must contain only alphanumeric characters, underscores, and hyphens')
        return v


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Публичные данные пользователя"""
    id: uuid.UUID
    username: str
    email: EmailStr
    avatar_url: Optional[str] = None


class AuthResponse(BaseModel):
    """Ответ регистрации и входа"""
    user: UserResponse
    token: str
