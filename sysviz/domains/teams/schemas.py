from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional, List
from datetime import datetime
import uuid


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class TeamJoin(BaseModel):
    code: str = Field(..., min_length=1, max_length=8)


class TeamMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    user_id: uuid.UUID
    role: str


class TeamResponse(BaseModel):
    """Команда; role заполняется для текущего пользователя"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    name: str
    code: str
    owner_id: uuid.UUID
    members: List[TeamMemberResponse] = Field(default_factory=list)
    role: Optional[str] = None
    created_at: datetime


class TeamJoinResponse(BaseModel):
    message: str
    team: TeamResponse


class WorkspaceCreate(BaseModel):
    team_id: uuid.UUID = Field(..., validation_alias=AliasChoices("teamId", "team_id"))
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    team_id: uuid.UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
