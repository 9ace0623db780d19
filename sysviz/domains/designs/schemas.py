from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

from sysviz.domains.collaboration.schemas import GraphDocument


class DesignCreate(BaseModel):
    """Схема для создания диаграммы"""
    name: Optional[str] = Field(None, max_length=255)
    data: GraphDocument = Field(default_factory=GraphDocument)
    workspace_id: Optional[str] = Field(
        None, max_length=64, validation_alias=AliasChoices("workspaceId", "workspace_id")
    )
    team_id: Optional[uuid.UUID] = Field(
        None, validation_alias=AliasChoices("teamId", "team_id")
    )


class DesignUpdate(BaseModel):
    """Схема для обновления диаграммы"""
    name: Optional[str] = Field(None, max_length=255)
    data: GraphDocument


class ShareRequest(BaseModel):
    is_public: bool = Field(..., validation_alias=AliasChoices("isPublic", "is_public"))


class DesignResponse(BaseModel):
    """Схема для ответа с данными диаграммы"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    workspace_id: Optional[str] = None
    team_id: Optional[uuid.UUID] = None
    name: str
    data: Dict[str, Any]
    is_public: bool
    public_id: str
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
