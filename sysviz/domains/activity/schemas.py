from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional, Dict, Any
from datetime import datetime
import uuid


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    user_id: uuid.UUID
    action: str
    details: Dict[str, Any] = Field(default_factory=dict)
    workspace_id: Optional[str] = None
    created_at: datetime
