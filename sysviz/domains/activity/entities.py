import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any


class Activity:
    """Запись журнала действий, после создания не меняется"""

    CREATED_DESIGN = "created_design"
    UPDATED_DESIGN = "updated_design"
    PUBLISHED_DESIGN = "published_design"
    UNPUBLISHED_DESIGN = "unpublished_design"

    def __init__(
        self,
        uuid: uuid.UUID,
        user_id: uuid.UUID,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        design_id: Optional[str] = None,
        workspace_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.user_id = user_id
        self.action = action
        self.details = details or {}
        self.design_id = design_id
        self.workspace_id = workspace_id
        self.created_at = created_at or datetime.now(timezone.utc)

    @classmethod
    def record(
        cls,
        user_id: uuid.UUID,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        design_id: Optional[str] = None,
        workspace_id: Optional[str] = None
    ) -> "Activity":
        return cls(
            uuid=uuid.uuid4(),
            user_id=user_id,
            action=action,
            details=details,
            design_id=design_id,
            workspace_id=workspace_id
        )

    def __repr__(self) -> str:
        return f"Activity(user_id={self.user_id}, action={self.action})"
