import secrets
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any

DEFAULT_DESIGN_NAME = "Untitled Design"


def generate_public_id() -> str:
    return secrets.token_hex(16)


class Design:
    """Сохранённая диаграмма с метаданными доступа"""

    def __init__(
        self,
        uuid: uuid.UUID,
        name: str,
        data: Dict[str, Any],
        created_by: uuid.UUID,
        workspace_id: Optional[str] = None,
        team_id: Optional[uuid.UUID] = None,
        is_public: bool = False,
        public_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.name = name
        self.data = data
        self.created_by = created_by
        self.workspace_id = workspace_id
        self.team_id = team_id
        self.is_public = is_public
        # Единственная точка назначения public_id, дальше он не меняется
        self.public_id = public_id or generate_public_id()
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def replace_graph(self, data: Dict[str, Any], name: Optional[str] = None) -> None:
        """Замена графа целиком, public_id и is_public не трогаются"""
        self.data = data
        if name:
            self.name = name
        self.updated_at = datetime.now(timezone.utc)

    def is_owner(self, user_id: uuid.UUID) -> bool:
        return self.created_by == user_id

    def set_visibility(self, is_public: bool) -> None:
        self.is_public = is_public
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create_design(
        cls,
        created_by: uuid.UUID,
        data: Dict[str, Any],
        name: Optional[str] = None,
        workspace_id: Optional[str] = None,
        team_id: Optional[uuid.UUID] = None
    ) -> "Design":
        return cls(
            uuid=uuid.uuid4(),
            name=name or DEFAULT_DESIGN_NAME,
            data=data,
            created_by=created_by,
            workspace_id=workspace_id,
            team_id=team_id
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Design):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Design(uuid={self.uuid}, name={self.name}, is_public={self.is_public})"
