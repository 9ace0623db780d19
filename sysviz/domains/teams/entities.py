import secrets
import string
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 8


class TeamRole(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


def generate_team_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class TeamMember:
    def __init__(self, user_id: uuid.UUID, role: TeamRole = TeamRole.EDITOR):
        self.user_id = user_id
        self.role = TeamRole(role)

    def __repr__(self) -> str:
        return f"TeamMember(user_id={self.user_id}, role={self.role.value})"


class Team:
    """Команда с кодом приглашения"""

    def __init__(
        self,
        uuid: uuid.UUID,
        name: str,
        code: str,
        owner_id: uuid.UUID,
        members: Optional[List[TeamMember]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.name = name
        self.code = code
        self.owner_id = owner_id
        self.members = members or []
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    def role_of(self, user_id: uuid.UUID) -> Optional[TeamRole]:
        for member in self.members:
            if member.user_id == user_id:
                return member.role
        return None

    def is_member(self, user_id: uuid.UUID) -> bool:
        return self.role_of(user_id) is not None

    @classmethod
    def create_team(cls, name: str, owner_id: uuid.UUID, code: str) -> "Team":
        """Новая команда, создатель становится единственным владельцем"""
        return cls(
            uuid=uuid.uuid4(),
            name=name,
            code=code,
            owner_id=owner_id,
            members=[TeamMember(owner_id, TeamRole.OWNER)]
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Team):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Team(uuid={self.uuid}, name={self.name}, code={self.code})"


class Workspace:
    """Рабочее пространство команды"""

    def __init__(
        self,
        uuid: uuid.UUID,
        team_id: uuid.UUID,
        name: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.team_id = team_id
        self.name = name
        self.description = description
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)

    @classmethod
    def create_workspace(cls, team_id: uuid.UUID, name: str, description: Optional[str] = None) -> "Workspace":
        return cls(uuid=uuid.uuid4(), team_id=team_id, name=name, description=description)
