from sysviz.db.models.user import User
from sysviz.db.models.design import Design
from sysviz.db.models.team import Team, TeamMember, Workspace
from sysviz.db.models.activity import Activity

__all__ = [
    "User",
    "Design",
    "Team",
    "TeamMember",
    "Workspace",
    "Activity"
]
