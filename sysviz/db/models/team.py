from sqlalchemy import Column, String, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from sysviz.db.base import BaseModel


class Team(BaseModel):
    __tablename__ = "teams"

    name = Column(String(255), nullable=False)
    code = Column(String(8), unique=True, index=True, nullable=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False)

    # Relationships
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")
    workspaces = relationship("Workspace", back_populates="team", cascade="all, delete-orphan")
    designs = relationship("Design", back_populates="team")


class TeamMember(BaseModel):
    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_member"),)

    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.uuid"), index=True, nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), index=True, nullable=False)
    role = Column(String(20), nullable=False, default="editor")

    # Relationships
    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="memberships")


class Workspace(BaseModel):
    __tablename__ = "workspaces"

    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.uuid"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    team = relationship("Team", back_populates="workspaces")
