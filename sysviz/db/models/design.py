from sqlalchemy import Column, String, Boolean, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship

from sysviz.db.base import BaseModel


class Design(BaseModel):
    __tablename__ = "designs"

    workspace_id = Column(String(64), index=True, nullable=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.uuid"), index=True, nullable=True)
    name = Column(String(255), nullable=False, default="Untitled Design")
    data = Column(JSON, nullable=False, default=dict)
    is_public = Column(Boolean, nullable=False, default=False)
    public_id = Column(String(32), unique=True, index=True, nullable=False)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), index=True, nullable=False)

    # Relationships
    creator = relationship("User", back_populates="designs")
    team = relationship("Team", back_populates="designs")
