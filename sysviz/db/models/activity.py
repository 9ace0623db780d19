from sqlalchemy import Column, String, ForeignKey, JSON, Uuid

from sysviz.db.base import BaseModel


class Activity(BaseModel):
    """Журнал действий, строки только добавляются"""
    __tablename__ = "activities"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), index=True, nullable=False)
    action = Column(String(64), nullable=False)
    details = Column(JSON, nullable=True)
    design_id = Column(String(64), index=True, nullable=True)
    workspace_id = Column(String(64), nullable=True)
