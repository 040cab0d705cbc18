import enum
import uuid

from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from core.database import Base, utcnow
from models.user import enum_values


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class Project(Base):
    __tablename__ = "projects"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    status = Column(Enum(ProjectStatus, name="project_status", values_callable=enum_values), nullable=False,
                    default=ProjectStatus.PLANNING, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deadline = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    creator = relationship("User", foreign_keys=[created_by], lazy="selectin")

    __table_args__ = (
        Index('ix_projects_created_by_created_at', 'created_by', 'created_at'),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, title='{self.title}', status={self.status.value})>"
