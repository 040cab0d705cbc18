import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy import Index
from core.database import Base, utcnow
from models.user import enum_values


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


task_status_type = Enum(TaskStatus, name="task_status", values_callable=enum_values)


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False, index = True)
    description = Column(Text, nullable=False)
    status = Column(task_status_type, nullable = False, default=TaskStatus.PENDING, index = True)
    priority = Column(Enum(TaskPriority, name="task_priority", values_callable=enum_values), nullable=False,
                      default=TaskPriority.MEDIUM, index = True)
    deadline = Column (DateTime(timezone=True), nullable = False, index = True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable = False)
    assigned_to = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable = False)
    created_at = Column(DateTime(timezone=True), nullable= False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


    project = relationship("Project", foreign_keys=[project_id], lazy="selectin")
    creator = relationship("User", foreign_keys=[created_by], lazy="selectin")
    assignee = relationship("User", foreign_keys=[assigned_to], lazy="selectin")
    __table_args__ = (
        Index('ix_tasks_project_created_at', 'project_id', 'created_at'),
        Index('ix_tasks_assigned_to_status', 'assigned_to', 'status'),
        Index('ix_tasks_status_deadline', 'status', 'deadline'),
    )


    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"
