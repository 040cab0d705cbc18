import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from core.database import Base, utcnow
from models.task import TaskStatus, task_status_type


class SubTask(Base):
    __tablename__ = "subtasks"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(task_status_type, nullable=False, default=TaskStatus.PENDING, index=True)
    deadline = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    creator = relationship("User", foreign_keys=[created_by], lazy="selectin")

    __table_args__ = (
        Index('ix_subtasks_task_created_at', 'task_id', 'created_at'),
    )

    def __repr__(self):
        return f"<SubTask(id={self.id}, task_id={self.task_id}, status={self.status.value})>"
