import enum
import uuid
from sqlalchemy import Column, Text, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy import Index
from core.database import Base, utcnow
from models.user import enum_values


class CommentTarget(str, enum.Enum):
    TASK = "Task"
    SUBTASK = "SubTask"


class Comment(Base):
    __tablename__ = "comments"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    content = Column(Text, nullable=False)
    author_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index = True)
    # points at tasks.id or subtasks.id depending on target_type
    target_id = Column(Uuid, nullable=False)
    target_type = Column(Enum(CommentTarget, name="comment_target", values_callable=enum_values), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


    author = relationship("User", foreign_keys=[author_id], lazy="selectin")

    __table_args__ = (
        Index('ix_comments_target_created', 'target_type', 'target_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, {self.target_type.value}={self.target_id}, by={self.author_id})>"
