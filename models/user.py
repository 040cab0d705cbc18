import enum
import uuid

from sqlalchemy import String, Column, DateTime, Enum, Uuid, Index
from core.database import Base, utcnow


def enum_values(enum_cls):
    #persist enum values ("in-progress") rather than member names
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    MANAGER = "manager"
    DEVELOPER = "developer"

class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable = False, index=True, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_roles", values_callable=enum_values), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_users_role_name', 'role', 'name'),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
