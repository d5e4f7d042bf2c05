"""
User Model
Directory of people who can author ideas and approve them
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ideaflow.config.database import Base


class UserRole(str, enum.Enum):
    """User roles"""
    USER = "user"
    TEAM_LEAD = "team_lead"
    DEPARTMENT_HEAD = "department_head"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    email = Column(String, index=True, nullable=False)
    full_name = Column(String, nullable=False)

    # Role drives approver resolution
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    department = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    approvals = relationship("ApprovalTask", back_populates="approver", foreign_keys="ApprovalTask.approver_id")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
