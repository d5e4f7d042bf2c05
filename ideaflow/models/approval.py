"""
Approval Task Model
One approver's decision at one level for one idea
"""

from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ideaflow.config.database import Base


class ApprovalStatus(str, enum.Enum):
    """Approval status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalTask(Base):
    """Approval task model"""
    __tablename__ = "approvals"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)

    # Idea and Approver
    idea_id = Column(Integer, ForeignKey("ideas.id"), nullable=False)
    approver_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Copied from the level definition at creation time
    level = Column(Integer, nullable=False, default=1)
    status = Column(Enum(ApprovalStatus), default=ApprovalStatus.PENDING, nullable=False)

    # Approver's notes or feedback
    notes = Column(Text, nullable=True)

    # Timestamps (approved_at and rejected_at are mutually exclusive)
    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    idea = relationship("Idea", back_populates="approvals")
    approver = relationship("User", back_populates="approvals", foreign_keys=[approver_id])

    __table_args__ = (
        Index("ix_approvals_idea_level", "idea_id", "level"),
        Index("ix_approvals_approver_status", "approver_id", "status"),
    )

    def __repr__(self):
        return f"<ApprovalTask idea={self.idea_id} level={self.level} - {self.status.value}>"
