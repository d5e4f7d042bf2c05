"""
Idea Model
Improvement ideas flowing through the approval workflow
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ideaflow.config.database import Base


class IdeaStatus(str, enum.Enum):
    """Idea status"""
    DRAFT = "draft"
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    IMPLEMENTED = "implemented"


# Statuses after which no approval decision is processed
CLOSED_WORKFLOW_STATUSES = frozenset({IdeaStatus.APPROVED, IdeaStatus.REJECTED, IdeaStatus.IMPLEMENTED})


class Idea(Base):
    """Idea model"""
    __tablename__ = "ideas"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Policy selection criteria
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    budget = Column(Numeric(12, 2), nullable=True)

    # Written by the authoring flow (draft/pending/implemented) and the engine
    status = Column(Enum(IdeaStatus), default=IdeaStatus.DRAFT, nullable=False, index=True)

    # Timestamps
    submitted_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    author = relationship("User", foreign_keys=[user_id])
    approvals = relationship("ApprovalTask", back_populates="idea", order_by="ApprovalTask.level")

    def __repr__(self):
        return f"<Idea {self.id} - {self.status.value}>"
