"""
Approval Workflow Model
Administrator-authored approval policies, selected by category and budget
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index
from datetime import datetime

from ideaflow.config.database import Base


class ApprovalWorkflow(Base):
    """Approval workflow (policy) model"""
    __tablename__ = "approval_workflows"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    # Applicability criteria (NULL = unbounded / any category)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    min_budget = Column(Integer, nullable=True)
    max_budget = Column(Integer, nullable=True)

    # Ordered list of level definitions:
    # [{"level": 1, "approver_roles": [...], "approver_ids": [...], "require_all": false}]
    approval_levels = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, default=True, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    priority = Column(Integer, default=0, nullable=False)  # Higher priority checked first

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_approval_workflows_category_active", "category_id", "is_active"),
        Index("ix_approval_workflows_is_default", "is_default"),
    )

    def __repr__(self):
        return f"<ApprovalWorkflow {self.name} (priority {self.priority})>"
