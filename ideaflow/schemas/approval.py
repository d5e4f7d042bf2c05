"""
Approval Schemas
Pydantic models for approval decisions, outcomes and workflow progress
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

from ideaflow.models.approval import ApprovalStatus
from ideaflow.models.idea import IdeaStatus


class ApprovalAction(str, Enum):
    """Decision an approver can submit"""
    APPROVE = "approve"
    REJECT = "reject"


class OutcomeStatus(str, Enum):
    """Workflow state reached after a decision"""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class LevelStatus(str, Enum):
    """Derived status of one approval level"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalCreate(BaseModel):
    """Schema for approving a task"""
    notes: Optional[str] = None


class ApprovalReject(BaseModel):
    """Schema for rejecting a task, a reason is mandatory"""
    notes: str = Field(..., min_length=1)


class ApprovalTaskResponse(BaseModel):
    """Schema for approval task response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    idea_id: int
    approver_id: int
    level: int
    status: ApprovalStatus
    notes: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class WorkflowOutcome(BaseModel):
    """Result of processing one approval decision"""
    final_status: OutcomeStatus
    next_level: Optional[int] = None
    pending_approvals: List[ApprovalTaskResponse] = Field(default_factory=list)

    @property
    def is_final(self) -> bool:
        return self.final_status in (OutcomeStatus.APPROVED, OutcomeStatus.REJECTED)


class LevelReport(BaseModel):
    """Tally of one approval level"""
    level: int
    status: LevelStatus
    approved: int
    rejected: int
    pending: int
    total: int
    tasks: List[ApprovalTaskResponse]


class WorkflowStatusReport(BaseModel):
    """Aggregate progress of an idea's approval workflow"""
    current_level: int
    total_levels: int
    levels: List[LevelReport]
    overall_status: IdeaStatus


class ApprovalDecisionResponse(BaseModel):
    """Schema returned by the approve/reject endpoints"""
    success: bool = True
    message: str
    approval: ApprovalTaskResponse
    workflow_status: WorkflowOutcome
    idea_status: IdeaStatus
