"""
Approval Workflow Service
Entry points of the approval engine used by the idea submission flow and the API
"""

from sqlalchemy.orm import Session
from typing import List, Optional

from ideaflow.models.approval import ApprovalTask, ApprovalStatus
from ideaflow.models.idea import Idea
from ideaflow.schemas.approval import ApprovalAction, WorkflowOutcome, WorkflowStatusReport
from ideaflow.services.approval_graph_builder import approval_graph_builder
from ideaflow.services.approval_processor import approval_processor
from ideaflow.services.workflow_status_service import workflow_status_service


class ApprovalWorkflowService:
    """Service for approval workflow business logic"""

    def __init__(self):
        """Initialize with dependent services"""
        self.graph_builder = approval_graph_builder
        self.processor = approval_processor
        self.status_service = workflow_status_service

    def initialize_workflow(self, db: Session, tenant_id: int, idea: Idea) -> List[ApprovalTask]:
        """Create the approval tasks of a freshly submitted idea"""
        return self.graph_builder.initialize_workflow(db, tenant_id, idea)

    def decide(
        self,
        db: Session,
        tenant_id: int,
        task_id: int,
        action: ApprovalAction,
        notes: Optional[str] = None,
        decided_by: Optional[int] = None
    ) -> WorkflowOutcome:
        """Approve or reject one approval task"""
        return self.processor.decide(db, tenant_id, task_id, action, notes, decided_by)

    def approve(self, db: Session, tenant_id: int, task_id: int, notes: Optional[str] = None,
                decided_by: Optional[int] = None) -> WorkflowOutcome:
        return self.decide(db, tenant_id, task_id, ApprovalAction.APPROVE, notes, decided_by)

    def reject(self, db: Session, tenant_id: int, task_id: int, notes: Optional[str] = None,
               decided_by: Optional[int] = None) -> WorkflowOutcome:
        return self.decide(db, tenant_id, task_id, ApprovalAction.REJECT, notes, decided_by)

    def get_workflow_status(self, db: Session, tenant_id: int, idea: Idea) -> WorkflowStatusReport:
        """Per-level progress of an idea"""
        return self.status_service.get_status(db, tenant_id, idea)

    def get_task(self, db: Session, tenant_id: int, task_id: int) -> Optional[ApprovalTask]:
        return db.query(ApprovalTask).filter(
            ApprovalTask.id == task_id,
            ApprovalTask.tenant_id == tenant_id
        ).first()

    def get_idea(self, db: Session, tenant_id: int, idea_id: int) -> Optional[Idea]:
        return db.query(Idea).filter(
            Idea.id == idea_id,
            Idea.tenant_id == tenant_id
        ).first()

    def list_tasks_for_approver(
        self,
        db: Session,
        tenant_id: int,
        approver_id: int,
        status: Optional[ApprovalStatus] = None,
        skip: int = 0,
        limit: int = 15
    ) -> List[ApprovalTask]:
        """
        Approval tasks assigned to one approver, newest first

        Args:
            db: Database session
            tenant_id: Tenant of the approver
            approver_id: Approver's user id
            status: Optional status filter
            skip: Offset for pagination
            limit: Page size

        Returns:
            List of approval tasks
        """
        query = db.query(ApprovalTask).filter(
            ApprovalTask.tenant_id == tenant_id,
            ApprovalTask.approver_id == approver_id
        )
        if status is not None:
            query = query.filter(ApprovalTask.status == status)
        return query.order_by(
            ApprovalTask.created_at.desc(), ApprovalTask.id.desc()
        ).offset(skip).limit(limit).all()

    def count_pending_for_approver(self, db: Session, tenant_id: int, approver_id: int) -> int:
        return db.query(ApprovalTask).filter(
            ApprovalTask.tenant_id == tenant_id,
            ApprovalTask.approver_id == approver_id,
            ApprovalTask.status == ApprovalStatus.PENDING
        ).count()


# Create singleton instance
approval_workflow_service = ApprovalWorkflowService()
