"""
Approval Processor
Applies approve/reject decisions and drives the idea through its levels
"""

from datetime import datetime
from sqlalchemy.orm import Session
from typing import List, Optional

from ideaflow.exceptions import (
    AlreadyProcessedError,
    ApprovalTaskNotFoundError,
    WorkflowClosedError,
)
from ideaflow.models.approval import ApprovalTask, ApprovalStatus
from ideaflow.models.idea import Idea, IdeaStatus, CLOSED_WORKFLOW_STATUSES
from ideaflow.schemas.approval import (
    ApprovalAction,
    ApprovalTaskResponse,
    OutcomeStatus,
    WorkflowOutcome,
)
from ideaflow.utils.logger import setup_logger, log_audit

logger = setup_logger()


class ApprovalProcessor:
    """
    State machine for approval decisions

    Each call to ``decide`` is a single transaction. The idea row and the
    task row are locked before anything is read, so decisions on the same
    idea are applied one after the other and every level tally sees the
    previous decision.
    """

    def decide(
        self,
        db: Session,
        tenant_id: int,
        task_id: int,
        action: ApprovalAction,
        notes: Optional[str] = None,
        decided_by: Optional[int] = None
    ) -> WorkflowOutcome:
        """
        Process an approval decision and advance the workflow

        Args:
            db: Database session
            tenant_id: Tenant of the task
            task_id: Approval task being decided
            action: Approve or reject
            notes: Optional approver notes
            decided_by: User submitting the decision, for the audit trail
                (defaults to the task's approver)

        Returns:
            WorkflowOutcome describing where the workflow now stands

        Raises:
            ApprovalTaskNotFoundError: Task does not exist in the tenant
            AlreadyProcessedError: Task is no longer pending
            WorkflowClosedError: The idea already has a final decision
        """
        try:
            outcome, idea_id, level, approver_id = self._apply(
                db, tenant_id, task_id, action, notes
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Approval task {task_id} ({action.value}) on idea {idea_id} level {level}: "
            f"workflow now {outcome.final_status.value}"
            + (f", next level {outcome.next_level}" if outcome.next_level else "")
        )
        log_audit(
            decided_by if decided_by is not None else approver_id,
            f"{action.value}_idea",
            f"idea={idea_id} task={task_id} level={level} outcome={outcome.final_status.value}",
            tenant_id=tenant_id,
        )
        return outcome

    def _apply(
        self,
        db: Session,
        tenant_id: int,
        task_id: int,
        action: ApprovalAction,
        notes: Optional[str]
    ):
        idea_id = db.query(ApprovalTask.idea_id).filter(
            ApprovalTask.id == task_id,
            ApprovalTask.tenant_id == tenant_id
        ).scalar()
        if idea_id is None:
            raise ApprovalTaskNotFoundError(task_id)

        # Lock order: idea first, then task
        idea = db.query(Idea).filter(
            Idea.id == idea_id,
            Idea.tenant_id == tenant_id
        ).populate_existing().with_for_update().one()

        task = db.query(ApprovalTask).filter(
            ApprovalTask.id == task_id
        ).populate_existing().with_for_update().one()

        if task.status != ApprovalStatus.PENDING:
            raise AlreadyProcessedError(task_id, task.status.value)

        if idea.status in CLOSED_WORKFLOW_STATUSES:
            raise WorkflowClosedError(idea.id, idea.status.value)

        now = datetime.utcnow()
        task.notes = notes
        if action == ApprovalAction.APPROVE:
            task.status = ApprovalStatus.APPROVED
            task.approved_at = now
        elif action == ApprovalAction.REJECT:
            task.status = ApprovalStatus.REJECTED
            task.rejected_at = now
        else:
            raise ValueError(f"Unsupported approval action: {action!r}")

        db.flush()

        if action == ApprovalAction.REJECT:
            outcome = self._reject_idea(idea, now)
        else:
            outcome = self._advance(db, tenant_id, idea, task.level, now)

        db.flush()
        return outcome, idea.id, task.level, task.approver_id

    def _advance(
        self,
        db: Session,
        tenant_id: int,
        idea: Idea,
        level: int,
        now: datetime
    ) -> WorkflowOutcome:
        """Evaluate the level of an approved task and move the idea forward"""
        level_tasks = self._tasks_at_level(db, tenant_id, idea.id, level)

        any_rejected = any(t.status == ApprovalStatus.REJECTED for t in level_tasks)
        all_approved = all(t.status == ApprovalStatus.APPROVED for t in level_tasks)

        if any_rejected:
            return self._reject_idea(idea, now)

        if not all_approved:
            # Still waiting for other approvers at this level
            return WorkflowOutcome(
                final_status=OutcomeStatus.PENDING,
                next_level=level,
                pending_approvals=self._responses(
                    t for t in level_tasks if t.status == ApprovalStatus.PENDING
                ),
            )

        # Literal next level; a gap in level numbers ends the workflow here
        next_level = level + 1
        next_tasks = self._tasks_at_level(
            db, tenant_id, idea.id, next_level, status=ApprovalStatus.PENDING
        )

        if not next_tasks:
            idea.status = IdeaStatus.APPROVED
            idea.approved_at = now
            return WorkflowOutcome(final_status=OutcomeStatus.APPROVED)

        idea.status = IdeaStatus.UNDER_REVIEW
        return WorkflowOutcome(
            final_status=OutcomeStatus.UNDER_REVIEW,
            next_level=next_level,
            pending_approvals=self._responses(next_tasks),
        )

    @staticmethod
    def _reject_idea(idea: Idea, now: datetime) -> WorkflowOutcome:
        """Reject the whole idea; sibling tasks stay as they are"""
        idea.status = IdeaStatus.REJECTED
        idea.rejected_at = now
        return WorkflowOutcome(final_status=OutcomeStatus.REJECTED)

    @staticmethod
    def _tasks_at_level(
        db: Session,
        tenant_id: int,
        idea_id: int,
        level: int,
        status: Optional[ApprovalStatus] = None
    ) -> List[ApprovalTask]:
        query = db.query(ApprovalTask).filter(
            ApprovalTask.tenant_id == tenant_id,
            ApprovalTask.idea_id == idea_id,
            ApprovalTask.level == level
        )
        if status is not None:
            query = query.filter(ApprovalTask.status == status)
        return query.order_by(ApprovalTask.id).all()

    @staticmethod
    def _responses(tasks) -> List[ApprovalTaskResponse]:
        return [ApprovalTaskResponse.model_validate(task) for task in tasks]


# Create singleton instance
approval_processor = ApprovalProcessor()
