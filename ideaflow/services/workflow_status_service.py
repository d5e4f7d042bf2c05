"""
Workflow Status Service
Read-only per-level tally of an idea's approval workflow
"""

from itertools import groupby
from sqlalchemy.orm import Session

from ideaflow.models.approval import ApprovalTask, ApprovalStatus
from ideaflow.models.idea import Idea
from ideaflow.schemas.approval import (
    ApprovalTaskResponse,
    LevelReport,
    LevelStatus,
    WorkflowStatusReport,
)


class WorkflowStatusService:
    """Reconstructs workflow progress from the stored approval tasks"""

    def get_status(self, db: Session, tenant_id: int, idea: Idea) -> WorkflowStatusReport:
        """
        Get approval workflow status for an idea

        ``current_level`` moves past every fully approved level. The overall
        status is the idea's own status field.
        """
        tasks = db.query(ApprovalTask).filter(
            ApprovalTask.tenant_id == tenant_id,
            ApprovalTask.idea_id == idea.id
        ).order_by(ApprovalTask.level, ApprovalTask.id).all()

        current_level = 1
        levels = []
        for level, level_tasks in groupby(tasks, key=lambda t: t.level):
            level_tasks = list(level_tasks)
            approved = sum(1 for t in level_tasks if t.status == ApprovalStatus.APPROVED)
            rejected = sum(1 for t in level_tasks if t.status == ApprovalStatus.REJECTED)
            pending = sum(1 for t in level_tasks if t.status == ApprovalStatus.PENDING)
            total = len(level_tasks)

            level_status = LevelStatus.PENDING
            if rejected > 0:
                level_status = LevelStatus.REJECTED
            elif approved == total:
                level_status = LevelStatus.APPROVED
                current_level = level + 1
            elif approved > 0:
                level_status = LevelStatus.IN_PROGRESS

            levels.append(LevelReport(
                level=level,
                status=level_status,
                approved=approved,
                rejected=rejected,
                pending=pending,
                total=total,
                tasks=[ApprovalTaskResponse.model_validate(t) for t in level_tasks],
            ))

        return WorkflowStatusReport(
            current_level=current_level,
            total_levels=len(levels),
            levels=levels,
            overall_status=idea.status,
        )


# Create singleton instance
workflow_status_service = WorkflowStatusService()
