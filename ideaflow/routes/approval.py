"""
Approval Routes
Approver-facing endpoints of the idea approval workflow
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from ideaflow.config.database import get_db
from ideaflow.models.approval import ApprovalStatus
from ideaflow.models.user import User
from ideaflow.schemas.approval import (
    ApprovalCreate,
    ApprovalDecisionResponse,
    ApprovalReject,
    ApprovalTaskResponse,
    OutcomeStatus,
)
from ideaflow.services.approval_workflow_service import approval_workflow_service
from ideaflow.services.auth_service import auth_service
from ideaflow.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


def _load_decidable_task(db: Session, current_user: User, task_id: int):
    """Fetch a task in the caller's tenant and check the caller may decide it"""
    task = approval_workflow_service.get_task(db, current_user.tenant_id, task_id)

    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Approval not found"
        )

    if not auth_service.can_decide(current_user, task):
        logger.warning(f"User {current_user.id} is not allowed to decide approval task {task_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized to decide this approval request"
        )

    return task


@router.get("/")
async def list_my_approvals(
    status_filter: Optional[ApprovalStatus] = Query(None, alias="status"),
    page: int = 1,
    per_page: int = 15,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Approval tasks assigned to the current user

    ``per_page`` is clamped between 1 and 100.
    """
    per_page = max(1, min(per_page, 100))
    page = max(1, page)

    tasks = approval_workflow_service.list_tasks_for_approver(
        db,
        current_user.tenant_id,
        current_user.id,
        status=status_filter,
        skip=(page - 1) * per_page,
        limit=per_page
    )

    return {
        "success": True,
        "data": [ApprovalTaskResponse.model_validate(t) for t in tasks],
        "page": page,
        "per_page": per_page,
    }


@router.get("/pending/count")
async def pending_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Number of pending approval tasks of the current user"""
    count = approval_workflow_service.count_pending_for_approver(
        db, current_user.tenant_id, current_user.id
    )
    return {"success": True, "data": {"count": count}}


@router.get("/ideas/{idea_id}/workflow")
async def workflow_status(
    idea_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Per-level approval progress of an idea"""
    idea = approval_workflow_service.get_idea(db, current_user.tenant_id, idea_id)

    if not idea:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Idea not found"
        )

    report = approval_workflow_service.get_workflow_status(db, current_user.tenant_id, idea)
    return {"success": True, "data": report}


@router.get("/{task_id}")
async def get_approval(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get a single approval task"""
    task = approval_workflow_service.get_task(db, current_user.tenant_id, task_id)

    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Approval not found"
        )

    return {"success": True, "data": ApprovalTaskResponse.model_validate(task)}


@router.post("/{task_id}/approve", response_model=ApprovalDecisionResponse)
async def approve_idea(
    task_id: int,
    approval_data: ApprovalCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Approve an approval task and advance the idea's workflow"""
    tenant_id = current_user.tenant_id
    user_id = current_user.id
    logger.info(f"User {user_id} attempting to approve task {task_id}")

    _load_decidable_task(db, current_user, task_id)

    outcome = approval_workflow_service.approve(
        db, tenant_id, task_id, approval_data.notes, decided_by=user_id
    )

    task = approval_workflow_service.get_task(db, tenant_id, task_id)
    idea = approval_workflow_service.get_idea(db, tenant_id, task.idea_id)

    if outcome.final_status == OutcomeStatus.APPROVED:
        message = "Idea fully approved!"
    elif outcome.final_status == OutcomeStatus.REJECTED:
        message = "Approval recorded, but the idea was rejected at this level."
    elif outcome.final_status == OutcomeStatus.UNDER_REVIEW:
        message = f"Approval recorded. Moving to level {outcome.next_level}."
    else:
        message = "Approval recorded. Waiting for other approvers at this level."

    return ApprovalDecisionResponse(
        message=message,
        approval=ApprovalTaskResponse.model_validate(task),
        workflow_status=outcome,
        idea_status=idea.status,
    )


@router.post("/{task_id}/reject", response_model=ApprovalDecisionResponse)
async def reject_idea(
    task_id: int,
    rejection_data: ApprovalReject,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Reject an approval task, which rejects the whole idea"""
    tenant_id = current_user.tenant_id
    user_id = current_user.id
    logger.info(f"User {user_id} attempting to reject task {task_id}")

    _load_decidable_task(db, current_user, task_id)

    outcome = approval_workflow_service.reject(
        db, tenant_id, task_id, rejection_data.notes, decided_by=user_id
    )

    task = approval_workflow_service.get_task(db, tenant_id, task_id)
    idea = approval_workflow_service.get_idea(db, tenant_id, task.idea_id)

    return ApprovalDecisionResponse(
        message="Idea rejected",
        approval=ApprovalTaskResponse.model_validate(task),
        workflow_status=outcome,
        idea_status=idea.status,
    )
