"""
Approval Graph Builder
Materializes an approval workflow into per-level approval tasks
"""

from sqlalchemy.orm import Session
from typing import List, Tuple

from ideaflow.config.settings import settings
from ideaflow.exceptions import WorkflowAlreadyInitializedError
from ideaflow.models.approval import ApprovalTask, ApprovalStatus
from ideaflow.models.approval_workflow import ApprovalWorkflow
from ideaflow.models.idea import Idea
from ideaflow.models.user import User
from ideaflow.services.policy_store import policy_store
from ideaflow.services.user_directory import user_directory
from ideaflow.services.workflow_resolver import workflow_resolver
from ideaflow.utils.logger import setup_logger, log_audit

logger = setup_logger()


class ApprovalGraphBuilder:
    """Creates one pending approval task per (level, approver) pair"""

    def __init__(self):
        """Initialize with dependent services"""
        self.resolver = workflow_resolver
        self.policy_store = policy_store
        self.user_directory = user_directory

    def initialize_workflow(self, db: Session, tenant_id: int, idea: Idea) -> List[ApprovalTask]:
        """
        Initialize the approval workflow for an idea

        The caller has already moved the idea into a pending state; its
        status is not touched here.

        Args:
            db: Database session
            tenant_id: Tenant of the idea
            idea: Freshly submitted idea

        Returns:
            All created approval tasks, across every level

        Raises:
            WorkflowAlreadyInitializedError: If the idea already has tasks
            InvalidPolicyError: If the resolved policy has malformed levels
        """
        idea_id = idea.id
        try:
            tasks, plan, source = self._create_tasks(db, tenant_id, idea, idea_id)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Approval workflow initialized for idea {idea_id} using {source}: "
            f"{len(tasks)} task(s) across {len(plan)} level(s)"
        )
        log_audit(
            None,
            "initialize_workflow",
            f"idea={idea_id} source={source} tasks={len(tasks)}",
            tenant_id=tenant_id,
        )
        return tasks

    def _create_tasks(self, db: Session, tenant_id: int, idea: Idea, idea_id: int):
        # The idea lock makes the existing-task check and the inserts atomic
        # with respect to concurrent initializations of the same idea
        db.query(Idea).filter(
            Idea.id == idea_id,
            Idea.tenant_id == tenant_id
        ).with_for_update().one()

        existing = db.query(ApprovalTask).filter(
            ApprovalTask.tenant_id == tenant_id,
            ApprovalTask.idea_id == idea_id
        ).count()
        if existing:
            raise WorkflowAlreadyInitializedError(idea_id, existing)

        policy = self.resolver.resolve(db, tenant_id, idea)
        if policy is None:
            plan = self.default_plan(db, tenant_id)
            source = "built-in fallback"
        else:
            plan = self.plan_levels(db, tenant_id, policy)
            source = f"workflow '{policy.name}'"

        tasks = []
        for level, approvers in plan:
            if not approvers:
                logger.warning(
                    f"Level {level} of {source} has no eligible approvers; "
                    f"idea {idea_id} will stall at this level"
                )
            for approver in approvers:
                tasks.append(ApprovalTask(
                    tenant_id=tenant_id,
                    idea_id=idea_id,
                    approver_id=approver.id,
                    level=level,
                    status=ApprovalStatus.PENDING,
                ))

        db.add_all(tasks)
        db.flush()
        return tasks, plan, source

    def plan_levels(
        self,
        db: Session,
        tenant_id: int,
        policy: ApprovalWorkflow
    ) -> List[Tuple[int, List[User]]]:
        """
        Resolve every level definition of a policy to its distinct approvers

        Role approvers come first (by user id), then explicitly named users
        in the order given; a user appears at most once per level.
        """
        plan = []
        for definition in self.policy_store.level_definitions(policy):
            approvers = []
            seen = set()

            for user in self.user_directory.active_users_with_roles(
                db, tenant_id, definition.approver_roles
            ):
                if user.id not in seen:
                    seen.add(user.id)
                    approvers.append(user)

            for approver_id in definition.approver_ids:
                if approver_id in seen:
                    continue
                user = self.user_directory.get_user(db, tenant_id, approver_id)
                if user is None:
                    logger.warning(
                        f"Approver {approver_id} named at level {definition.level} of "
                        f"workflow '{policy.name}' does not exist in tenant {tenant_id}"
                    )
                    continue
                seen.add(user.id)
                approvers.append(user)

            plan.append((definition.level, approvers))
        return plan

    def default_plan(self, db: Session, tenant_id: int) -> List[Tuple[int, List[User]]]:
        """Single level approved by every active admin and department head"""
        approvers = self.user_directory.active_users_with_roles(
            db, tenant_id, settings.fallback_approver_roles_list
        )
        return [(1, approvers)]


# Create singleton instance
approval_graph_builder = ApprovalGraphBuilder()
