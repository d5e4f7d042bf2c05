"""
Workflow Resolver
Picks the approval workflow that applies to an idea
"""

from decimal import Decimal
from sqlalchemy.orm import Session
from typing import Optional

from ideaflow.models.approval_workflow import ApprovalWorkflow
from ideaflow.models.idea import Idea
from ideaflow.services.policy_store import policy_store
from ideaflow.utils.logger import setup_logger

logger = setup_logger()


class WorkflowResolver:
    """Criteria matching over active policies, first match by priority"""

    def __init__(self):
        """Initialize with the policy store"""
        self.policy_store = policy_store

    def resolve(self, db: Session, tenant_id: int, idea: Idea) -> Optional[ApprovalWorkflow]:
        """
        Determine which workflow to use for an idea

        Args:
            db: Database session
            tenant_id: Tenant of the idea
            idea: Idea entering the workflow

        Returns:
            The first matching active policy by priority, else the active
            default policy, else None (caller falls back to built-in approvers)
        """
        for policy in self.policy_store.list_active_policies(db, tenant_id):
            if self.matches(policy, idea):
                logger.info(f"Idea {idea.id} matched approval workflow '{policy.name}'")
                return policy

        default_policy = self.policy_store.get_default_policy(db, tenant_id)
        if default_policy:
            logger.info(f"Idea {idea.id} using default approval workflow '{default_policy.name}'")
        else:
            logger.info(f"No approval workflow for idea {idea.id}, using built-in fallback")
        return default_policy

    @staticmethod
    def matches(policy: ApprovalWorkflow, idea: Idea) -> bool:
        """Check the category and budget criteria of a policy against an idea"""
        if policy.category_id is not None and policy.category_id != idea.category_id:
            return False

        budget = Decimal(idea.budget) if idea.budget is not None else Decimal(0)

        if policy.min_budget is not None and budget < policy.min_budget:
            return False

        if policy.max_budget is not None and budget > policy.max_budget:
            return False

        return True


# Create singleton instance
workflow_resolver = WorkflowResolver()
