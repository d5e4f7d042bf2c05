"""
Policy Store
Persistence and validation of approval workflow policies
"""

from sqlalchemy.orm import Session
from pydantic import ValidationError
from typing import List, Optional

from ideaflow.exceptions import InvalidPolicyError
from ideaflow.models.approval_workflow import ApprovalWorkflow
from ideaflow.schemas.workflow import ApprovalWorkflowCreate, LevelDefinition
from ideaflow.utils.logger import setup_logger

logger = setup_logger()


class PolicyStore:
    """Read and write access to approval workflow policies"""

    def create_policy(
        self,
        db: Session,
        tenant_id: int,
        data: ApprovalWorkflowCreate
    ) -> ApprovalWorkflow:
        """
        Persist a validated approval workflow

        Args:
            db: Database session
            tenant_id: Owning tenant
            data: Validated workflow definition

        Returns:
            ApprovalWorkflow: The stored policy
        """
        policy = ApprovalWorkflow(
            tenant_id=tenant_id,
            name=data.name,
            description=data.description,
            category_id=data.category_id,
            min_budget=data.min_budget,
            max_budget=data.max_budget,
            approval_levels=[definition.model_dump() for definition in data.approval_levels],
            is_active=data.is_active,
            is_default=data.is_default,
            priority=data.priority,
        )
        db.add(policy)
        db.commit()
        db.refresh(policy)

        logger.info(
            f"Approval workflow '{policy.name}' created for tenant {tenant_id} "
            f"({len(data.approval_levels)} level(s), priority {policy.priority})"
        )
        return policy

    def list_active_policies(self, db: Session, tenant_id: int) -> List[ApprovalWorkflow]:
        """Active policies of the tenant, highest priority first"""
        return db.query(ApprovalWorkflow).filter(
            ApprovalWorkflow.tenant_id == tenant_id,
            ApprovalWorkflow.is_active == True
        ).order_by(ApprovalWorkflow.priority.desc(), ApprovalWorkflow.id).all()

    def get_default_policy(self, db: Session, tenant_id: int) -> Optional[ApprovalWorkflow]:
        """The active policy flagged as default, if any"""
        return db.query(ApprovalWorkflow).filter(
            ApprovalWorkflow.tenant_id == tenant_id,
            ApprovalWorkflow.is_active == True,
            ApprovalWorkflow.is_default == True
        ).order_by(ApprovalWorkflow.priority.desc(), ApprovalWorkflow.id).first()

    def level_definitions(self, policy: ApprovalWorkflow) -> List[LevelDefinition]:
        """
        Parse the stored level definitions of a policy

        Raises:
            InvalidPolicyError: If the stored JSON does not describe valid levels
        """
        raw_levels = policy.approval_levels or []
        if not isinstance(raw_levels, list):
            raise InvalidPolicyError(policy.id, "approval_levels must be a list")

        try:
            return [LevelDefinition.model_validate(item) for item in raw_levels]
        except ValidationError as e:
            raise InvalidPolicyError(policy.id, str(e)) from e


# Create singleton instance
policy_store = PolicyStore()
