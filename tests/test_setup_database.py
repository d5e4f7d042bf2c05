"""
Seed Data Tests
The demo tenant and its standard workflows drive the engine end to end
"""

import pytest
from decimal import Decimal

from ideaflow.database.setup_database import create_demo_tenant, create_standard_workflows
from ideaflow.models.category import Category
from ideaflow.models.idea import Idea, IdeaStatus
from ideaflow.models.user import User
from ideaflow.services.approval_workflow_service import approval_workflow_service
from ideaflow.services.policy_store import policy_store
from ideaflow.services.workflow_resolver import workflow_resolver


@pytest.fixture
def demo(db):
    """Seeded demo tenant"""
    tenant = create_demo_tenant(db)
    create_standard_workflows(db, tenant)
    return tenant


def _submit(db, tenant, budget=None, category_slug=None):
    author = db.query(User).filter(
        User.tenant_id == tenant.id, User.email == "employee@demo.test"
    ).first()
    category_id = None
    if category_slug:
        category_id = db.query(Category).filter(
            Category.tenant_id == tenant.id, Category.slug == category_slug
        ).first().id
    idea = Idea(
        tenant_id=tenant.id,
        user_id=author.id,
        title="Shared printer pool",
        description="Consolidate printers across floors",
        category_id=category_id,
        budget=Decimal(budget) if budget is not None else None,
        status=IdeaStatus.PENDING,
    )
    db.add(idea)
    db.commit()
    db.refresh(idea)
    return idea


class TestSeedData:
    """Test the setup script"""

    def test_seeding_is_idempotent(self, db, demo):
        """Running the setup twice creates nothing new"""
        create_standard_workflows(db, create_demo_tenant(db))

        names = [p.name for p in policy_store.list_active_policies(db, demo.id)]
        assert names == ["Strategic Ideas Workflow", "High Budget Approval", "Standard Approval"]
        assert db.query(User).filter(User.tenant_id == demo.id).count() == 5

    def test_small_idea_uses_default(self, db, demo):
        """Ideas matching nothing more specific use the standard workflow"""
        idea = _submit(db, demo, budget=500)

        policy = workflow_resolver.resolve(db, demo.id, idea)

        # Standard Approval has no criteria, so it also matches directly
        assert policy.name == "Standard Approval"

    def test_high_budget_idea(self, db, demo):
        """A 15,000 budget gets one head then both admins"""
        idea = _submit(db, demo, budget=15000)

        tasks = approval_workflow_service.initialize_workflow(db, demo.id, idea)

        assert sorted(t.level for t in tasks) == [1, 2, 2]

    def test_strategic_idea(self, db, demo):
        """The strategic category outranks the budget workflow"""
        idea = _submit(db, demo, budget=50000, category_slug="strategic")

        tasks = approval_workflow_service.initialize_workflow(db, demo.id, idea)

        assert sorted(t.level for t in tasks) == [1, 2, 3, 3]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
