"""
Database Setup Script
Creates all tables and seeds a demo tenant with approvers and standard workflows
"""

from datetime import datetime

from ideaflow.config.database import SessionLocal, init_db
from ideaflow.models.category import Category
from ideaflow.models.tenant import Tenant
from ideaflow.models.user import User, UserRole
from ideaflow.schemas.workflow import ApprovalWorkflowCreate, LevelDefinition
from ideaflow.services.policy_store import policy_store


def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    init_db()
    print("✓ Database tables created successfully")


def create_demo_tenant(db) -> Tenant:
    """Create the demo tenant with a few users per role"""
    print("\nCreating demo tenant...")

    tenant = db.query(Tenant).filter(Tenant.slug == "demo").first()
    if tenant:
        print("✓ Demo tenant already exists, skipping...")
        return tenant

    tenant = Tenant(name="Demo Company", slug="demo", is_active=True)
    db.add(tenant)
    db.flush()

    people = [
        ("admin@demo.test", "System Administrator", UserRole.ADMIN, "IT"),
        ("cfo@demo.test", "Chief Financial Officer", UserRole.ADMIN, "Finance"),
        ("ops.head@demo.test", "Operations Head", UserRole.DEPARTMENT_HEAD, "Operations"),
        ("lead@demo.test", "Team Lead", UserRole.TEAM_LEAD, "Operations"),
        ("employee@demo.test", "Regular Employee", UserRole.USER, "Operations"),
    ]
    for email, full_name, role, department in people:
        db.add(User(
            tenant_id=tenant.id,
            email=email,
            full_name=full_name,
            role=role,
            department=department,
            is_active=True,
            created_at=datetime.utcnow(),
        ))

    db.add_all([
        Category(tenant_id=tenant.id, name="Process Improvement", slug="process"),
        Category(tenant_id=tenant.id, name="Strategic", slug="strategic"),
    ])
    db.commit()
    print(f"✓ Demo tenant created with {len(people)} users")
    return tenant


def create_standard_workflows(db, tenant: Tenant):
    """Seed the standard, high-budget and strategic approval workflows"""
    print("\nCreating approval workflows...")

    if policy_store.list_active_policies(db, tenant.id):
        print("✓ Workflows already exist, skipping...")
        return

    policy_store.create_policy(db, tenant.id, ApprovalWorkflowCreate(
        name="Standard Approval",
        description="Default single-level approval by admins and department heads",
        approval_levels=[
            LevelDefinition(level=1, approver_roles=["admin", "department_head"], require_all=False),
        ],
        is_default=True,
        priority=1,
    ))

    policy_store.create_policy(db, tenant.id, ApprovalWorkflowCreate(
        name="High Budget Approval",
        description="Two-level approval for ideas with budget of 10,000 or more",
        min_budget=10000,
        approval_levels=[
            LevelDefinition(level=1, approver_roles=["department_head"], require_all=False),
            LevelDefinition(level=2, approver_roles=["admin"], require_all=True),
        ],
        priority=10,
    ))

    strategic = db.query(Category).filter(
        Category.tenant_id == tenant.id,
        Category.slug == "strategic"
    ).first()
    if strategic:
        policy_store.create_policy(db, tenant.id, ApprovalWorkflowCreate(
            name="Strategic Ideas Workflow",
            description="Three-level approval for strategic initiatives",
            category_id=strategic.id,
            approval_levels=[
                LevelDefinition(level=1, approver_roles=["team_lead"]),
                LevelDefinition(level=2, approver_roles=["department_head"]),
                LevelDefinition(level=3, approver_roles=["admin"], require_all=True),
            ],
            priority=15,
        ))

    print("✓ Approval workflows created successfully")


def main():
    """Run the full setup"""
    create_tables()

    db = SessionLocal()
    try:
        tenant = create_demo_tenant(db)
        create_standard_workflows(db, tenant)
    finally:
        db.close()

    print("\n✓ Database setup complete")


if __name__ == "__main__":
    main()
