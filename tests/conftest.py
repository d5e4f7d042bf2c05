"""
Shared test fixtures
SQLite test database, tenants, users, ideas and workflow policies
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before the application modules load
os.environ["DATABASE_URL"] = "sqlite:///./test_ideaflow.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from decimal import Decimal
from itertools import count

from ideaflow.config.database import Base, SessionLocal, engine, init_db
from ideaflow.models.idea import Idea, IdeaStatus
from ideaflow.models.tenant import Tenant
from ideaflow.models.user import User, UserRole
from ideaflow.schemas.workflow import ApprovalWorkflowCreate, LevelDefinition
from ideaflow.services.policy_store import policy_store

_sequence = count(1)


@pytest.fixture(scope="function")
def test_db():
    """Create test database"""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(test_db):
    """Database session bound to the test database"""
    session = SessionLocal()
    yield session
    session.close()


def _create_tenant(db, slug):
    tenant = Tenant(name=slug.title(), slug=slug, is_active=True)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


@pytest.fixture
def tenant(db):
    """The tenant most tests run in"""
    return _create_tenant(db, "acme")


@pytest.fixture
def other_tenant(db):
    """A second tenant, for isolation checks"""
    return _create_tenant(db, "globex")


@pytest.fixture
def make_user(db, tenant):
    """Factory creating users in the test tenant"""
    def _make_user(role=UserRole.USER, is_active=True, tenant_id=None, full_name=None):
        n = next(_sequence)
        user = User(
            tenant_id=tenant_id or tenant.id,
            email=f"user{n}@example.com",
            full_name=full_name or f"User {n}",
            role=role,
            department="Testing",
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def author(make_user):
    """Idea author"""
    return make_user(UserRole.USER, full_name="Idea Author")


@pytest.fixture
def make_idea(db, tenant, author):
    """Factory creating ideas that have just been submitted"""
    def _make_idea(budget=None, category_id=None, status=IdeaStatus.PENDING, tenant_id=None):
        idea = Idea(
            tenant_id=tenant_id or tenant.id,
            user_id=author.id,
            title=f"Idea {next(_sequence)}",
            description="Automate the monthly report",
            category_id=category_id,
            budget=Decimal(budget) if budget is not None else None,
            status=status,
        )
        db.add(idea)
        db.commit()
        db.refresh(idea)
        return idea

    return _make_idea


@pytest.fixture
def make_policy(db, tenant):
    """Factory creating approval workflows from plain level dicts"""
    def _make_policy(levels, tenant_id=None, name=None, **kwargs):
        data = ApprovalWorkflowCreate(
            name=name or f"Workflow {next(_sequence)}",
            approval_levels=[LevelDefinition(**level) for level in levels],
            **kwargs
        )
        return policy_store.create_policy(db, tenant_id or tenant.id, data)

    return _make_policy
