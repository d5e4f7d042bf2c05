"""
Approval Route Tests
Authorization, decisions and error mapping of the approvals API
"""

import pytest
from fastapi.testclient import TestClient

from ideaflow.config.database import get_db
from ideaflow.main import app
from ideaflow.models.idea import IdeaStatus
from ideaflow.models.user import UserRole
from ideaflow.services.approval_graph_builder import approval_graph_builder
from ideaflow.utils.security import create_access_token

client = TestClient(app)


def _auth(user_id, tenant_id):
    token = create_access_token(data={"sub": str(user_id), "tenant_id": tenant_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_db(db):
    """Route requests share the test session"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield db
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def scenario(api_db, tenant, make_user, make_idea, make_policy):
    """Two-level workflow with one head and one admin"""
    head = make_user(UserRole.DEPARTMENT_HEAD)
    admin = make_user(UserRole.ADMIN)
    outsider = make_user(UserRole.TEAM_LEAD)
    make_policy([
        {"level": 1, "approver_roles": ["department_head"]},
        {"level": 2, "approver_roles": ["admin"]},
    ])
    idea = make_idea()
    tasks = approval_graph_builder.initialize_workflow(api_db, tenant.id, idea)
    by_level = {t.level: t.id for t in tasks}
    return {
        "tenant_id": tenant.id,
        "idea_id": idea.id,
        "head": _auth(head.id, tenant.id),
        "admin": _auth(admin.id, tenant.id),
        "outsider": _auth(outsider.id, tenant.id),
        "level_one": by_level[1],
        "level_two": by_level[2],
    }


class TestApprovalDecisions:
    """Test approve and reject endpoints"""

    def test_approve_advances_level(self, scenario):
        """The designated approver moves the idea to level 2"""
        response = client.post(
            f"/api/approvals/{scenario['level_one']}/approve",
            json={"notes": "Good idea"},
            headers=scenario["head"]
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["workflow_status"]["final_status"] == "under_review"
        assert data["workflow_status"]["next_level"] == 2
        assert [t["id"] for t in data["workflow_status"]["pending_approvals"]] == [scenario["level_two"]]
        assert data["approval"]["status"] == "approved"
        assert data["approval"]["notes"] == "Good idea"
        assert data["idea_status"] == "under_review"

    def test_full_approval(self, scenario):
        """Approving both levels approves the idea"""
        client.post(f"/api/approvals/{scenario['level_one']}/approve", json={}, headers=scenario["head"])

        response = client.post(
            f"/api/approvals/{scenario['level_two']}/approve", json={}, headers=scenario["admin"]
        )

        assert response.status_code == 200
        assert response.json()["workflow_status"]["final_status"] == "approved"
        assert response.json()["idea_status"] == IdeaStatus.APPROVED.value

    def test_other_user_forbidden(self, scenario):
        """Users other than the approver cannot decide the task"""
        response = client.post(
            f"/api/approvals/{scenario['level_one']}/approve", json={}, headers=scenario["outsider"]
        )
        assert response.status_code == 403

    def test_admin_may_decide_any_task(self, scenario):
        """Administrators can decide tasks assigned to someone else"""
        response = client.post(
            f"/api/approvals/{scenario['level_one']}/approve", json={}, headers=scenario["admin"]
        )
        assert response.status_code == 200

    def test_reject_requires_notes(self, scenario):
        """A rejection without a reason is a validation error"""
        response = client.post(
            f"/api/approvals/{scenario['level_one']}/reject", json={}, headers=scenario["head"]
        )
        assert response.status_code == 422

    def test_reject(self, scenario):
        """Rejecting returns the rejected outcome"""
        response = client.post(
            f"/api/approvals/{scenario['level_one']}/reject",
            json={"notes": "Out of scope"},
            headers=scenario["head"]
        )

        assert response.status_code == 200
        data = response.json()
        assert data["workflow_status"]["final_status"] == "rejected"
        assert data["workflow_status"]["next_level"] is None
        assert data["idea_status"] == "rejected"

    def test_already_processed_conflict(self, scenario):
        """Deciding a task twice returns 409 with the error code"""
        url = f"/api/approvals/{scenario['level_one']}/approve"
        client.post(url, json={}, headers=scenario["head"])

        response = client.post(url, json={}, headers=scenario["head"])

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_PROCESSED"

    def test_closed_workflow_conflict(self, scenario):
        """Tasks of a rejected idea can no longer be decided"""
        client.post(
            f"/api/approvals/{scenario['level_one']}/reject",
            json={"notes": "No"},
            headers=scenario["head"]
        )

        response = client.post(
            f"/api/approvals/{scenario['level_two']}/approve", json={}, headers=scenario["admin"]
        )

        assert response.status_code == 409
        assert response.json()["code"] == "WORKFLOW_CLOSED"

    def test_unknown_task(self, scenario):
        response = client.post("/api/approvals/99999/approve", json={}, headers=scenario["admin"])
        assert response.status_code == 404


class TestApprovalQueries:
    """Test read endpoints"""

    def test_workflow_status(self, scenario):
        """The workflow endpoint returns the per-level report"""
        response = client.get(
            f"/api/approvals/ideas/{scenario['idea_id']}/workflow", headers=scenario["outsider"]
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["current_level"] == 1
        assert data["total_levels"] == 2
        assert data["overall_status"] == "pending"
        assert [level["status"] for level in data["levels"]] == ["pending", "pending"]

    def test_workflow_status_unknown_idea(self, scenario):
        response = client.get("/api/approvals/ideas/99999/workflow", headers=scenario["admin"])
        assert response.status_code == 404

    def test_my_approvals(self, scenario):
        """Approvers see their own tasks and pending count"""
        response = client.get("/api/approvals/", headers=scenario["head"])
        assert response.status_code == 200
        assert [t["id"] for t in response.json()["data"]] == [scenario["level_one"]]

        response = client.get("/api/approvals/pending/count", headers=scenario["head"])
        assert response.json()["data"]["count"] == 1

        response = client.get("/api/approvals/?status=approved", headers=scenario["head"])
        assert response.json()["data"] == []

    def test_per_page_clamped(self, scenario):
        response = client.get("/api/approvals/?per_page=1000", headers=scenario["head"])
        assert response.json()["per_page"] == 100

    def test_get_single_approval(self, scenario):
        response = client.get(f"/api/approvals/{scenario['level_two']}", headers=scenario["admin"])
        assert response.status_code == 200
        assert response.json()["data"]["level"] == 2

    def test_unauthorized_access(self, scenario):
        """Requests without a token are rejected"""
        response = client.get("/api/approvals/pending/count")
        assert response.status_code == 401

    def test_token_of_other_tenant(self, scenario, other_tenant, make_user):
        """A user of another tenant cannot see this tenant's tasks"""
        foreigner = make_user(UserRole.ADMIN, tenant_id=other_tenant.id)
        headers = _auth(foreigner.id, other_tenant.id)

        response = client.get(f"/api/approvals/{scenario['level_one']}", headers=headers)
        assert response.status_code == 404


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
