"""
Workflow Schema Tests
Validation of approval workflow definitions
"""

import pytest
from pydantic import ValidationError

from ideaflow.schemas.workflow import ApprovalWorkflowCreate, LevelDefinition


class TestWorkflowValidation:
    """Test policy definition validation"""

    def test_valid_definition(self):
        """Defaults fill in optional level fields"""
        data = ApprovalWorkflowCreate(
            name="High Budget Approval",
            min_budget=10000,
            approval_levels=[{"level": 1, "approver_roles": ["department_head"]}, {"level": 2}],
        )

        assert data.approval_levels[1] == LevelDefinition(level=2)
        assert data.approval_levels[0].require_all is False
        assert data.is_active is True
        assert data.is_default is False

    def test_levels_must_increase(self):
        """Repeated or decreasing levels are rejected"""
        with pytest.raises(ValidationError):
            ApprovalWorkflowCreate(name="Bad", approval_levels=[{"level": 2}, {"level": 1}])
        with pytest.raises(ValidationError):
            ApprovalWorkflowCreate(name="Bad", approval_levels=[{"level": 1}, {"level": 1}])

    def test_gaps_allowed(self):
        """Level numbers need not be contiguous"""
        data = ApprovalWorkflowCreate(name="Sparse", approval_levels=[{"level": 1}, {"level": 3}])
        assert [d.level for d in data.approval_levels] == [1, 3]

    def test_level_must_be_positive(self):
        with pytest.raises(ValidationError):
            LevelDefinition(level=0)

    def test_at_least_one_level(self):
        with pytest.raises(ValidationError):
            ApprovalWorkflowCreate(name="Empty", approval_levels=[])

    def test_budget_bounds_must_not_cross(self):
        """min_budget above max_budget is rejected"""
        with pytest.raises(ValidationError):
            ApprovalWorkflowCreate(
                name="Crossed", min_budget=5000, max_budget=1000, approval_levels=[{"level": 1}]
            )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
