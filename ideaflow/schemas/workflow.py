"""
Workflow Schemas
Pydantic models for approval workflow policies and their level definitions
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class LevelDefinition(BaseModel):
    """One stage of an approval workflow"""
    level: int = Field(ge=1, description="Levels are processed in ascending order")
    approver_roles: List[str] = Field(default_factory=list)
    approver_ids: List[int] = Field(default_factory=list)
    # Stored but not read; level completion always requires every task approved
    require_all: bool = False


class ApprovalWorkflowCreate(BaseModel):
    """Schema for creating an approval workflow"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category_id: Optional[int] = None
    min_budget: Optional[int] = Field(None, ge=0)
    max_budget: Optional[int] = Field(None, ge=0)
    approval_levels: List[LevelDefinition] = Field(min_length=1)
    is_active: bool = True
    is_default: bool = False
    priority: int = 0

    @model_validator(mode='after')
    def validate_levels_and_budget(self):
        """Levels must be strictly increasing; budget bounds must not cross"""
        levels = [definition.level for definition in self.approval_levels]
        for previous, current in zip(levels, levels[1:]):
            if current <= previous:
                raise ValueError("approval_levels must be strictly increasing by level")

        if self.min_budget is not None and self.max_budget is not None:
            if self.min_budget > self.max_budget:
                raise ValueError("min_budget must be less than or equal to max_budget")
        return self
