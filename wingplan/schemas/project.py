from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from wingplan.schemas.structure import CommercialUnitPlacement, ProjectStatus, ValidationIssue


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    by: str
    location: str
    status: ProjectStatus
    commercial_unit_placement: CommercialUnitPlacement
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectDetailResponse(ProjectResponse):
    # camelCase tree, loadable with Project.model_validate
    structure: Dict[str, Any]


class ProjectListResponse(BaseModel):
    items: List[ProjectResponse]
    total: int
    skip: int
    limit: int


class ValidationResponse(BaseModel):
    valid: bool
    issues: List[ValidationIssue] = []
    message: Optional[str] = None
