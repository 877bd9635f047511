from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wingplan.lib.database import get_db
from wingplan.schemas.project import (
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ValidationResponse,
)
from wingplan.schemas.structure import Project, Wing
from wingplan.services.project_service import ProjectService
from wingplan.services.structure_validator import (
    Submission,
    format_issue_messages,
    structure_validator,
)

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("/validate", response_model=ValidationResponse)
async def validate_project(data: Project):
    """
    Validate a whole project structure without storing it.
    """
    issues = structure_validator.validate(data)
    return ValidationResponse(
        valid=not issues,
        issues=issues,
        message=format_issue_messages(issues) if issues else None,
    )


@router.post("/wings/validate", response_model=ValidationResponse)
async def validate_wing(
    data: Wing,
    wing_level_commercial: bool = Query(False),
):
    """
    Validate one wing, as checked before a new wing may be added.
    """
    issues = structure_validator.validate_wing(data, wing_level_commercial=wing_level_commercial)
    return ValidationResponse(
        valid=not issues,
        issues=issues,
        message=format_issue_messages(issues) if issues else None,
    )


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List all active projects with pagination.
    """
    service = ProjectService(db)
    projects, total = await service.list_projects(skip=skip, limit=limit)

    return ProjectListResponse(
        items=[ProjectResponse.model_validate(p) for p in projects],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=ProjectDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: Project,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a project from a complete structure.
    Rejected with 422 and every structural issue when validation fails.
    """
    submission = _accepted_submission(data)

    service = ProjectService(db)
    project = await service.create_project(submission.payload)

    return ProjectDetailResponse.model_validate(project)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a project with its full structure.
    """
    service = ProjectService(db)
    project = await service.get_project(project_id)

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project '{project_id}' not found"
        )

    return ProjectDetailResponse.model_validate(project)


@router.put("/{project_id}", response_model=ProjectDetailResponse)
async def update_project(
    project_id: UUID,
    data: Project,
    db: AsyncSession = Depends(get_db),
):
    """
    Replace the structure of a project.
    """
    service = ProjectService(db)
    if not await service.get_project(project_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project '{project_id}' not found"
        )

    submission = _accepted_submission(data)
    project = await service.replace_project(project_id, submission.payload)

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project '{project_id}' not found"
        )

    return ProjectDetailResponse.model_validate(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Soft delete a project.
    Sets is_active to False.
    """
    service = ProjectService(db)
    deleted = await service.delete_project(project_id)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project '{project_id}' not found"
        )


def _accepted_submission(data: Project) -> Submission:
    submission = structure_validator.prepare_submission(data)
    if not submission.accepted:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": submission.message,
                "issues": [issue.model_dump() for issue in submission.issues],
            },
        )
    return submission
