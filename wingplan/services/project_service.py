import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wingplan.models.project import ProjectRecord


class ProjectService:
    """
    Stores validated project structures.

    Payloads are the camelCase dicts produced by
    StructureValidator.prepare_submission; nothing here re-validates them.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(
        self, skip: int = 0, limit: int = 20
    ) -> Tuple[List[ProjectRecord], int]:
        """List active projects with pagination."""
        count_result = await self.db.execute(
            select(func.count(ProjectRecord.id)).where(ProjectRecord.is_active == True)
        )
        total = count_result.scalar_one()

        result = await self.db.execute(
            select(ProjectRecord)
            .where(ProjectRecord.is_active == True)
            .order_by(ProjectRecord.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        projects = result.scalars().all()

        return list(projects), total

    async def get_project(self, project_id: UUID) -> Optional[ProjectRecord]:
        result = await self.db.execute(
            select(ProjectRecord).where(
                ProjectRecord.id == project_id,
                ProjectRecord.is_active == True,
            )
        )
        return result.scalar_one_or_none()

    async def create_project(self, payload: Dict[str, Any]) -> ProjectRecord:
        project_id = uuid.uuid4()
        project = ProjectRecord(id=project_id, is_active=True)
        self._apply_payload(project, payload)
        self.db.add(project)

        await self.db.commit()
        await self.db.refresh(project)

        logger.info("Created project {id} '{name}'", id=project.id, name=project.name)
        return project

    async def replace_project(
        self, project_id: UUID, payload: Dict[str, Any]
    ) -> Optional[ProjectRecord]:
        """Replace the stored structure of an existing project."""
        project = await self.get_project(project_id)
        if not project:
            return None

        self._apply_payload(project, payload)
        project.updated_at = datetime.utcnow()

        await self.db.commit()
        await self.db.refresh(project)

        logger.info("Updated project {id} '{name}'", id=project.id, name=project.name)
        return project

    async def delete_project(self, project_id: UUID) -> bool:
        """Soft delete project."""
        project = await self.get_project(project_id)
        if not project:
            return False

        project.is_active = False
        await self.db.commit()

        logger.info("Deleted project {id}", id=project_id)
        return True

    def _apply_payload(self, project: ProjectRecord, payload: Dict[str, Any]) -> None:
        project.name = payload["name"]
        project.by = payload["by"]
        project.location = payload["location"]
        project.status = payload["status"]
        project.commercial_unit_placement = payload["commercialUnitPlacement"]
        project.structure = {**payload, "id": str(project.id)}
