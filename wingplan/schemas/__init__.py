from wingplan.schemas.structure import (
    CommercialUnitPlacement,
    Floor,
    FloorType,
    Project,
    ProjectStatus,
    Unit,
    UnitStatus,
    ValidationIssue,
    Wing,
)

__all__ = [
    "CommercialUnitPlacement",
    "Floor",
    "FloorType",
    "Project",
    "ProjectStatus",
    "Unit",
    "UnitStatus",
    "ValidationIssue",
    "Wing",
]
