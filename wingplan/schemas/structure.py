"""
Structure schemas.

Immutable Project -> Wing -> Floor -> Unit tree edited by the structure
editor and handed to persistence once it validates. Wire names are camelCase;
Python attributes are snake_case and both are accepted on input.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UnitStatus(str, Enum):
    """Unit availability status."""
    RESERVED = "reserved"
    AVAILABLE = "available"
    BOOKED = "booked"
    REGISTERED = "registered"
    CANCELED = "canceled"
    INVESTOR = "investor"
    NOT_FOR_SALE = "not-for-sale"
    OTHERS = "others"


class FloorType(str, Enum):
    """Floor usage."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class ProjectStatus(str, Enum):
    """Construction status of a project."""
    PLANNING = "planning"
    UNDER_CONSTRUCTION = "under-construction"
    COMPLETED = "completed"


class CommercialUnitPlacement(str, Enum):
    """Where commercial floors live in the tree."""
    PROJECT_LEVEL = "projectLevel"
    WING_LEVEL = "wingLevel"


class StructureModel(BaseModel):
    """Base for every node of the structure tree."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def resolve_field_name(cls, key: str) -> str:
        if key in cls.model_fields:
            return key
        for name, field in cls.model_fields.items():
            if field.alias == key:
                return name
        raise ValueError(f"{cls.__name__} has no field '{key}'")

    def merged(self, data: Mapping[str, Any]):
        """Return a validated copy with the partial field mapping applied."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        for key, value in data.items():
            values[self.resolve_field_name(key)] = value
        return type(self).model_validate(values)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire shape, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================
# UNIT
# ============================================

class Unit(StructureModel):
    """A sellable unit on a floor."""
    id: Optional[str] = None
    floor_id: Optional[str] = None
    unit_number: str = ""
    area: float = 0
    configuration: str = ""
    unit_span: int = 1
    status: UnitStatus = UnitStatus.AVAILABLE
    reserved_by_or_reason: Optional[str] = None
    reference_id: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.status == UnitStatus.AVAILABLE

    def clone(self, **changes: Any) -> "Unit":
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return Unit(**values)


# ============================================
# FLOOR
# ============================================

class Floor(StructureModel):
    """One floor of a wing (or of the project, for project-level commercial floors)."""
    id: Optional[str] = None
    wing_id: Optional[str] = None
    project_id: Optional[str] = None
    type: FloorType = FloorType.RESIDENTIAL
    display_number: int
    show_area: bool = False
    units: Tuple[Unit, ...] = ()

    @property
    def total_span(self) -> int:
        return sum(unit.unit_span for unit in self.units)

    def clone(self, **changes: Any) -> "Floor":
        """Structural clone: every unit is cloned, nothing is shared with self."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values["units"] = tuple(unit.clone() for unit in self.units)
        values.update(changes)
        return Floor(**values)


# ============================================
# WING
# ============================================

class Wing(StructureModel):
    """A wing with its residential floors and optional wing-level commercial floors."""
    id: Optional[str] = None
    project_id: Optional[str] = None
    name: str = ""
    units_per_floor: int
    header_floor_index: int = 0
    floors: Tuple[Floor, ...] = ()
    commercial_floors: Optional[Tuple[Floor, ...]] = None


# ============================================
# PROJECT
# ============================================

class Project(StructureModel):
    """
    A whole project, as edited and as handed to persistence.

    Structural completeness is not enforced here; run the structure
    validator for that.
    """
    id: Optional[str] = None
    name: str = ""
    by: str = ""
    location: str = ""
    email: Optional[str] = None
    description: str = ""
    start_date: Optional[date] = None
    completion_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    commercial_unit_placement: CommercialUnitPlacement = CommercialUnitPlacement.PROJECT_LEVEL
    wings: Tuple[Wing, ...] = ()
    commercial_floors: Optional[Tuple[Floor, ...]] = None

    @property
    def wing_level_commercial(self) -> bool:
        return self.commercial_unit_placement == CommercialUnitPlacement.WING_LEVEL


# ============================================
# VALIDATION OUTPUT
# ============================================

class ValidationIssue(BaseModel):
    """One structural problem, addressed by the field path it belongs to."""
    path: List[Union[int, str]] = Field(default_factory=list)
    message: str

    def prefixed(self, *prefix: Union[int, str]) -> "ValidationIssue":
        return ValidationIssue(path=[*prefix, *self.path], message=self.message)
