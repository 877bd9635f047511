"""
Structure Editor

UI-facing controller over one project document. Holds the current immutable
snapshot and the active wing; every command either replaces the snapshot or
leaves it untouched and reports that nothing was applied.
"""
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from wingplan.schemas.structure import (
    CommercialUnitPlacement,
    Floor,
    FloorType,
    Project,
    UnitStatus,
    ValidationIssue,
    Wing,
)
from wingplan.services.floor_manager import FloorManager, floor_manager
from wingplan.services.header_floor import HeaderFloorInput
from wingplan.services.structural_gate import GateDecision
from wingplan.services.structure_validator import (
    StructureValidator,
    Submission,
    structure_validator,
)
from wingplan.services.wing_builder import WingBuilder


def default_project() -> Project:
    return Project(
        start_date=date.today(),
        commercial_unit_placement=CommercialUnitPlacement.PROJECT_LEVEL,
        wings=(),
    )


class StructureEditor:
    """
    Sequential editor over a single project.

    Floor and unit commands address wings by index and say whether they
    target the wing's residential floors or its commercial floors.
    """

    def __init__(
        self,
        project: Optional[Project] = None,
        floors: FloorManager = floor_manager,
        validator: StructureValidator = structure_validator,
    ):
        self.floors = floors
        self.validator = validator
        self.wings = WingBuilder(floors=floors)
        self._header_inputs: Dict[int, HeaderFloorInput] = {}
        self.load(project or default_project())

    # ============================================
    # DOCUMENT
    # ============================================

    def load(self, project: Project) -> None:
        """Replace the document, e.g. with a structure fetched for editing."""
        self._close_header_inputs()
        self.project = project
        self.active_wing_index: Optional[int] = 0 if project.wings else None

    def reset(self) -> None:
        self.load(default_project())

    def close(self) -> None:
        """Release every open field session."""
        self._close_header_inputs()

    def update_project(self, data: Mapping[str, Any]) -> bool:
        self.project = self.project.merged(data)
        return True

    def set_commercial_unit_placement(self, placement: CommercialUnitPlacement) -> bool:
        return self.update_project({"commercial_unit_placement": CommercialUnitPlacement(placement)})

    def issues(self) -> List[ValidationIssue]:
        return self.validator.validate(self.project)

    def active_wing_issues(self) -> List[ValidationIssue]:
        if self.active_wing_index is None:
            return []
        return self.validator.validate_wing(
            self.project.wings[self.active_wing_index],
            wing_level_commercial=self.project.wing_level_commercial,
        )

    def submit(self) -> Submission:
        """Validate the whole project and produce the persistence payload."""
        submission = self.validator.prepare_submission(self.project)
        if submission.accepted:
            logger.info("Project '{name}' ready for persistence", name=self.project.name)
        return submission

    # ============================================
    # WINGS
    # ============================================

    def add_wing(self) -> GateDecision:
        change = self.wings.add_wing(
            self.project.wings,
            self.active_wing_index,
            wing_level_commercial=self.project.wing_level_commercial,
        )
        if change.applied:
            self._set_wings(change.wings)
            self.active_wing_index = change.active_index
        return change.decision

    def delete_wing(self, index: int) -> bool:
        if not 0 <= index < len(self.project.wings):
            return False

        removed = self._header_inputs.pop(index, None)
        if removed is not None:
            removed.close()
        self._header_inputs = {
            (key - 1 if key > index else key): field
            for key, field in self._header_inputs.items()
        }

        change = self.wings.delete_wing(self.project.wings, index, self.active_wing_index)
        self._set_wings(change.wings)
        self.active_wing_index = change.active_index
        return True

    def select_wing(self, index: int) -> bool:
        if not 0 <= index < len(self.project.wings):
            return False
        self.active_wing_index = index
        return True

    def update_wing(self, index: int, data: Mapping[str, Any]) -> bool:
        wings = self.wings.update_wing(self.project.wings, index, data)
        if wings is self.project.wings:
            return False
        self._set_wings(wings)

        field = self._header_inputs.get(index)
        if field is not None and any(
            Wing.resolve_field_name(key) == "header_floor_index" for key in data
        ):
            field.sync(wings[index].header_floor_index)
        return True

    def header_floor_input(
        self, index: int, settle_delay: Optional[float] = None
    ) -> Optional[HeaderFloorInput]:
        """Open (or return the open) header floor field of a wing. None for an unknown wing."""
        if not 0 <= index < len(self.project.wings):
            return None

        field = self._header_inputs.get(index)
        if field is not None and not field.closed:
            return field

        field = HeaderFloorInput(
            on_commit=lambda value: self._commit_header_floor(field, value),
            initial_index=self.project.wings[index].header_floor_index,
            settle_delay=settle_delay,
        )
        self._header_inputs[index] = field
        return field

    # ============================================
    # FLOORS
    # ============================================

    def add_floor(self, wing_index: int, kind: FloorType = FloorType.RESIDENTIAL) -> bool:
        if FloorType(kind) == FloorType.COMMERCIAL:
            return self._apply(self.wings.add_commercial_floor(self.project.wings, wing_index))
        return self._apply(self.wings.add_floor(self.project.wings, wing_index))

    def duplicate_previous_floor(self, wing_index: int) -> bool:
        return self._apply(self.wings.duplicate_previous_floor(self.project.wings, wing_index))

    def delete_floor(self, wing_index: int, floor_index: int, commercial: bool = False) -> bool:
        if commercial:
            wings = self.wings.delete_commercial_floor(self.project.wings, wing_index, floor_index)
        else:
            wings = self.wings.delete_floor(self.project.wings, wing_index, floor_index)
        return self._apply(wings)

    def update_floor(
        self,
        wing_index: int,
        floor_index: int,
        data: Mapping[str, Any],
        commercial: bool = False,
    ) -> bool:
        if commercial:
            wings = self.wings.update_commercial_floor(self.project.wings, wing_index, floor_index, data)
        else:
            wings = self.wings.update_floor(self.project.wings, wing_index, floor_index, data)
        return self._apply(wings)

    def toggle_show_area(self, wing_index: int, floor_index: int, commercial: bool = False) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        return self.update_floor(wing_index, floor_index, {"show_area": not floor.show_area}, commercial)

    # ============================================
    # UNITS
    # ============================================

    def add_unit(self, wing_index: int, floor_index: int, commercial: bool = False) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        capacity = self.project.wings[wing_index].units_per_floor
        return self._replace_floor(
            wing_index, floor_index, commercial,
            self.floors.add_unit(floor, floor_index, capacity),
        )

    def update_unit(
        self,
        wing_index: int,
        floor_index: int,
        unit_index: int,
        data: Mapping[str, Any],
        commercial: bool = False,
    ) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        return self._replace_floor(
            wing_index, floor_index, commercial,
            self.floors.update_unit(floor, unit_index, data),
        )

    def delete_unit(self, wing_index: int, floor_index: int, unit_index: int, commercial: bool = False) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        return self._replace_floor(
            wing_index, floor_index, commercial,
            self.floors.delete_unit(floor, unit_index),
        )

    def set_unit_span(
        self,
        wing_index: int,
        floor_index: int,
        unit_index: int,
        raw_value: str,
        commercial: bool = False,
    ) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        capacity = self.project.wings[wing_index].units_per_floor
        return self._replace_floor(
            wing_index, floor_index, commercial,
            self.floors.set_unit_span(floor, unit_index, raw_value, capacity),
        )

    def set_unit_status(
        self,
        wing_index: int,
        floor_index: int,
        unit_index: int,
        status: UnitStatus,
        holder: Optional[str] = None,
        commercial: bool = False,
    ) -> bool:
        floor = self._floor(wing_index, floor_index, commercial)
        if floor is None:
            return False
        return self._replace_floor(
            wing_index, floor_index, commercial,
            self.floors.set_unit_status(floor, unit_index, status, holder),
        )

    # ============================================
    # PROJECT-LEVEL COMMERCIAL FLOORS
    # ============================================

    def add_project_commercial_floor(self) -> bool:
        floors = self.floors.add_floor(self.project.commercial_floors or (), FloorType.COMMERCIAL)
        self.project = self.project.merged({"commercial_floors": floors})
        return True

    def delete_project_commercial_floor(self, floor_index: int) -> bool:
        current = self.project.commercial_floors or ()
        floors = self.floors.delete_floor(current, floor_index)
        if floors is current:
            return False
        self.project = self.project.merged({"commercial_floors": floors})
        return True

    def update_project_commercial_floor(self, floor_index: int, data: Mapping[str, Any]) -> bool:
        current = self.project.commercial_floors or ()
        floors = self.floors.update_floor(current, floor_index, data)
        if floors is current:
            return False
        self.project = self.project.merged({"commercial_floors": floors})
        return True

    # ============================================
    # HELPERS
    # ============================================

    def _set_wings(self, wings) -> None:
        self.project = self.project.merged({"wings": wings})

    def _apply(self, wings) -> bool:
        if wings is self.project.wings:
            return False
        self._set_wings(wings)
        return True

    def _floor(self, wing_index: int, floor_index: int, commercial: bool) -> Optional[Floor]:
        if not 0 <= wing_index < len(self.project.wings):
            return None
        wing = self.project.wings[wing_index]
        floors = (wing.commercial_floors or ()) if commercial else wing.floors
        if not 0 <= floor_index < len(floors):
            return None
        return floors[floor_index]

    def _replace_floor(self, wing_index: int, floor_index: int, commercial: bool, floor: Floor) -> bool:
        if floor is self._floor(wing_index, floor_index, commercial):
            return False
        return self.update_floor(wing_index, floor_index, {"units": floor.units}, commercial)

    def _commit_header_floor(self, field: HeaderFloorInput, value: int) -> None:
        for index, open_field in self._header_inputs.items():
            if open_field is field:
                wings = self.wings.update_wing(self.project.wings, index, {"header_floor_index": value})
                self._set_wings(wings)
                return

    def _close_header_inputs(self) -> None:
        for field in self._header_inputs.values():
            field.close()
        self._header_inputs = {}
