"""
Structure Validator

Rule engine over a whole project tree. Produces path-addressed issues instead
of raising, so a caller can show every problem at once and route each
message to the form field named by its path.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from wingplan.lib.config import settings
from wingplan.schemas.structure import (
    CommercialUnitPlacement,
    Floor,
    Project,
    Unit,
    ValidationIssue,
    Wing,
)

Path = Tuple[Union[int, str], ...]

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class Submission:
    """Outcome of preparing a project for persistence."""
    issues: List[ValidationIssue]
    payload: Optional[Dict[str, Any]] = None
    message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.payload is not None


def format_issue_messages(
    issues: Sequence[ValidationIssue],
    max_to_show: Optional[int] = None,
) -> str:
    """
    Render issue messages as a bullet list for a toast or dialog.

    At most max_to_show messages are listed; the rest are summarised as
    "... +N more warnings".
    """
    if max_to_show is None:
        max_to_show = settings.max_issue_messages

    shown = issues[:max_to_show]
    remaining = max(0, len(issues) - max_to_show)

    text = "\n".join(f"• {issue.message}" for issue in shown)
    if remaining:
        noun = "warning" if remaining == 1 else "warnings"
        text = f"{text}\n\n... +{remaining} more {noun}"
    return text


class StructureValidator:
    """
    Validates wings and projects.

    Wing rules:
    - name, unitsPerFloor >= 1, headerFloorIndex >= 0, at least one floor
    - every floor has at least one unit
    - every floor's unit spans add up to exactly unitsPerFloor
    - unit fields are filled in

    Project rules add the descriptive fields, at least one wing, and the
    commercial floors that belong to the chosen placement.
    """

    # ============================================
    # PUBLIC API
    # ============================================

    def validate(self, project: Project) -> List[ValidationIssue]:
        """Validate the whole tree. Never mutates the project."""
        issues: List[ValidationIssue] = []

        for field, label in (("name", "Project name"), ("by", "Project by"), ("location", "Project location")):
            if not getattr(project, field).strip():
                issues.append(_issue((field,), f"{label} is required."))

        if project.start_date is None:
            issues.append(_issue(("startDate",), "Project start date is required."))

        if project.email and not EMAIL_PATTERN.match(project.email.strip()):
            issues.append(_issue(("email",), "Project email is not a valid email address."))

        if not project.wings:
            issues.append(_issue(("wings",), "At least 1 wing is required in a project."))

        wing_level = project.commercial_unit_placement == CommercialUnitPlacement.WING_LEVEL
        for wing_index, wing in enumerate(project.wings):
            for issue in self.validate_wing(wing, wing_level_commercial=wing_level):
                issues.append(issue.prefixed("wings", wing_index))

        if not wing_level:
            for floor_index, floor in enumerate(project.commercial_floors or ()):
                issues.extend(
                    self._floor_issues(
                        floor,
                        ("commercialFloors", floor_index),
                        capacity=None,
                        label="commercial floor",
                    )
                )

        return issues

    def validate_wing(
        self,
        wing: Wing,
        wing_level_commercial: bool = False,
    ) -> List[ValidationIssue]:
        """
        Validate one wing. Paths are relative to the wing.

        Commercial floors always need units with valid fields; their span is
        checked only when commercial units are placed at wing level.
        """
        issues: List[ValidationIssue] = []

        if not wing.name.strip():
            issues.append(_issue(("name",), "Wing name is required."))

        if wing.units_per_floor < 1:
            issues.append(_issue(("unitsPerFloor",), "At least 1 unit per floor is required."))

        if wing.header_floor_index < 0:
            issues.append(_issue(("headerFloorIndex",), "Header floor number must be 1 or more."))
        elif wing.floors and wing.header_floor_index >= len(wing.floors):
            issues.append(_issue(
                ("headerFloorIndex",),
                f'Header floor number {wing.header_floor_index + 1} is beyond the last floor of '
                f'wing "{wing.name}", which has {len(wing.floors)} floor(s).',
            ))

        if not wing.floors:
            issues.append(_issue(("floors",), "Floors are required in a wing."))

        # An invalid capacity is already reported; no span target to check against
        capacity = wing.units_per_floor if wing.units_per_floor >= 1 else None

        for floor_index, floor in enumerate(wing.floors):
            issues.extend(
                self._floor_issues(
                    floor,
                    ("floors", floor_index),
                    capacity=capacity,
                    wing_name=wing.name,
                )
            )

        for floor_index, floor in enumerate(wing.commercial_floors or ()):
            issues.extend(
                self._floor_issues(
                    floor,
                    ("commercialFloors", floor_index),
                    capacity=capacity if wing_level_commercial else None,
                    wing_name=wing.name,
                    label="commercial floor",
                )
            )

        return issues

    def prepare_submission(self, project: Project) -> Submission:
        """
        Validate and normalise a project for persistence.

        Commercial floors that do not belong to the chosen placement are
        dropped: project-level placement strips every wing's commercial
        floors, wing-level placement strips the project's own.
        """
        issues = self.validate(project)
        if issues:
            logger.info(
                "Project '{name}' rejected with {count} structural issue(s)",
                name=project.name,
                count=len(issues),
            )
            return Submission(issues=issues, message=format_issue_messages(issues))

        if project.commercial_unit_placement == CommercialUnitPlacement.PROJECT_LEVEL:
            normalized = project.merged({
                "wings": tuple(wing.merged({"commercial_floors": None}) for wing in project.wings),
            })
        else:
            normalized = project.merged({"commercial_floors": None})

        return Submission(issues=[], payload=normalized.to_payload())

    # ============================================
    # HELPERS
    # ============================================

    def _floor_issues(
        self,
        floor: Floor,
        path: Path,
        capacity: Optional[int],
        wing_name: str = "",
        label: str = "floor",
    ) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        if not floor.units:
            issues.append(_issue(
                (*path, "units"),
                f"{_where(wing_name)}{label} {floor.display_number} needs at least 1 unit.",
            ))

        for unit_index, unit in enumerate(floor.units):
            issues.extend(self._unit_issues(unit, (*path, "units", unit_index)))

        if capacity is not None:
            total = floor.total_span
            if total != capacity:
                issues.append(_issue(
                    (*path, "units"),
                    f"{_where(wing_name)}{label} {floor.display_number} has a total unit span "
                    f"of {total}, but units per floor is {capacity}. The total unit span must be "
                    f"exactly {capacity}, not more and not less.",
                ))

        return issues

    def _unit_issues(self, unit: Unit, path: Path) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        label = unit.unit_number.strip() or "without a number"

        if not unit.unit_number.strip():
            issues.append(_issue((*path, "unitNumber"), "Unit number is required."))
        if unit.area < 1:
            issues.append(_issue((*path, "area"), f"Area is required for unit {label}."))
        if not unit.configuration.strip():
            issues.append(_issue((*path, "configuration"), f"Configuration is required for unit {label}."))
        if unit.unit_span < 1:
            issues.append(_issue((*path, "unitSpan"), f"Unit span of unit {label} must be at least 1."))

        return issues


def _issue(path: Path, message: str) -> ValidationIssue:
    return ValidationIssue(path=list(path), message=message)


def _where(wing_name: str) -> str:
    return f'In wing "{wing_name}" ' if wing_name else "Project "


structure_validator = StructureValidator()


def validate(project: Project) -> List[ValidationIssue]:
    return structure_validator.validate(project)


def validate_wing(wing: Wing, wing_level_commercial: bool = False) -> List[ValidationIssue]:
    return structure_validator.validate_wing(wing, wing_level_commercial)
