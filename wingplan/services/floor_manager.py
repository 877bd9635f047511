"""
Floor Manager

Copy-on-write operations over a wing's floor collection and over the units of
a single floor. Every operation returns a new tuple/floor; the input is never
modified, and a precondition failure (empty collection, bad index, full floor)
returns the input unchanged.
"""
import re
from typing import Any, Mapping, Optional, Tuple

from loguru import logger

from wingplan.schemas.structure import Floor, FloorType, Unit, UnitStatus

Floors = Tuple[Floor, ...]

DEFAULT_CONFIGURATION = {
    FloorType.RESIDENTIAL: "1bhk",
    FloorType.COMMERCIAL: "shop",
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a text field value.

    "12" -> 12, " 7th" -> 7, "-3" -> -3, "" / "abc" -> None.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    return int(match.group(1))


def renumber_unit(unit_number: str, old_display_number: int, new_display_number: int) -> str:
    """
    Move a unit label from one floor to another.

    Strips as many leading characters as the old display number has digits and
    prepends the new display number: ("301", 3, 4) -> "401",
    ("901", 9, 10) -> "1001".
    """
    suffix = str(unit_number)[len(str(old_display_number)):]
    return f"{new_display_number}{suffix}"


class FloorManager:
    """Floor collection and per-floor unit operations."""

    # ============================================
    # FLOOR COLLECTION
    # ============================================

    def add_floor(self, floors: Floors, kind: FloorType = FloorType.RESIDENTIAL) -> Floors:
        """Append an empty floor numbered after the current count."""
        new_floor = Floor(
            type=kind,
            display_number=len(floors) + 1,
            show_area=False,
            units=(),
        )
        return (*floors, new_floor)

    def duplicate_previous_floor(self, floors: Floors) -> Floors:
        """
        Append a copy of the last floor one level up.

        The copy is always residential, numbered last + 1, and each unit
        number is moved to the new floor with renumber_unit().
        No-op when there is no floor to copy.
        """
        if not floors:
            logger.debug("Duplicate requested on a wing without floors; ignored")
            return floors

        last_floor = floors[-1]
        new_display_number = last_floor.display_number + 1

        new_floor = last_floor.clone(
            type=FloorType.RESIDENTIAL,
            display_number=new_display_number,
            units=tuple(
                unit.clone(
                    unit_number=renumber_unit(
                        unit.unit_number,
                        last_floor.display_number,
                        new_display_number,
                    )
                )
                for unit in last_floor.units
            ),
        )
        return (*floors, new_floor)

    def delete_floor(self, floors: Floors, index: int) -> Floors:
        """Remove one floor. Remaining floors keep their display numbers."""
        if not 0 <= index < len(floors):
            return floors
        return floors[:index] + floors[index + 1:]

    def update_floor(self, floors: Floors, index: int, data: Mapping[str, Any]) -> Floors:
        """Merge partial fields into the floor at index."""
        if not 0 <= index < len(floors):
            return floors
        return _replace(floors, index, floors[index].merged(data))

    def toggle_show_area(self, floors: Floors, index: int) -> Floors:
        if not 0 <= index < len(floors):
            return floors
        return self.update_floor(floors, index, {"show_area": not floors[index].show_area})

    # ============================================
    # SPAN ACCOUNTING
    # ============================================

    def total_span(self, floor: Floor) -> int:
        return floor.total_span

    def remaining_span(self, floor: Floor, units_per_floor: int) -> int:
        return max(0, units_per_floor - floor.total_span)

    def is_over_capacity(self, floor: Floor, units_per_floor: int) -> bool:
        return floor.total_span > units_per_floor

    def can_add_unit(self, floor: Floor, units_per_floor: int) -> bool:
        return self.remaining_span(floor, units_per_floor) > 0

    # ============================================
    # UNITS OF ONE FLOOR
    # ============================================

    def default_unit_number(self, floor_index: int, unit_count: int) -> str:
        return f"{floor_index + 1}{unit_count + 1:02d}"

    def add_unit(self, floor: Floor, floor_index: int, units_per_floor: int) -> Floor:
        """Append a one-slot available unit, if the floor has span left."""
        if not self.can_add_unit(floor, units_per_floor):
            return floor

        new_unit = Unit(
            unit_number=self.default_unit_number(floor_index, len(floor.units)),
            area=0,
            configuration=DEFAULT_CONFIGURATION[floor.type],
            unit_span=1,
            status=UnitStatus.AVAILABLE,
        )
        return floor.merged({"units": (*floor.units, new_unit)})

    def update_unit(self, floor: Floor, unit_index: int, data: Mapping[str, Any]) -> Floor:
        if not 0 <= unit_index < len(floor.units):
            return floor
        units = _replace(floor.units, unit_index, floor.units[unit_index].merged(data))
        return floor.merged({"units": units})

    def delete_unit(self, floor: Floor, unit_index: int) -> Floor:
        if not 0 <= unit_index < len(floor.units):
            return floor
        return floor.merged({"units": floor.units[:unit_index] + floor.units[unit_index + 1:]})

    def set_unit_span(
        self,
        floor: Floor,
        unit_index: int,
        raw_value: str,
        units_per_floor: int,
    ) -> Floor:
        """
        Commit a span typed into a unit row.

        Unparsable or unchanged input is ignored. The value is raised to at
        least 1 and capped at the span the other units leave free.
        """
        if not 0 <= unit_index < len(floor.units):
            return floor

        value = parse_int(raw_value)
        if value is None or value == floor.units[unit_index].unit_span:
            return floor

        other_span = sum(
            unit.unit_span for i, unit in enumerate(floor.units) if i != unit_index
        )
        value = max(min(value, units_per_floor - other_span), 1)
        if value == floor.units[unit_index].unit_span:
            return floor

        return self.update_unit(floor, unit_index, {"unit_span": value})

    def set_unit_status(
        self,
        floor: Floor,
        unit_index: int,
        status: UnitStatus,
        holder: Optional[str] = None,
    ) -> Floor:
        """
        Change a unit's availability.

        Making a unit available clears its holder. Taking an available unit
        off the market needs a holder or reason; without one the change is
        refused. Moving between two unavailable statuses keeps the holder
        unless a new one is given.
        """
        if not 0 <= unit_index < len(floor.units):
            return floor

        unit = floor.units[unit_index]
        status = UnitStatus(status)

        if status == UnitStatus.AVAILABLE:
            return self.update_unit(
                floor, unit_index, {"status": status, "reserved_by_or_reason": None}
            )

        if unit.is_available:
            if not holder:
                logger.debug(
                    "Status change of unit {unit} to {status} refused: no holder given",
                    unit=unit.unit_number,
                    status=status.value,
                )
                return floor
            return self.update_unit(
                floor, unit_index, {"status": status, "reserved_by_or_reason": holder}
            )

        changes = {"status": status}
        if holder:
            changes["reserved_by_or_reason"] = holder
        return self.update_unit(floor, unit_index, changes)


def _replace(items: Tuple, index: int, item) -> Tuple:
    return items[:index] + (item,) + items[index + 1:]


floor_manager = FloorManager()
