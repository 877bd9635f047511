"""
Wing Builder

Copy-on-write operations over a project's wings. Floor-level work is
delegated to the floor manager and only the addressed wing is rebuilt.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from loguru import logger

from wingplan.lib.config import settings
from wingplan.schemas.structure import FloorType, Wing
from wingplan.services.floor_manager import FloorManager, floor_manager
from wingplan.services.structural_gate import GateDecision, StructuralGate

Wings = Tuple[Wing, ...]


@dataclass
class WingChange:
    """New wing collection and active wing after a command."""
    wings: Wings
    active_index: Optional[int]
    decision: Optional[GateDecision] = None

    @property
    def applied(self) -> bool:
        return self.decision is None or self.decision.allowed


def wing_letters(count: int) -> str:
    """0 -> "A", 25 -> "Z", 26 -> "AA", 27 -> "AB"."""
    letters = ""
    n = count + 1
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class WingBuilder:
    """Adds, removes and edits wings, and routes floor commands to one wing."""

    def __init__(
        self,
        floors: FloorManager = floor_manager,
        gate: Optional[StructuralGate] = None,
    ):
        self.floors = floors
        self.gate = gate or StructuralGate()

    # ============================================
    # WINGS
    # ============================================

    def default_wing_name(self, count: int) -> str:
        return f"Wing {wing_letters(count)}"

    def new_wing(self, count: int) -> Wing:
        return Wing(
            name=self.default_wing_name(count),
            units_per_floor=settings.default_units_per_floor,
            header_floor_index=0,
            floors=(),
        )

    def add_wing(
        self,
        wings: Wings,
        active_index: Optional[int],
        wing_level_commercial: bool = False,
    ) -> WingChange:
        """
        Append a default wing once the active wing is complete.

        A refused change carries the unchanged wings and active index plus
        the gate's decision for the caller to show.
        """
        decision = self.gate.evaluate(wings, active_index, wing_level_commercial)
        if not decision.allowed:
            return WingChange(wings=wings, active_index=active_index, decision=decision)

        wing = self.new_wing(len(wings))
        logger.debug("Adding {name}", name=wing.name)
        return WingChange(wings=(*wings, wing), active_index=len(wings), decision=decision)

    def delete_wing(self, wings: Wings, index: int, active_index: Optional[int] = None) -> WingChange:
        """Remove a wing; the last remaining wing becomes active."""
        if not 0 <= index < len(wings):
            return WingChange(wings=wings, active_index=active_index)

        remaining = wings[:index] + wings[index + 1:]
        return WingChange(
            wings=remaining,
            active_index=len(remaining) - 1 if remaining else None,
        )

    def update_wing(self, wings: Wings, index: int, data: Mapping[str, Any]) -> Wings:
        if not 0 <= index < len(wings):
            return wings
        return wings[:index] + (wings[index].merged(data),) + wings[index + 1:]

    def header_floor_index_from_input(self, number: int) -> int:
        """The field shows 1-based floor numbers; the model stores a 0-based index."""
        return max(number - 1, 0)

    def set_header_floor(self, wings: Wings, index: int, number: int) -> Wings:
        return self.update_wing(
            wings, index, {"header_floor_index": self.header_floor_index_from_input(number)}
        )

    # ============================================
    # FLOORS OF ONE WING
    # ============================================

    def add_floor(self, wings: Wings, index: int) -> Wings:
        if not 0 <= index < len(wings):
            return wings
        floors = self.floors.add_floor(wings[index].floors, FloorType.RESIDENTIAL)
        return self._with_floors(wings, index, "floors", floors)

    def duplicate_previous_floor(self, wings: Wings, index: int) -> Wings:
        if not 0 <= index < len(wings) or not wings[index].floors:
            return wings
        floors = self.floors.duplicate_previous_floor(wings[index].floors)
        return self._with_floors(wings, index, "floors", floors)

    def delete_floor(self, wings: Wings, index: int, floor_index: int) -> Wings:
        if not 0 <= index < len(wings):
            return wings
        floors = self.floors.delete_floor(wings[index].floors, floor_index)
        return self._with_floors(wings, index, "floors", floors)

    def update_floor(
        self,
        wings: Wings,
        index: int,
        floor_index: int,
        data: Mapping[str, Any],
    ) -> Wings:
        if not 0 <= index < len(wings):
            return wings
        floors = self.floors.update_floor(wings[index].floors, floor_index, data)
        return self._with_floors(wings, index, "floors", floors)

    def add_commercial_floor(self, wings: Wings, index: int) -> Wings:
        if not 0 <= index < len(wings):
            return wings
        floors = self.floors.add_floor(wings[index].commercial_floors or (), FloorType.COMMERCIAL)
        return self._with_floors(wings, index, "commercial_floors", floors)

    def delete_commercial_floor(self, wings: Wings, index: int, floor_index: int) -> Wings:
        if not 0 <= index < len(wings) or wings[index].commercial_floors is None:
            return wings
        floors = self.floors.delete_floor(wings[index].commercial_floors, floor_index)
        return self._with_floors(wings, index, "commercial_floors", floors)

    def update_commercial_floor(
        self,
        wings: Wings,
        index: int,
        floor_index: int,
        data: Mapping[str, Any],
    ) -> Wings:
        if not 0 <= index < len(wings) or wings[index].commercial_floors is None:
            return wings
        floors = self.floors.update_floor(wings[index].commercial_floors, floor_index, data)
        return self._with_floors(wings, index, "commercial_floors", floors)

    def _with_floors(self, wings: Wings, index: int, field: str, floors) -> Wings:
        if floors is getattr(wings[index], field):
            return wings
        return self.update_wing(wings, index, {field: floors})


wing_builder = WingBuilder()
