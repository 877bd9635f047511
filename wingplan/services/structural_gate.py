"""
Structural Gate

Decides whether a new wing may be started. The wing being edited has to be
complete first, so an unfinished wing is never left behind.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from wingplan.schemas.structure import ValidationIssue, Wing
from wingplan.services.structure_validator import (
    StructureValidator,
    format_issue_messages,
    structure_validator,
)

INCOMPLETE_WING_TITLE = "Incomplete Wing Details"


class GateState(str, Enum):
    """State of the wing currently being edited."""
    WING_COMPLETE = "wing-complete"
    WING_INCOMPLETE = "wing-incomplete"


@dataclass
class GateDecision:
    """Result of asking the gate for permission. Refusal is data, not an exception."""
    allowed: bool
    state: GateState
    issues: List[ValidationIssue] = field(default_factory=list)
    title: Optional[str] = None
    message: Optional[str] = None


class StructuralGate:
    """Two-state machine: wing-complete <-> wing-incomplete."""

    def __init__(self, validator: StructureValidator = structure_validator):
        self.validator = validator
        self.state = GateState.WING_COMPLETE

    def evaluate(
        self,
        wings: Sequence[Wing],
        active_index: Optional[int],
        wing_level_commercial: bool = False,
    ) -> GateDecision:
        """
        Check the active wing before a new wing is created.

        With no wings there is nothing to finish. Without an active index the
        last wing is treated as active.
        """
        if not wings:
            self.state = GateState.WING_COMPLETE
            return GateDecision(allowed=True, state=self.state)

        if active_index is None or not 0 <= active_index < len(wings):
            active_index = len(wings) - 1

        issues = self.validator.validate_wing(
            wings[active_index],
            wing_level_commercial=wing_level_commercial,
        )

        if issues:
            self.state = GateState.WING_INCOMPLETE
            logger.debug(
                "Wing {index} is incomplete ({count} issue(s)); new wing refused",
                index=active_index,
                count=len(issues),
            )
            return GateDecision(
                allowed=False,
                state=self.state,
                issues=issues,
                title=INCOMPLETE_WING_TITLE,
                message=format_issue_messages(issues),
            )

        self.state = GateState.WING_COMPLETE
        return GateDecision(allowed=True, state=self.state)
