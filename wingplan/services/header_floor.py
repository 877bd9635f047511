"""
Header floor input.

Editing session for a wing's "header floor number" field. Keystrokes are
shown and committed optimistically; a settle timer, re-armed on every
keystroke, resets garbage input to floor 1 once typing stops. The timer is
owned by the session and released when it fires or when the session closes.
"""
import asyncio
from typing import Callable, Optional

from loguru import logger

from wingplan.lib.config import settings
from wingplan.services.floor_manager import parse_int


class HeaderFloorInput:
    """
    Debounced header-floor field for one wing.

    Args:
        on_commit: Receives the 0-based header floor index to store
        initial_index: Index currently stored on the wing
        settle_delay: Seconds without input before auto-correction
            (defaults to settings.header_floor_settle_seconds)

    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        on_commit: Callable[[int], None],
        initial_index: int = 0,
        settle_delay: Optional[float] = None,
    ):
        self.on_commit = on_commit
        self.settle_delay = settings.header_floor_settle_seconds if settle_delay is None else settle_delay
        self.display = str(initial_index + 1)
        self._raw = self.display
        self._timer: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a settle timer is armed."""
        return self._timer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def keystroke(self, raw: str) -> None:
        """Accept the field's new raw text."""
        if self._closed:
            return

        self._raw = raw
        self.display = raw

        if raw == "":
            self.on_commit(0)
        else:
            value = parse_int(raw)
            if value is not None:
                self.on_commit(max(value - 1, 0))

        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.settle_delay, self._settle)

    def sync(self, index: int) -> None:
        """Reflect a header floor index changed outside this field."""
        if self._closed:
            return
        self.display = str(index + 1)
        self._raw = self.display

    def close(self) -> None:
        """Release the settle timer. A closed session never commits again."""
        self._cancel_timer()
        self._closed = True

    def __enter__(self) -> "HeaderFloorInput":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _settle(self) -> None:
        self._timer = None
        if self._closed:
            return

        value = parse_int(self._raw)
        if self._raw == "" or value is None or value < 1:
            logger.debug("Header floor input {raw!r} reset to floor 1", raw=self._raw)
            self.display = "1"
            self._raw = "1"
            self.on_commit(0)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
