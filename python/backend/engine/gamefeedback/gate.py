"""Serializes feedback cues with an input lock.

While a cue plays the gate is *locked*; the controller discards every drop
until the cue's completion future settles.  A deadline guards against a
player that never reports back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import Future
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_CUE_TIMEOUT = 5.0


class Cue(StrEnum):
    CORRECT = "correct"
    WRONG = "wrong"
    PART_COMPLETE = "part-complete"
    CELEBRATE = "celebrate"


class CuePlayer(Protocol):
    """Audio collaborator: starts a cue and returns a future settled when it ends."""

    def play(self, cue: Cue) -> Future[None]: ...


LockListener = Callable[[bool], None]


class FeedbackGate:
    """Plays one cue at a time and holds the input lock while it runs."""

    def __init__(
        self,
        player: CuePlayer,
        *,
        timeout: float | None = DEFAULT_CUE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._player = player
        self._timeout = timeout
        self._clock = clock
        self._locked = False
        self._pending: Future[None] | None = None
        self._pending_cue: Cue | None = None
        self._deadline: float | None = None
        self._listeners: list[LockListener] = []

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def pending_cue(self) -> Cue | None:
        return self._pending_cue

    def subscribe(self, listener: LockListener) -> None:
        """Call *listener* with the new lock value whenever it changes."""
        self._listeners.append(listener)

    # -- playback -------------------------------------------------------------

    def play(self, cue: Cue) -> Future[None]:
        """Lock input, start *cue*, and unlock once it settles.

        Returns the completion future.  A player that raises is treated
        like one whose future failed: the error is logged and the lock
        is released.
        """
        if self._pending is not None:
            logger.debug("Cue %s replaces pending cue %s", cue, self._pending_cue)
        self._set_locked(True)
        self._pending_cue = cue
        self._deadline = None if self._timeout is None else self._clock() + self._timeout

        try:
            future = self._player.play(cue)
        except Exception as exc:
            future = Future()
            future.set_exception(exc)

        self._pending = future
        future.add_done_callback(self._settle)
        return future

    def poll(self) -> bool:
        """Release the lock if the pending cue is past its deadline.

        Returns True when an overdue cue was abandoned.
        """
        if self._pending is None or self._deadline is None:
            return False
        if self._clock() < self._deadline:
            return False
        logger.warning(
            "Cue %s did not finish within %.1fs; releasing input",
            self._pending_cue,
            self._timeout,
        )
        self._clear()
        return True

    def release(self) -> None:
        """Abandon any pending cue and unlock input."""
        if self._pending is not None:
            logger.debug("Abandoning cue %s", self._pending_cue)
        self._clear()

    # -- helpers --------------------------------------------------------------

    def _settle(self, future: Future[None]) -> None:
        if future is not self._pending:
            return  # stale: timed out or released already
        if future.cancelled():
            logger.debug("Cue %s was cancelled", self._pending_cue)
        else:
            exc = future.exception()
            if exc is not None:
                logger.warning("Cue %s failed: %s", self._pending_cue, exc)
        self._clear()

    def _clear(self) -> None:
        self._pending = None
        self._pending_cue = None
        self._deadline = None
        self._set_locked(False)

    def _set_locked(self, locked: bool) -> None:
        if locked == self._locked:
            return
        self._locked = locked
        for listener in self._listeners:
            listener(locked)
