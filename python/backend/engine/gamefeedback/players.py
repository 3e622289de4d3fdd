"""Cue players that need no audio device."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from concurrent.futures import Future

from backend.engine.gamefeedback.gate import Cue

# Roughly how long each cue takes to play, in seconds.
CUE_DURATIONS: dict[Cue, float] = {
    Cue.CORRECT: 0.5,
    Cue.WRONG: 0.7,
    Cue.PART_COMPLETE: 0.8,
    Cue.CELEBRATE: 2.0,
}


class SilentCuePlayer:
    """Completes every cue immediately."""

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        future.set_result(None)
        return future


class TimedCuePlayer:
    """Completes each cue after its duration has elapsed.

    Nothing happens in the background: the owner calls ``tick()`` from its
    loop and due cues are settled there.
    """

    def __init__(
        self,
        durations: Mapping[Cue, float] = CUE_DURATIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._durations = dict(durations)
        self._clock = clock
        self._running: list[tuple[float, Future[None]]] = []

    @property
    def busy(self) -> bool:
        return bool(self._running)

    def play(self, cue: Cue) -> Future[None]:
        future: Future[None] = Future()
        self._running.append((self._clock() + self._durations.get(cue, 0.0), future))
        return future

    def tick(self) -> int:
        """Settle every cue whose time is up.  Returns how many finished."""
        now = self._clock()
        due = [f for end, f in self._running if end <= now]
        self._running = [(end, f) for end, f in self._running if end > now]
        for future in due:
            future.set_result(None)
        return len(due)
