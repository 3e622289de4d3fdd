"""Core gameplay logic — resolves drops into state transitions and feedback."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from backend.engine.gamefeedback import Cue, FeedbackGate, SilentCuePlayer
from backend.engine.gamegenerator import Draggable, SequenceShuffler
from backend.engine.gamestate import GameState, SlotView, Snapshot
from backend.engine.gamevalidator import DropValidator, Verdict
from backend.models.errors import InvariantViolation
from backend.models.sequence import PuzzleConfig, WrongDropPolicy

logger = logging.getLogger(__name__)

SHAKE_DURATION = 0.5  # seconds


class Route(StrEnum):
    HOME = "/"
    GAME = "/game"


@dataclass(frozen=True)
class ShakeSignal:
    """Ask the render layer to shake a slot of the current part for a moment."""

    slot: int
    duration: float = SHAKE_DURATION


@dataclass(frozen=True)
class DropResult:
    """What a drop did.  ``verdict`` is None when the drop was discarded."""

    verdict: Verdict | None
    cue: Cue | None = None
    shake: ShakeSignal | None = None
    part_advanced: bool = False

    @property
    def discarded(self) -> bool:
        return self.verdict is None


_DISCARDED = DropResult(verdict=None)

SnapshotListener = Callable[[Snapshot], None]


class PuzzleController:
    """Owns the game state and applies every transition to it.

    The render layer reads ``snapshot()`` and reports drops through
    ``on_drop()``; nothing else writes to the state.
    """

    def __init__(
        self,
        config: PuzzleConfig | None = None,
        *,
        feedback: FeedbackGate | None = None,
        rng: random.Random | None = None,
        navigate: Callable[[Route], None] | None = None,
    ) -> None:
        self.config = config or PuzzleConfig.default()
        self._feedback = feedback or FeedbackGate(SilentCuePlayer())
        self._shuffler = SequenceShuffler(rng)
        self._navigate = navigate
        self._listeners: list[SnapshotListener] = []
        self._start()
        self._feedback.subscribe(self._on_lock_changed)

    # -- transitions ----------------------------------------------------------

    def on_drop(self, item: str, slot: int) -> DropResult:
        """Resolve dropping *item* onto local *slot* of the current part."""
        self._feedback.poll()
        state = self.state
        if state.input_locked or state.is_over:
            logger.debug("Drop of %r discarded (locked=%s)", item, state.input_locked)
            return _DISCARDED

        if item not in self.config.sequence:
            raise InvariantViolation(f"Unknown item {item!r}.")
        base = self.config.part_base(state.current_part)
        length = self.config.part_length(state.current_part)
        if not 0 <= slot < length:
            raise InvariantViolation(
                f"Slot {slot} outside part {state.current_part} (0..{length - 1})."
            )

        target = base + slot
        verdict = DropValidator.validate(
            item, target, state.placement, self.config.sequence, base
        )
        logger.debug("Drop %r on slot %d: %s", item, target, verdict)

        if verdict is Verdict.ACCEPTED:
            result = self._accept(item, target, base, length)
        elif verdict is Verdict.REJECTED:
            result = self._reject(slot, base, length)
        else:
            return DropResult(verdict)

        if result.cue is not None:
            self._feedback.play(result.cue)
        self._notify()
        return result

    def reset(self) -> None:
        """Start over and send the player back to the entry screen."""
        self._start()
        logger.info("Puzzle reset")
        self._notify()
        if self._navigate is not None:
            self._navigate(Route.HOME)

    def reconfigure(self, config: PuzzleConfig) -> None:
        """Switch to another puzzle configuration with a fresh state."""
        self.config = config
        self._start()
        self._notify()

    def poll(self) -> bool:
        """Give the feedback gate a chance to expire an overdue cue."""
        return self._feedback.poll()

    # -- queries --------------------------------------------------------------

    @property
    def feedback(self) -> FeedbackGate:
        return self._feedback

    def presentation(self, part: int) -> list[Draggable]:
        """The shuffled tiles of *part* (only parts reached so far have one)."""
        return list(self._presentations[part])

    def snapshot(self) -> Snapshot:
        state = self.state
        part = state.current_part
        base = self.config.part_base(part)
        placement = state.placement.slots()
        return Snapshot(
            lives=state.lives,
            max_lives=self.config.lives,
            current_part=part,
            part_count=self.config.part_count,
            placement=placement,
            part_slots=tuple(
                SlotView(index=i, label=base + i + 1, item=placement[base + i])
                for i in range(self.config.part_length(part))
            ),
            won=state.won,
            lost=state.lost,
            input_locked=state.input_locked,
            visible_draggables=tuple(
                d for d in self._presentations[part] if d.text not in state.placement
            ),
        )

    def subscribe(self, listener: SnapshotListener) -> None:
        """Call *listener* with a fresh snapshot after every state change."""
        self._listeners.append(listener)

    # -- helpers --------------------------------------------------------------

    def _start(self) -> None:
        self.state = GameState.initial(self.config)
        self._presentations: dict[int, list[Draggable]] = {}
        self._activate_part(1)
        self._feedback.release()

    def _activate_part(self, part: int) -> None:
        self._presentations[part] = self._shuffler.present(self.config.part_items(part))

    def _accept(self, item: str, target: int, base: int, length: int) -> DropResult:
        state = self.state
        state.placement.set(target, item)
        if not state.placement.is_part_complete(base, length):
            return DropResult(Verdict.ACCEPTED, Cue.CORRECT)

        part = state.current_part
        if part < self.config.part_count:
            state.current_part = part + 1
            self._activate_part(part + 1)
            logger.info("Part %d complete, advancing to part %d", part, part + 1)
            return DropResult(Verdict.ACCEPTED, Cue.PART_COMPLETE, part_advanced=True)

        state.won = True
        logger.info("Puzzle solved with %d lives left", state.lives)
        return DropResult(Verdict.ACCEPTED, Cue.CELEBRATE)

    def _reject(self, slot: int, base: int, length: int) -> DropResult:
        state = self.state
        if self.config.wrong_drop_policy is WrongDropPolicy.CLEAR_CURRENT_PART:
            state.placement.clear_range(base, length)
        if state.lives > 1:
            state.lives -= 1
        else:
            state.lives = 0
            state.lost = True
            logger.info("Out of lives")
        return DropResult(Verdict.REJECTED, Cue.WRONG, ShakeSignal(slot))

    def _on_lock_changed(self, locked: bool) -> None:
        self.state.input_locked = locked
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in self._listeners:
            listener(snap)
