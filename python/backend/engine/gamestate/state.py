"""The mutable state of a puzzle in progress and its render snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from backend.engine.gamegenerator.generator import Draggable
from backend.models.placement import PlacementState
from backend.models.sequence import PuzzleConfig


class Phase(StrEnum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass
class GameState:
    """Lives, part, placement and outcome flags for one playthrough.

    Only ``PuzzleController`` writes to it.
    """

    placement: PlacementState
    lives: int
    current_part: int = 1
    won: bool = False
    lost: bool = False
    input_locked: bool = False

    @classmethod
    def initial(cls, config: PuzzleConfig) -> GameState:
        return cls(placement=PlacementState(config.sequence), lives=config.lives)

    @property
    def is_over(self) -> bool:
        return self.won or self.lost

    def to_dict(self) -> dict[str, Any]:
        return {
            "placement": list(self.placement.slots()),
            "lives": self.lives,
            "current_part": self.current_part,
            "won": self.won,
            "lost": self.lost,
            "input_locked": self.input_locked,
        }


@dataclass(frozen=True)
class SlotView:
    """A slot of the current part as the render layer sees it."""

    index: int
    label: int
    item: str | None = None


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the game handed to the render layer each frame."""

    lives: int
    max_lives: int
    current_part: int
    part_count: int
    placement: tuple[str | None, ...]
    part_slots: tuple[SlotView, ...]
    won: bool
    lost: bool
    input_locked: bool
    visible_draggables: tuple[Draggable, ...] = field(default_factory=tuple)

    @property
    def phase(self) -> Phase:
        if self.won:
            return Phase.WON
        if self.lost:
            return Phase.LOST
        return Phase.PLAYING

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
