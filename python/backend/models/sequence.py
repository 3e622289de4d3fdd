"""Puzzle catalogue and configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# The fixed, correct ordering the player has to reconstruct.
CANONICAL_SEQUENCE: tuple[str, ...] = (
    "Organizational goals",
    "Department goals",
    "Development focused area identifications",
    "Individual Performance goals",
    "Individual Development Plan (IDP)",
    "Discussion with Direct supervisor/ Assessor",
    "Learning Solution implementation and on going feedback",
    "Performance rating and calibration and communication",
)

DEFAULT_LIVES = 3


class WrongDropPolicy(StrEnum):
    PENALIZE_ONLY = "penalize-only"
    CLEAR_CURRENT_PART = "clear-current-part"


class Variant(StrEnum):
    SINGLE = "single"
    TWO_PART = "two-part"


@dataclass(frozen=True)
class PuzzleConfig:
    """Canonical sequence, its split into parts, and the penalty rules.

    Parts are numbered from 1.  ``parts`` holds the length of each part in
    order; together they must cover the whole sequence.
    """

    sequence: tuple[str, ...]
    parts: tuple[int, ...]
    wrong_drop_policy: WrongDropPolicy = WrongDropPolicy.PENALIZE_ONLY
    lives: int = DEFAULT_LIVES

    def __post_init__(self) -> None:
        if not self.sequence:
            raise ValueError("A puzzle needs at least one item.")
        if any(not item for item in self.sequence):
            raise ValueError("Items must be non-empty strings.")
        if len(set(self.sequence)) != len(self.sequence):
            raise ValueError("Items must be unique.")
        if not self.parts or any(n <= 0 for n in self.parts):
            raise ValueError(f"Part lengths must be positive, got {self.parts}.")
        if sum(self.parts) != len(self.sequence):
            raise ValueError(
                f"Parts {self.parts} cover {sum(self.parts)} slots, "
                f"but the sequence has {len(self.sequence)} items."
            )
        if self.lives <= 0:
            raise ValueError(f"Lives must be positive, got {self.lives}.")

    # -- construction helpers -------------------------------------------------

    @classmethod
    def for_variant(
        cls,
        variant: Variant,
        wrong_drop_policy: WrongDropPolicy = WrongDropPolicy.PENALIZE_ONLY,
        lives: int = DEFAULT_LIVES,
    ) -> PuzzleConfig:
        if variant is Variant.SINGLE:
            return cls(CANONICAL_SEQUENCE[:4], (4,), wrong_drop_policy, lives)
        return cls(CANONICAL_SEQUENCE, (4, 4), wrong_drop_policy, lives)

    @classmethod
    def default(cls) -> PuzzleConfig:
        return cls.for_variant(Variant.TWO_PART)

    # -- queries --------------------------------------------------------------

    @property
    def part_count(self) -> int:
        return len(self.parts)

    def part_base(self, part: int) -> int:
        """Global index of the first slot of *part*."""
        self._check_part(part)
        return sum(self.parts[: part - 1])

    def part_length(self, part: int) -> int:
        self._check_part(part)
        return self.parts[part - 1]

    def part_items(self, part: int) -> tuple[str, ...]:
        base = self.part_base(part)
        return self.sequence[base : base + self.part_length(part)]

    def _check_part(self, part: int) -> None:
        if not 1 <= part <= len(self.parts):
            raise ValueError(f"Part {part} out of range 1..{len(self.parts)}.")
