"""Shuffles a part's items into a scattered on-screen presentation."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

# Tiles are tilted and nudged a little so the pool looks scattered.
MAX_ROTATION = 15.0
MAX_MARGIN = 20.0


@dataclass(frozen=True)
class Draggable:
    """One tile in the pool: its text plus how it is drawn."""

    text: str
    rotation: float = 0.0
    margin: float = 0.0

    @property
    def offset(self) -> float:
        """The margin re-centred on zero, for layouts that place tiles by centre."""
        return self.margin - MAX_MARGIN / 2


class SequenceShuffler:
    """Produces random presentation orders.

    Pass a seeded ``random.Random`` to make the output reproducible.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def shuffle(self, items: Sequence[str]) -> list[str]:
        """Return a uniformly random permutation of *items* (input untouched)."""
        order = list(items)
        self._rng.shuffle(order)
        return order

    def present(self, items: Sequence[str]) -> list[Draggable]:
        """Shuffle *items* and give each tile a random tilt and margin."""
        return [
            Draggable(
                text=text,
                rotation=self._rng.uniform(-MAX_ROTATION, MAX_ROTATION),
                margin=self._rng.uniform(0.0, MAX_MARGIN),
            )
            for text in self.shuffle(items)
        ]
