"""Which item currently occupies each slot."""

from __future__ import annotations

from collections.abc import Sequence

from backend.models.errors import InvariantViolation


class PlacementState:
    """Per global slot, the placed item or ``None``.

    An item may only ever sit in its own canonical slot, so each item
    appears at most once.
    """

    def __init__(self, sequence: Sequence[str]) -> None:
        self._sequence = tuple(sequence)
        self._slots: list[str | None] = [None] * len(self._sequence)

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, item: object) -> bool:
        return item in self._slots

    # -- queries --------------------------------------------------------------

    def get(self, slot: int) -> str | None:
        self._check_slot(slot)
        return self._slots[slot]

    def slots(self) -> tuple[str | None, ...]:
        return tuple(self._slots)

    def is_part_complete(self, base: int, length: int) -> bool:
        """True iff every slot in ``[base, base + length)`` holds its canonical item."""
        return all(
            self._slots[i] == self._sequence[i] for i in range(base, base + length)
        )

    # -- mutation -------------------------------------------------------------

    def set(self, slot: int, item: str) -> None:
        self._check_slot(slot)
        if self._slots[slot] is not None:
            raise InvariantViolation(
                f"Slot {slot} already holds {self._slots[slot]!r}."
            )
        if item != self._sequence[slot]:
            raise InvariantViolation(
                f"{item!r} does not belong in slot {slot}."
            )
        self._slots[slot] = item

    def clear_range(self, base: int, length: int) -> None:
        for i in range(base, base + length):
            self._check_slot(i)
            self._slots[i] = None

    def reset(self) -> None:
        self._slots = [None] * len(self._sequence)

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < len(self._slots):
            raise InvariantViolation(
                f"Slot {slot} out of range 0..{len(self._slots) - 1}."
            )
