"""DropValidator — classification of single drops."""

from __future__ import annotations

import pytest

from backend.engine.gamevalidator import DropValidator, Verdict
from backend.models import PlacementState

SEQ = ("A", "B", "C", "D", "E", "F")


def _placement(*filled: int) -> PlacementState:
    placement = PlacementState(SEQ)
    for slot in filled:
        placement.set(slot, SEQ[slot])
    return placement


@pytest.mark.parametrize(
    "item, slot, filled, base, expected",
    [
        ("A", 0, (), 0, Verdict.ACCEPTED),
        ("B", 0, (), 0, Verdict.REJECTED),
        ("B", 1, (), 0, Verdict.IGNORED_OUT_OF_ORDER),
        ("C", 1, (), 0, Verdict.IGNORED_OUT_OF_ORDER),
        ("B", 1, (0,), 0, Verdict.ACCEPTED),
        ("C", 1, (0,), 0, Verdict.REJECTED),
        ("A", 0, (0,), 0, Verdict.IGNORED_OCCUPIED),
        ("B", 0, (0,), 0, Verdict.IGNORED_OCCUPIED),
        # the first slot of a later part has nothing above it within the part
        ("D", 3, (), 3, Verdict.ACCEPTED),
        ("E", 3, (), 3, Verdict.REJECTED),
        ("E", 4, (3,), 3, Verdict.ACCEPTED),
        ("F", 5, (3,), 3, Verdict.IGNORED_OUT_OF_ORDER),
    ],
)
def test_validate(
    item: str, slot: int, filled: tuple[int, ...], base: int, expected: Verdict
) -> None:
    assert DropValidator.validate(item, slot, _placement(*filled), SEQ, base) is expected


def test_occupied_wins_over_order() -> None:
    # slot 2 filled out of band, slot 1 empty: occupancy is reported first
    placement = PlacementState(SEQ)
    placement.set(2, "C")
    assert DropValidator.validate("X", 2, placement, SEQ, 0) is Verdict.IGNORED_OCCUPIED


def test_validate_does_not_mutate() -> None:
    placement = _placement(0)
    before = placement.slots()
    DropValidator.validate("B", 1, placement, SEQ, 0)
    DropValidator.validate("C", 1, placement, SEQ, 0)
    assert placement.slots() == before
