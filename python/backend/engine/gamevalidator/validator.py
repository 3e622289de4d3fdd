"""Classifies a single drop attempt."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from backend.models.placement import PlacementState


class Verdict(StrEnum):
    ACCEPTED = "accepted"
    IGNORED_OCCUPIED = "ignored-occupied"
    IGNORED_OUT_OF_ORDER = "ignored-out-of-order"
    REJECTED = "rejected"


class DropValidator:
    """Stateless validator — all methods are static."""

    @staticmethod
    def validate(
        item: str,
        target_slot: int,
        placement: PlacementState,
        sequence: Sequence[str],
        part_base: int,
    ) -> Verdict:
        """Decide what dropping *item* on global slot *target_slot* means.

        Slots fill top to bottom within a part: a drop below a slot that
        is not yet correctly filled is inert, as is a drop on a filled
        slot.  Only a wrong item on an open, in-order slot is rejected.
        """
        if placement.get(target_slot) is not None:
            return Verdict.IGNORED_OCCUPIED

        if target_slot > part_base:
            above = target_slot - 1
            if placement.get(above) != sequence[above]:
                return Verdict.IGNORED_OUT_OF_ORDER

        if item == sequence[target_slot]:
            return Verdict.ACCEPTED
        return Verdict.REJECTED
