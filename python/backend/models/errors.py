"""Errors raised by the puzzle core."""

from __future__ import annotations


class InvariantViolation(AssertionError):
    """A caller broke the core's contract (bad slot, unknown item, ...).

    These never reach the player; correct wiring makes them impossible.
    """
