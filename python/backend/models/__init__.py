from backend.models.errors import InvariantViolation
from backend.models.placement import PlacementState
from backend.models.sequence import (
    CANONICAL_SEQUENCE,
    DEFAULT_LIVES,
    PuzzleConfig,
    Variant,
    WrongDropPolicy,
)

__all__ = [
    "CANONICAL_SEQUENCE",
    "DEFAULT_LIVES",
    "InvariantViolation",
    "PlacementState",
    "PuzzleConfig",
    "Variant",
    "WrongDropPolicy",
]
