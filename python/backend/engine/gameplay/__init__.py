from backend.engine.gameplay.game import (
    SHAKE_DURATION,
    DropResult,
    PuzzleController,
    Route,
    ShakeSignal,
)

__all__ = ["SHAKE_DURATION", "DropResult", "PuzzleController", "Route", "ShakeSignal"]
