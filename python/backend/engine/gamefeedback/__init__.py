from backend.engine.gamefeedback.gate import (
    DEFAULT_CUE_TIMEOUT,
    Cue,
    CuePlayer,
    FeedbackGate,
)
from backend.engine.gamefeedback.players import (
    CUE_DURATIONS,
    SilentCuePlayer,
    TimedCuePlayer,
)

__all__ = [
    "CUE_DURATIONS",
    "DEFAULT_CUE_TIMEOUT",
    "Cue",
    "CuePlayer",
    "FeedbackGate",
    "SilentCuePlayer",
    "TimedCuePlayer",
]
