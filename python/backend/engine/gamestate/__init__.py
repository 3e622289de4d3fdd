from backend.engine.gamestate.state import GameState, Phase, SlotView, Snapshot

__all__ = ["GameState", "Phase", "SlotView", "Snapshot"]
