from backend.engine.gamegenerator.generator import Draggable, SequenceShuffler

__all__ = ["Draggable", "SequenceShuffler"]
