from backend.engine.gamevalidator.validator import DropValidator, Verdict

__all__ = ["DropValidator", "Verdict"]
