"""Tracks which kind of device is driving drags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class InputModality(StrEnum):
    POINTER = "pointer"
    TOUCH = "touch"


@dataclass(frozen=True)
class DragSensor:
    """How a drag is recognised for one modality."""

    modality: InputModality
    activation_delay: float = 0.0
    activation_tolerance: float = 0.0
    prevent_default: bool = False

    def activates(self, distance: float, held: float) -> bool:
        """Whether a press that moved *distance* px over *held* seconds starts a drag."""
        return held >= self.activation_delay and distance >= self.activation_tolerance


POINTER_SENSOR = DragSensor(InputModality.POINTER)
# Touch drags start at once and suppress the platform's own gesture handling.
TOUCH_SENSOR = DragSensor(InputModality.TOUCH, prevent_default=True)


class InputSensorSelector:
    """Follows the last input modality and exposes the matching sensor."""

    def __init__(
        self,
        pointer: DragSensor = POINTER_SENSOR,
        touch: DragSensor = TOUCH_SENSOR,
    ) -> None:
        self._sensors = {InputModality.POINTER: pointer, InputModality.TOUCH: touch}
        self._modality = InputModality.POINTER

    @property
    def modality(self) -> InputModality:
        return self._modality

    @property
    def active(self) -> DragSensor:
        return self._sensors[self._modality]

    def observe(self, modality: InputModality) -> DragSensor:
        """Record that *modality* produced the latest event."""
        if modality is not self._modality:
            logger.debug("Input modality switched to %s", modality)
            self._modality = modality
        return self.active
