from backend.engine.gameinput.sensor import (
    POINTER_SENSOR,
    TOUCH_SENSOR,
    DragSensor,
    InputModality,
    InputSensorSelector,
)

__all__ = [
    "POINTER_SENSOR",
    "TOUCH_SENSOR",
    "DragSensor",
    "InputModality",
    "InputSensorSelector",
]
