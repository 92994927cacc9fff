"""
engine/
-------
Driving & recording layer.

    from engine import Stepper, OpenList, Recorder, compare, replay
"""

from engine.stepper   import Stepper, StepperState
from engine.open_list import OpenEntry, OpenList
from engine.recorder  import ComparisonResult, Recorder, RunMetrics, compare, replay

__all__ = [
    "Stepper",
    "StepperState",
    "OpenEntry",
    "OpenList",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "replay",
]
