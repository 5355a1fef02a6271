"""Baseline calibration and entropy-ratio detection."""

from .baseline import Baseline, calibrate_baseline
from .detector import EntropyDetector, WindowAssessment, detect, evaluate_window

__all__ = [
    "Baseline",
    "EntropyDetector",
    "WindowAssessment",
    "calibrate_baseline",
    "detect",
    "evaluate_window",
]
