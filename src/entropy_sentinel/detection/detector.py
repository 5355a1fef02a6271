"""Entropy-ratio DDoS detector."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Collection, List, Optional

from ..config.types import DetectionConfig, WindowingConfig
from ..data.structures import Packet
from ..features.entropy import SIZE_BUCKET_WIDTH, size_entropy, source_address_entropy
from .baseline import Baseline

MIN_WINDOW_PACKETS = 10
IP_THRESHOLD = 0.8
SIZE_THRESHOLD = 0.7


@dataclass
class WindowAssessment:
    ip_entropy: float
    size_entropy: float
    ip_ratio: Optional[float]
    size_ratio: Optional[float]
    is_attack: bool
    reasons: List[str] = field(default_factory=list)


def _ratio(current: float, baseline: float) -> Optional[float]:
    # A zero (or non-finite) baseline carries no signal for its channel.
    if not math.isfinite(baseline) or baseline <= 0.0:
        return None
    return current / baseline


def evaluate_window(
    window: Collection[Packet],
    baseline_ip: float,
    baseline_size: float,
    ip_threshold: float = IP_THRESHOLD,
    size_threshold: float = SIZE_THRESHOLD,
    min_packets: int = MIN_WINDOW_PACKETS,
    size_bucket_width: int = SIZE_BUCKET_WIDTH,
) -> WindowAssessment:
    """Compare window entropy against the baseline on both channels.

    Windows smaller than ``min_packets`` are never flagged. A channel is
    flagged when its ratio to baseline drops below its threshold; either
    channel alone is enough. Channels with a zero baseline are skipped.
    """

    ip_value = source_address_entropy(window)
    size_value = size_entropy(window, size_bucket_width)
    if len(window) < min_packets:
        return WindowAssessment(ip_value, size_value, None, None, False)

    ip_ratio = _ratio(ip_value, baseline_ip)
    size_ratio = _ratio(size_value, baseline_size)
    reasons: List[str] = []
    if ip_ratio is not None and ip_ratio < ip_threshold:
        reasons.append("source address entropy drop")
    if size_ratio is not None and size_ratio < size_threshold:
        reasons.append("packet size entropy drop")
    return WindowAssessment(
        ip_entropy=ip_value,
        size_entropy=size_value,
        ip_ratio=ip_ratio,
        size_ratio=size_ratio,
        is_attack=bool(reasons),
        reasons=reasons,
    )


def detect(
    window: Collection[Packet],
    baseline_ip: float,
    baseline_size: float,
    ip_threshold: float = IP_THRESHOLD,
    size_threshold: float = SIZE_THRESHOLD,
    min_packets: int = MIN_WINDOW_PACKETS,
) -> bool:
    if len(window) < min_packets:
        return False
    return evaluate_window(
        window,
        baseline_ip,
        baseline_size,
        ip_threshold=ip_threshold,
        size_threshold=size_threshold,
        min_packets=min_packets,
    ).is_attack


class EntropyDetector:
    """Detector bound to a fixed baseline and configured thresholds."""

    def __init__(
        self,
        baseline: Baseline,
        detection: Optional[DetectionConfig] = None,
        windowing: Optional[WindowingConfig] = None,
    ) -> None:
        self.baseline = baseline
        self.detection = detection or DetectionConfig()
        self.windowing = windowing or WindowingConfig()

    def assess(self, window: Collection[Packet]) -> WindowAssessment:
        return evaluate_window(
            window,
            self.baseline.ip_entropy,
            self.baseline.size_entropy,
            ip_threshold=self.detection.ip_threshold,
            size_threshold=self.detection.size_threshold,
            min_packets=self.windowing.min_packets,
            size_bucket_width=self.detection.size_bucket_width,
        )

    def __call__(self, window: Collection[Packet]) -> bool:
        return self.assess(window).is_attack


__all__ = ["EntropyDetector", "WindowAssessment", "detect", "evaluate_window"]
