"""Session driver: feeds packets through the window, detector and scorer."""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence

from ..config.types import Config
from ..data.generator import Scenario
from ..data.structures import DetectionRecord, EntropySample, Packet
from ..data.window import PacketWindow
from ..detection.baseline import Baseline, calibrate_baseline
from ..detection.detector import EntropyDetector
from ..evaluation.metrics import ConfusionCounter, ConfusionMatrix, score_labels
from ..storage.history import HistoryStore
from ..utils.logging import get_logger

logger = get_logger(__name__)


class SessionDriver:
    """Advance through a traffic sequence one packet at a time.

    Each step pushes the next packet into the window. Once the window holds
    ``min_packets`` packets every step produces an :class:`EntropySample`
    scored against the label of the packet that was just added. Metrics are
    refreshed (and the latest sample persisted) every ``scoring_interval``
    steps and when the traffic is exhausted.
    """

    def __init__(
        self,
        traffic: Sequence[Packet],
        baseline_packets: Sequence[Packet],
        config: Optional[Config] = None,
        store: Optional[HistoryStore] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or Config()
        self.store = store
        self.clock = clock
        self.sleep = sleep
        self.traffic: List[Packet] = list(traffic)
        self.baseline_packets: List[Packet] = list(baseline_packets)
        self.window = PacketWindow(self.config.windowing.capacity)
        self.counter = ConfusionCounter()
        self.reset()

    @classmethod
    def from_scenario(
        cls,
        scenario: Scenario,
        config: Optional[Config] = None,
        store: Optional[HistoryStore] = None,
    ) -> "SessionDriver":
        return cls(scenario.traffic, scenario.baseline, config=config, store=store)

    def reset(self) -> None:
        self.window.clear()
        self.counter.reset()
        self.samples: List[EntropySample] = []
        self.metrics = ConfusionMatrix()
        self.progress = 0
        self._stopped = False
        self.baseline: Baseline = calibrate_baseline(
            self.baseline_packets,
            self.config.detection.size_bucket_width,
            window=self.config.detection.baseline_window,
        )
        self.detector = EntropyDetector(self.baseline, self.config.detection, self.config.windowing)

    def load_traffic(self, packets: Sequence[Packet]) -> bool:
        """Replace the traffic under analysis; empty input leaves the session untouched."""

        if not packets:
            logger.warning("load_traffic_rejected", reason="empty packet sequence")
            return False
        self.traffic = list(packets)
        self.reset()
        logger.info("traffic_loaded", packets=len(self.traffic))
        return True

    @property
    def finished(self) -> bool:
        return self.progress >= len(self.traffic)

    @property
    def detections(self) -> List[bool]:
        return [sample.detected_attack for sample in self.samples]

    def step(self) -> Optional[EntropySample]:
        if self.finished:
            return None
        packet = self.traffic[self.progress]
        self.progress += 1
        self.window.append(packet)
        if len(self.window) < self.config.windowing.min_packets:
            return None

        assessment = self.detector.assess(self.window)
        sample = EntropySample(
            index=self.progress,
            ip_entropy=assessment.ip_entropy,
            size_entropy=assessment.size_entropy,
            is_attack=packet.is_attack,
            detected_attack=assessment.is_attack,
        )
        self.samples.append(sample)
        self.counter.update(sample.is_attack, sample.detected_attack)
        logger.debug(
            "session_step",
            index=sample.index,
            ip_entropy=sample.ip_entropy,
            size_entropy=sample.size_entropy,
            detected=sample.detected_attack,
            reasons=assessment.reasons,
        )

        if self.progress % self.config.session.scoring_interval == 0 or self.finished:
            self.metrics = self.counter.matrix()
            logger.info("metrics_updated", progress=self.progress, **self.metrics.as_dict())
            self._persist(sample)
        return sample

    def _persist(self, sample: EntropySample) -> None:
        if self.store is None:
            return
        record = DetectionRecord.from_sample(sample, timestamp=self.clock() * 1000.0)
        try:
            self.store.append(record)
        except Exception:
            # Any backend failure is logged; detection keeps going.
            logger.exception("history_write_failed", index=sample.index)

    def stop(self) -> None:
        self._stopped = True

    def run(self, max_steps: Optional[int] = None, paced: bool = False) -> ConfusionMatrix:
        """Step until the traffic is exhausted, ``max_steps`` is hit or ``stop`` is called."""

        self._stopped = False
        delay = self.config.session.tick_seconds / self.config.session.speed
        steps = 0
        while not self.finished and not self._stopped:
            if max_steps is not None and steps >= max_steps:
                break
            self.step()
            steps += 1
            if paced:
                self.sleep(delay)
        return self.metrics

    def batch_metrics(self) -> ConfusionMatrix:
        """Recompute the confusion matrix from every sample so far."""

        return score_labels([sample.is_attack for sample in self.samples], self.detections)


__all__ = ["SessionDriver"]
