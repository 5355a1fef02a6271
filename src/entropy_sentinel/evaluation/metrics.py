"""Evaluation metrics utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np
from sklearn import metrics

from ..data.structures import Packet


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


@dataclass(frozen=True)
class ConfusionMatrix:
    true_positive: int = 0
    false_positive: int = 0
    true_negative: int = 0
    false_negative: int = 0

    @property
    def total(self) -> int:
        return self.true_positive + self.false_positive + self.true_negative + self.false_negative

    @property
    def accuracy(self) -> float:
        return _safe_ratio(self.true_positive + self.true_negative, self.total)

    @property
    def precision(self) -> float:
        return _safe_ratio(self.true_positive, self.true_positive + self.false_positive)

    @property
    def recall(self) -> float:
        return _safe_ratio(self.true_positive, self.true_positive + self.false_negative)

    @property
    def f1(self) -> float:
        precision = self.precision
        recall = self.recall
        return _safe_ratio(2 * precision * recall, precision + recall)

    def as_dict(self) -> Dict[str, float]:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
            "true_positive": self.true_positive,
            "false_positive": self.false_positive,
            "true_negative": self.true_negative,
            "false_negative": self.false_negative,
        }


def score_labels(truth: Sequence[bool], detected: Sequence[bool]) -> ConfusionMatrix:
    """Tally paired ground-truth and detected labels."""

    if len(truth) != len(detected):
        raise ValueError(
            f"Label length mismatch: {len(truth)} ground-truth vs {len(detected)} detected"
        )
    if len(truth) == 0:
        return ConfusionMatrix()
    y_true = np.array(truth, dtype=int)
    y_pred = np.array(detected, dtype=int)
    tn, fp, fn, tp = metrics.confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
    return ConfusionMatrix(
        true_positive=int(tp),
        false_positive=int(fp),
        true_negative=int(tn),
        false_negative=int(fn),
    )


def score(packets: Sequence[Packet], detected_labels: Sequence[bool]) -> ConfusionMatrix:
    return score_labels([packet.is_attack for packet in packets], detected_labels)


class ConfusionCounter:
    """Running confusion counts, updated one outcome at a time."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.true_positive = 0
        self.false_positive = 0
        self.true_negative = 0
        self.false_negative = 0

    def update(self, truth: bool, detected: bool) -> None:
        if truth and detected:
            self.true_positive += 1
        elif detected:
            self.false_positive += 1
        elif truth:
            self.false_negative += 1
        else:
            self.true_negative += 1

    def matrix(self) -> ConfusionMatrix:
        return ConfusionMatrix(
            true_positive=self.true_positive,
            false_positive=self.false_positive,
            true_negative=self.true_negative,
            false_negative=self.false_negative,
        )


__all__ = ["ConfusionCounter", "ConfusionMatrix", "score", "score_labels"]
