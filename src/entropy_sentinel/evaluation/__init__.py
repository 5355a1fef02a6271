"""Scoring and reporting."""

from .metrics import ConfusionCounter, ConfusionMatrix, score, score_labels

__all__ = ["ConfusionCounter", "ConfusionMatrix", "score", "score_labels"]
