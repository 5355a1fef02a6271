"""Reproducibility helpers."""

from __future__ import annotations

import os
import random
from typing import Optional

import numpy as np


def seed_everything(seed: int) -> None:
    """Seed common libraries for reproducibility."""

    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return an independent generator; ``None`` draws fresh OS entropy."""

    return np.random.default_rng(seed)
