"""Shannon entropy over packet feature distributions."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

import numpy as np
from scipy.stats import entropy as scipy_entropy

from ..data.structures import Packet

SIZE_BUCKET_WIDTH = 100


def shannon_entropy(distribution: Mapping[str, int]) -> float:
    """Return the base-2 Shannon entropy of a category -> count mapping.

    An empty or all-zero distribution has entropy 0.
    """

    if not distribution:
        return 0.0
    counts = np.array(list(distribution.values()), dtype=float)
    if (counts < 0).any():
        raise ValueError("Distribution counts must be non-negative")
    if counts.sum() == 0:
        return 0.0
    return float(scipy_entropy(counts, base=2))


def size_bucket(size: int, width: int = SIZE_BUCKET_WIDTH) -> int:
    return (size // width) * width


def source_address_distribution(packets: Iterable[Packet]) -> Counter:
    return Counter(packet.source_address for packet in packets)


def size_distribution(packets: Iterable[Packet], width: int = SIZE_BUCKET_WIDTH) -> Counter:
    return Counter(str(size_bucket(packet.size, width)) for packet in packets)


def source_address_entropy(packets: Iterable[Packet]) -> float:
    return shannon_entropy(source_address_distribution(packets))


def size_entropy(packets: Iterable[Packet], width: int = SIZE_BUCKET_WIDTH) -> float:
    return shannon_entropy(size_distribution(packets, width))


__all__ = [
    "SIZE_BUCKET_WIDTH",
    "shannon_entropy",
    "size_bucket",
    "size_distribution",
    "size_entropy",
    "source_address_distribution",
    "source_address_entropy",
]
