"""Reference entropy computed from attack-free traffic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..data.structures import Packet
from ..features.entropy import SIZE_BUCKET_WIDTH, size_entropy, source_address_entropy
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Baseline:
    ip_entropy: float
    size_entropy: float
    packet_count: int


def calibrate_baseline(
    packets: Sequence[Packet],
    size_bucket_width: int = SIZE_BUCKET_WIDTH,
    window: Optional[int] = None,
) -> Baseline:
    """Compute the baseline once from a sample presumed free of attacks.

    By default entropy is taken over the whole sample. With ``window`` set,
    the sample is cut into consecutive chunks of that many packets and the
    chunk entropies are averaged, so the reference matches the scale of the
    windows it will be compared against. Trailing packets that do not fill a
    chunk are ignored; a sample shorter than one chunk falls back to the
    whole-sample entropy.
    """

    packets = list(packets)
    if window is not None and window > 0 and len(packets) >= window:
        chunks = [packets[i:i + window] for i in range(0, len(packets) - window + 1, window)]
        ip_value = float(np.mean([source_address_entropy(chunk) for chunk in chunks]))
        size_value = float(np.mean([size_entropy(chunk, size_bucket_width) for chunk in chunks]))
    else:
        ip_value = source_address_entropy(packets)
        size_value = size_entropy(packets, size_bucket_width)

    baseline = Baseline(ip_entropy=ip_value, size_entropy=size_value, packet_count=len(packets))
    if baseline.ip_entropy == 0.0 or baseline.size_entropy == 0.0:
        logger.warning(
            "degenerate_baseline",
            ip_entropy=baseline.ip_entropy,
            size_entropy=baseline.size_entropy,
            packets=baseline.packet_count,
        )
    else:
        logger.info(
            "baseline_calibrated",
            ip_entropy=baseline.ip_entropy,
            size_entropy=baseline.size_entropy,
            packets=baseline.packet_count,
            window=window,
        )
    return baseline


__all__ = ["Baseline", "calibrate_baseline"]
