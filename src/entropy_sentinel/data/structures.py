"""Data structures used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass

TARGET_ADDRESS = "192.168.1.1"


@dataclass(frozen=True)
class Packet:
    """A single simulated packet with its ground-truth label."""

    id: int
    source_address: str
    destination_address: str
    timestamp: float
    size: int
    is_attack: bool = False

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Packet size must be positive, got {self.size}")


@dataclass(frozen=True)
class EntropySample:
    """Entropy and detection outcome for one evaluated window."""

    index: int
    ip_entropy: float
    size_entropy: float
    is_attack: bool
    detected_attack: bool


@dataclass(frozen=True)
class DetectionRecord:
    """Payload handed to a history store."""

    timestamp: float
    ip_entropy: float
    size_entropy: float
    is_attack: bool
    detected_attack: bool

    @classmethod
    def from_sample(cls, sample: EntropySample, timestamp: float) -> "DetectionRecord":
        return cls(
            timestamp=timestamp,
            ip_entropy=sample.ip_entropy,
            size_entropy=sample.size_entropy,
            is_attack=sample.is_attack,
            detected_attack=sample.detected_attack,
        )
