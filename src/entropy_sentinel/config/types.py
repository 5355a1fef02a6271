"""Configuration dataclasses and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

DEFAULT_PHASES: Tuple[Tuple[int, float], ...] = (
    (100, 0.0),
    (150, 0.7),
    (50, 0.0),
    (200, 0.9),
    (100, 0.0),
)

ATTACK_POOL_MODES = ("phase", "packet")


@dataclass
class PathsConfig:
    """Filesystem paths used by the CLI."""

    reports_dir: Path = Path("reports")
    history_db: Path = Path("history/detections.sqlite3")


@dataclass
class PhaseConfig:
    """One traffic phase of a simulated scenario."""

    packet_count: int
    attack_probability: float


@dataclass
class TrafficConfig:
    """Synthetic traffic generation settings."""

    baseline_packets: int = 200
    attack_pool_mode: str = "phase"
    phases: List[PhaseConfig] = field(
        default_factory=lambda: [PhaseConfig(count, prob) for count, prob in DEFAULT_PHASES]
    )


@dataclass
class WindowingConfig:
    """Sliding window configuration."""

    capacity: int = 50
    min_packets: int = 10


@dataclass
class DetectionConfig:
    """Entropy ratio thresholds."""

    ip_threshold: float = 0.8
    size_threshold: float = 0.7
    size_bucket_width: int = 100
    # Chunk size for windowed baseline calibration; None uses the whole sample.
    baseline_window: Optional[int] = None


@dataclass
class SessionConfig:
    """Session driver pacing and scoring cadence."""

    scoring_interval: int = 10
    speed: float = 1.0
    tick_seconds: float = 0.1


@dataclass
class Config:
    """Root configuration object."""

    seed: Optional[int] = 42
    paths: PathsConfig = field(default_factory=PathsConfig)
    traffic: TrafficConfig = field(default_factory=TrafficConfig)
    windowing: WindowingConfig = field(default_factory=WindowingConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


def expand_path(base: Path, path: Path) -> Path:
    """Resolve a path relative to a base directory."""

    if path.is_absolute():
        return path
    return (base / path).resolve()


def resolve_paths(config: Config, root: Optional[Path] = None) -> Config:
    """Resolve all filesystem paths relative to a root directory."""

    base = root or Path.cwd()
    config.paths.reports_dir = expand_path(base, config.paths.reports_dir)
    config.paths.history_db = expand_path(base, config.paths.history_db)
    return config


def validate_config(config: Config) -> Config:
    """Reject values the detector cannot work with."""

    if config.windowing.capacity <= 0:
        raise ValueError("windowing.capacity must be positive")
    if not 0 < config.windowing.min_packets <= config.windowing.capacity:
        raise ValueError("windowing.min_packets must be in (0, capacity]")
    if config.detection.ip_threshold < 0 or config.detection.size_threshold < 0:
        raise ValueError("detection thresholds must be non-negative")
    if config.detection.size_bucket_width <= 0:
        raise ValueError("detection.size_bucket_width must be positive")
    if config.detection.baseline_window is not None and config.detection.baseline_window <= 0:
        raise ValueError("detection.baseline_window must be positive when set")
    if config.session.scoring_interval <= 0:
        raise ValueError("session.scoring_interval must be positive")
    if config.session.speed <= 0:
        raise ValueError("session.speed must be positive")
    if config.session.tick_seconds < 0:
        raise ValueError("session.tick_seconds must be non-negative")
    if config.traffic.baseline_packets < 0:
        raise ValueError("traffic.baseline_packets must be non-negative")
    if config.traffic.attack_pool_mode not in ATTACK_POOL_MODES:
        raise ValueError(f"Unknown attack_pool_mode: {config.traffic.attack_pool_mode}")
    for phase in config.traffic.phases:
        if phase.packet_count < 0:
            raise ValueError("phase packet_count must be non-negative")
        if not 0.0 <= phase.attack_probability <= 1.0:
            raise ValueError("phase attack_probability must be within [0, 1]")
    return config
