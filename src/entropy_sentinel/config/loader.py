"""Configuration loader utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from .types import (
    Config,
    DetectionConfig,
    PathsConfig,
    PhaseConfig,
    SessionConfig,
    TrafficConfig,
    WindowingConfig,
    resolve_paths,
    validate_config,
)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _build_traffic(payload: Dict[str, Any]) -> TrafficConfig:
    payload = dict(payload)
    phases = payload.pop("phases", None)
    traffic = TrafficConfig(**payload)
    if phases is not None:
        traffic.phases = [
            PhaseConfig(
                packet_count=int(phase["packet_count"]),
                attack_probability=float(phase["attack_probability"]),
            )
            for phase in phases
        ]
    return traffic


def load_config(path: Path) -> Config:
    """Load a configuration file and return a :class:`Config`.

    Missing sections fall back to their dataclass defaults.
    """

    path = Path(path)
    raw = _load_yaml(path)

    path_payload = {key: Path(value) for key, value in (raw.get("paths") or {}).items()}
    config = Config(
        seed=raw.get("seed", 42),
        paths=PathsConfig(**path_payload),
        traffic=_build_traffic(raw.get("traffic") or {}),
        windowing=WindowingConfig(**(raw.get("windowing") or {})),
        detection=DetectionConfig(**(raw.get("detection") or {})),
        session=SessionConfig(**(raw.get("session") or {})),
    )
    validate_config(config)
    return resolve_paths(config, path.parent)


__all__ = ["load_config"]
