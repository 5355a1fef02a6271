"""Synthetic packet traffic with optional DDoS-like phases."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..config.types import ATTACK_POOL_MODES, DEFAULT_PHASES, TrafficConfig
from ..utils.seed import make_rng
from .structures import TARGET_ADDRESS, Packet

ATTACK_POOL_SIZE = 5
ATTACK_SIZE_RANGE = (512, 521)
NORMAL_SIZE_RANGE = (64, 1463)
DEFAULT_BASELINE_PACKETS = 200


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


@dataclass
class Scenario:
    """Attack-free baseline sample plus the phased traffic to analyse."""

    baseline: List[Packet]
    traffic: List[Packet]


class TrafficGenerator:
    """Create packets from an injectable random source.

    Attack packets draw their source address from a small pool indexed by
    ``id % 5`` and a narrow size range; normal packets use fully random
    addresses and a broad size range.

    ``attack_pool_mode="phase"`` keeps one pool per generated batch, so an
    attack phase really does come from five sources. ``"packet"`` draws a new
    pool for every packet, which leaves attack traffic with more address
    diversity than five sources would give.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = _wall_clock_ms,
        attack_pool_mode: str = "phase",
    ) -> None:
        if attack_pool_mode not in ATTACK_POOL_MODES:
            raise ValueError(f"Unknown attack_pool_mode: {attack_pool_mode}")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock
        self.attack_pool_mode = attack_pool_mode
        self._phase_pool: Optional[List[str]] = None
        self._last_timestamp = float("-inf")

    def generate_address(self) -> str:
        octets = self.rng.integers(0, 256, size=4)
        return ".".join(str(int(octet)) for octet in octets)

    def new_attack_pool(self) -> List[str]:
        return [self.generate_address() for _ in range(ATTACK_POOL_SIZE)]

    def _timestamp(self) -> float:
        # Wall clocks can step backwards; timestamps must not.
        now = float(self.clock())
        self._last_timestamp = max(self._last_timestamp, now)
        return self._last_timestamp

    def _attack_pool(self) -> List[str]:
        if self.attack_pool_mode == "packet":
            return self.new_attack_pool()
        if self._phase_pool is None:
            self._phase_pool = self.new_attack_pool()
        return self._phase_pool

    def generate_packet(
        self,
        packet_id: int,
        is_attack: bool = False,
        pool: Optional[Sequence[str]] = None,
    ) -> Packet:
        if is_attack:
            addresses = pool if pool is not None else self._attack_pool()
            source = addresses[packet_id % len(addresses)]
            low, high = ATTACK_SIZE_RANGE
        else:
            source = self.generate_address()
            low, high = NORMAL_SIZE_RANGE
        size = int(self.rng.integers(low, high + 1))
        return Packet(
            id=packet_id,
            source_address=source,
            destination_address=TARGET_ADDRESS,
            timestamp=self._timestamp(),
            size=size,
            is_attack=bool(is_attack),
        )

    def generate_batch(
        self,
        count: int,
        start_id: int = 0,
        attack_probability: float = 0.0,
    ) -> List[Packet]:
        """Generate ``count`` packets; each is an attack with ``attack_probability``."""

        if count < 0:
            raise ValueError("count must be non-negative")
        if not 0.0 <= attack_probability <= 1.0:
            raise ValueError("attack_probability must be within [0, 1]")
        self._phase_pool = None
        packets: List[Packet] = []
        for offset in range(count):
            is_attack = bool(self.rng.random() < attack_probability)
            packets.append(self.generate_packet(start_id + offset, is_attack))
        return packets

    def simulate_traffic(self, phases: Sequence[Tuple[int, float]]) -> List[Packet]:
        packets: List[Packet] = []
        current_id = 0
        for packet_count, attack_probability in phases:
            packets.extend(self.generate_batch(packet_count, current_id, attack_probability))
            current_id += packet_count
        return packets

    def generate_baseline(self, count: int = DEFAULT_BASELINE_PACKETS) -> List[Packet]:
        return self.generate_batch(count, 0, 0.0)

    def simulate_scenario(
        self,
        baseline_packets: int = DEFAULT_BASELINE_PACKETS,
        phases: Sequence[Tuple[int, float]] = DEFAULT_PHASES,
    ) -> Scenario:
        baseline = self.generate_baseline(baseline_packets)
        traffic = self.simulate_traffic(phases)
        return Scenario(baseline=baseline, traffic=traffic)


def generator_from_config(config: TrafficConfig, seed: Optional[int] = None) -> TrafficGenerator:
    return TrafficGenerator(
        rng=make_rng(seed),
        attack_pool_mode=config.attack_pool_mode,
    )


def scenario_from_config(config: TrafficConfig, seed: Optional[int] = None) -> Scenario:
    generator = generator_from_config(config, seed)
    phases = [(phase.packet_count, phase.attack_probability) for phase in config.phases]
    return generator.simulate_scenario(config.baseline_packets, phases)


__all__ = [
    "Scenario",
    "TrafficGenerator",
    "generator_from_config",
    "scenario_from_config",
]
