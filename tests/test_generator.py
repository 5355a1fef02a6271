from __future__ import annotations

import itertools

import numpy as np
import pytest

from entropy_sentinel.config.types import TrafficConfig
from entropy_sentinel.data.generator import TrafficGenerator, scenario_from_config


def make_generator(seed: int = 0, **kwargs) -> TrafficGenerator:
    ticks = itertools.count(1_000)
    return TrafficGenerator(rng=np.random.default_rng(seed), clock=lambda: float(next(ticks)), **kwargs)


def test_generate_address_is_dotted_quad():
    generator = make_generator()
    for _ in range(200):
        octets = generator.generate_address().split(".")
        assert len(octets) == 4
        assert all(0 <= int(octet) <= 255 for octet in octets)


def test_normal_batch_ids_sizes_and_labels():
    generator = make_generator()
    packets = generator.generate_batch(100, 0, 0)
    assert len(packets) == 100
    assert [p.id for p in packets] == list(range(100))
    assert not any(p.is_attack for p in packets)
    assert all(64 <= p.size <= 1463 for p in packets)
    assert all(p.destination_address == "192.168.1.1" for p in packets)


def test_attack_packets_use_narrow_sizes_and_small_pool():
    generator = make_generator()
    packets = generator.generate_batch(60, 10, 1.0)
    assert all(p.is_attack for p in packets)
    assert all(512 <= p.size <= 521 for p in packets)
    assert len({p.source_address for p in packets}) <= 5
    by_slot = {}
    for packet in packets:
        by_slot.setdefault(packet.id % 5, set()).add(packet.source_address)
    assert all(len(addresses) == 1 for addresses in by_slot.values())


def test_packet_pool_mode_draws_new_pool_per_packet():
    generator = make_generator(attack_pool_mode="packet")
    packets = generator.generate_batch(60, 0, 1.0)
    assert len({p.source_address for p in packets}) > 5


def test_explicit_pool_is_indexed_by_id():
    generator = make_generator()
    pool = ["1.1.1.1", "2.2.2.2", "3.3.3.3", "4.4.4.4", "5.5.5.5"]
    packet = generator.generate_packet(7, True, pool=pool)
    assert packet.source_address == "3.3.3.3"


def test_timestamps_never_decrease():
    readings = iter([5.0, 9.0, 3.0, 12.0, 1.0])
    generator = TrafficGenerator(rng=np.random.default_rng(1), clock=lambda: next(readings))
    stamps = [p.timestamp for p in generator.generate_batch(5)]
    assert stamps == sorted(stamps)
    assert stamps == [5.0, 9.0, 9.0, 12.0, 12.0]


def test_attack_probability_is_per_packet():
    generator = make_generator(seed=3)
    packets = generator.generate_batch(2000, 0, 0.7)
    share = sum(p.is_attack for p in packets) / len(packets)
    assert 0.65 < share < 0.75


def test_invalid_batch_arguments():
    generator = make_generator()
    with pytest.raises(ValueError):
        generator.generate_batch(5, 0, 1.5)
    with pytest.raises(ValueError):
        generator.generate_batch(-1)
    with pytest.raises(ValueError):
        TrafficGenerator(attack_pool_mode="sometimes")


def test_simulate_scenario_layout():
    scenario = make_generator(seed=11).simulate_scenario()
    assert len(scenario.baseline) == 200
    assert not any(p.is_attack for p in scenario.baseline)
    assert len(scenario.traffic) == 600
    assert [p.id for p in scenario.traffic] == list(range(600))
    assert not any(p.is_attack for p in scenario.traffic[:100])
    assert not any(p.is_attack for p in scenario.traffic[250:300])
    assert not any(p.is_attack for p in scenario.traffic[500:])
    assert sum(p.is_attack for p in scenario.traffic[300:500]) > 150


def test_default_baseline_size_matches_scenario():
    baseline = make_generator(seed=3).generate_baseline()
    assert len(baseline) == 200
    assert [p.id for p in baseline] == list(range(200))
    assert not any(p.is_attack for p in baseline)


def test_same_seed_reproduces_traffic():
    first = scenario_from_config(TrafficConfig(), seed=5)
    second = scenario_from_config(TrafficConfig(), seed=5)
    strip = lambda packets: [(p.id, p.source_address, p.size, p.is_attack) for p in packets]
    assert strip(first.traffic) == strip(second.traffic)
    assert strip(first.baseline) == strip(second.baseline)
