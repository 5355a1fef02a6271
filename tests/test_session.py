from __future__ import annotations

import sqlite3

import numpy as np

from entropy_sentinel.config.types import Config
from entropy_sentinel.data.generator import TrafficGenerator
from entropy_sentinel.session.driver import SessionDriver
from entropy_sentinel.storage.history import InMemoryHistoryStore


class FailingStore(InMemoryHistoryStore):
    def append(self, record) -> None:
        raise sqlite3.OperationalError("database is locked")


class UnavailableStore(InMemoryHistoryStore):
    def append(self, record) -> None:
        raise RuntimeError("backend returned 503")


def build_scenario(seed: int = 21):
    return TrafficGenerator(rng=np.random.default_rng(seed)).simulate_scenario()


def test_full_session_scores_every_evaluated_window():
    scenario = build_scenario()
    store = InMemoryHistoryStore()
    driver = SessionDriver.from_scenario(scenario, config=Config(), store=store)
    metrics = driver.run()

    assert driver.finished
    assert driver.progress == len(scenario.traffic)
    assert len(driver.samples) == len(scenario.traffic) - 9
    assert driver.samples[0].index == 10
    assert metrics.total == len(driver.samples)
    assert metrics == driver.batch_metrics()
    # one record per scoring tick, including the final step
    assert len(store.list_all()) == len(scenario.traffic) // 10


def test_sample_labels_follow_newest_packet():
    scenario = build_scenario()
    driver = SessionDriver.from_scenario(scenario)
    driver.run()
    for sample in driver.samples:
        assert sample.is_attack == scenario.traffic[sample.index - 1].is_attack


def test_windowed_baseline_separates_normal_from_attack():
    config = Config()
    config.detection.baseline_window = config.windowing.capacity
    generator = TrafficGenerator(rng=np.random.default_rng(8))
    baseline = generator.generate_baseline(200)
    normal = generator.generate_batch(150, 0, 0.0)
    attack = generator.generate_batch(150, 150, 0.9)

    quiet = SessionDriver(normal, baseline, config=config)
    quiet.run()
    # partially filled windows sit below the window-scale baseline, so only full windows count
    assert not any(s.detected_attack for s in quiet.samples if s.index >= config.windowing.capacity)

    noisy = SessionDriver(normal + attack, baseline, config=config)
    noisy.run()
    late = [s.detected_attack for s in noisy.samples if s.index > 250]
    assert all(late)
    assert noisy.metrics.recall > 0.5


def test_warmup_steps_produce_no_samples():
    driver = SessionDriver.from_scenario(build_scenario())
    results = [driver.step() for _ in range(9)]
    assert results == [None] * 9
    assert driver.step() is not None


def test_max_steps_and_stop():
    driver = SessionDriver.from_scenario(build_scenario())
    driver.run(max_steps=25)
    assert driver.progress == 25
    assert driver.metrics.total == 11
    driver.stop()
    driver.run(max_steps=5)
    assert driver.progress == 30


def test_paced_run_sleeps_by_speed():
    config = Config()
    config.session.speed = 4.0
    config.session.tick_seconds = 0.1
    delays = []
    scenario = build_scenario()
    driver = SessionDriver(scenario.traffic, scenario.baseline, config=config, sleep=delays.append)
    driver.run(max_steps=3, paced=True)
    assert delays == [0.025, 0.025, 0.025]


def test_persistence_failure_does_not_stop_detection():
    scenario = build_scenario()
    driver = SessionDriver.from_scenario(scenario, store=FailingStore())
    metrics = driver.run()
    assert driver.finished
    assert metrics.total == len(scenario.traffic) - 9


def test_non_sqlite_store_errors_are_logged_and_skipped():
    scenario = build_scenario()
    driver = SessionDriver.from_scenario(scenario, store=UnavailableStore())
    metrics = driver.run()
    assert driver.finished
    assert metrics.total == len(scenario.traffic) - 9
    assert metrics == driver.batch_metrics()


def test_load_traffic_resets_and_rejects_empty():
    scenario = build_scenario()
    driver = SessionDriver.from_scenario(scenario)
    driver.run(max_steps=40)

    assert driver.load_traffic([]) is False
    assert driver.progress == 40

    assert driver.load_traffic(scenario.traffic[:30]) is True
    assert driver.progress == 0
    assert driver.samples == []
    assert len(driver.window) == 0
    driver.run()
    assert len(driver.samples) == 21
