from __future__ import annotations

import math

import pytest

from entropy_sentinel.config.types import DetectionConfig, WindowingConfig
from entropy_sentinel.data.structures import Packet
from entropy_sentinel.detection import Baseline, EntropyDetector, calibrate_baseline, detect, evaluate_window


def make_packet(packet_id: int, source: str, size: int, is_attack: bool = False) -> Packet:
    return Packet(packet_id, source, "192.168.1.1", float(packet_id), size, is_attack)


def diverse_window(count: int = 50):
    return [make_packet(i, f"10.0.{i // 250}.{i % 250}", 64 + (i * 137) % 1400) for i in range(count)]


def test_small_windows_never_flagged():
    window = [make_packet(i, "6.6.6.6", 512) for i in range(9)]
    assert detect(window, 5.0, 3.5) is False
    assert detect([], 5.0, 3.5) is False


def test_single_source_window_is_attack():
    window = [make_packet(i, "6.6.6.6", 64 + i * 28) for i in range(50)]
    assessment = evaluate_window(window, 5.6, 3.8)
    assert assessment.ip_ratio == 0.0
    assert assessment.is_attack
    assert detect(window, 5.6, 3.8) is True


def test_diverse_window_matches_its_own_baseline():
    window = diverse_window()
    baseline = calibrate_baseline(window)
    assert detect(window, baseline.ip_entropy, baseline.size_entropy) is False


def test_size_channel_alone_can_trigger():
    window = [make_packet(i, f"10.0.0.{i}", 515) for i in range(50)]
    assessment = evaluate_window(window, math.log2(50), 3.5)
    assert assessment.ip_ratio is not None and assessment.ip_ratio >= 0.8
    assert assessment.size_ratio == 0.0
    assert assessment.reasons == ["packet size entropy drop"]
    assert assessment.is_attack


def test_zero_ip_baseline_excludes_ip_channel():
    window = [make_packet(i, "6.6.6.6", 64 + i * 28) for i in range(50)]
    assessment = evaluate_window(window, 0.0, 3.8)
    assert assessment.ip_ratio is None
    assert assessment.size_ratio is not None
    assert detect(window, 0.0, 3.8) is False
    # the size channel still works when only the ip baseline is degenerate
    uniform_sizes = [make_packet(i, "6.6.6.6", 515) for i in range(50)]
    assert detect(uniform_sizes, 0.0, 3.8) is True


def test_both_baselines_zero_never_flags():
    window = [make_packet(i, "6.6.6.6", 515) for i in range(50)]
    assessment = evaluate_window(window, 0.0, 0.0)
    assert assessment.ip_ratio is None and assessment.size_ratio is None
    assert assessment.is_attack is False


def test_entropy_detector_uses_configured_thresholds():
    window = diverse_window()
    baseline = Baseline(ip_entropy=8.0, size_entropy=3.9, packet_count=200)
    lenient = EntropyDetector(baseline, DetectionConfig(ip_threshold=0.5, size_threshold=0.5))
    strict = EntropyDetector(baseline, DetectionConfig(ip_threshold=0.8, size_threshold=0.7))
    assert lenient(window) is False
    assert strict(window) is True


def test_entropy_detector_min_packets_from_windowing():
    window = [make_packet(i, "6.6.6.6", 515) for i in range(12)]
    baseline = Baseline(ip_entropy=5.0, size_entropy=3.5, packet_count=200)
    assert EntropyDetector(baseline, windowing=WindowingConfig(capacity=50, min_packets=20))(window) is False
    assert EntropyDetector(baseline, windowing=WindowingConfig(capacity=50, min_packets=10))(window) is True


def test_windowed_baseline_matches_window_scale():
    sample = diverse_window(200)
    whole = calibrate_baseline(sample)
    windowed = calibrate_baseline(sample, window=50)
    assert whole.ip_entropy == pytest.approx(math.log2(200))
    assert windowed.ip_entropy == pytest.approx(math.log2(50))
    assert windowed.packet_count == 200
    # shorter than one chunk falls back to the whole sample
    short = calibrate_baseline(sample[:30], window=50)
    assert short.ip_entropy == pytest.approx(math.log2(30))
