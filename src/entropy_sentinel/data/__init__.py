"""Packet records, traffic generation and windowing."""

from .structures import DetectionRecord, EntropySample, Packet

__all__ = ["DetectionRecord", "EntropySample", "Packet"]
