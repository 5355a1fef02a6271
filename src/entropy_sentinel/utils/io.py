"""I/O helpers for packet import/export and JSON artifacts."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..data.structures import TARGET_ADDRESS, Packet
from .logging import get_logger

logger = get_logger(__name__)


def ensure_dir(path: Path) -> None:
    """Ensure that a directory exists."""

    path.mkdir(parents=True, exist_ok=True)


def save_json(path: Path, payload: Dict[str, Any]) -> None:
    """Write a JSON payload with UTF-8 encoding."""

    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)


def packet_to_record(packet: Packet) -> Dict[str, Any]:
    return {
        "id": packet.id,
        "sourceIP": packet.source_address,
        "destinationIP": packet.destination_address,
        "timestamp": packet.timestamp,
        "size": packet.size,
        "isAttack": packet.is_attack,
    }


def _integer_field(record: Dict[str, Any], key: str) -> int:
    value = record[key]
    # bool is an int subclass; JSON true/false is not a valid id or size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer, got {value!r}")
    return value


def packet_from_record(record: Dict[str, Any]) -> Packet:
    """Build a packet from an exported record; raises on missing or bad fields."""

    if not isinstance(record, dict):
        raise TypeError(f"Expected an object, got {type(record).__name__}")
    source = record.get("sourceIP", record.get("sourceAddress"))
    if not isinstance(source, str):
        raise ValueError("Record is missing a source address")
    destination = record.get("destinationIP", record.get("destinationAddress", TARGET_ADDRESS))
    if not isinstance(destination, str):
        raise ValueError(f"Destination address must be a string, got {destination!r}")
    timestamp = record["timestamp"]
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
        raise ValueError(f"Field 'timestamp' must be a finite number, got {timestamp!r}")
    is_attack = record.get("isAttack", False)
    if not isinstance(is_attack, bool):
        raise ValueError(f"Field 'isAttack' must be a boolean, got {is_attack!r}")
    return Packet(
        id=_integer_field(record, "id"),
        source_address=source,
        destination_address=destination,
        timestamp=float(timestamp),
        size=_integer_field(record, "size"),
        is_attack=is_attack,
    )



def export_packets(packets: Sequence[Packet]) -> str:
    return json.dumps([packet_to_record(packet) for packet in packets], indent=2)


def import_packets(text: str) -> List[Packet]:
    """Parse exported packet JSON; malformed input yields an empty list."""

    try:
        payload = json.loads(text)
        if not isinstance(payload, list):
            raise ValueError("Packet data must be a JSON array")
        return [packet_from_record(record) for record in payload]
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("import_failed", error=str(exc))
        return []


def save_packets(path: Path, packets: Sequence[Packet]) -> None:
    ensure_dir(path.parent)
    path.write_text(export_packets(packets), encoding="utf-8")


def load_packets(path: Path) -> List[Packet]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("import_failed", path=str(path), error=str(exc))
        return []
    return import_packets(text)


__all__ = [
    "ensure_dir",
    "export_packets",
    "import_packets",
    "load_packets",
    "packet_from_record",
    "packet_to_record",
    "save_json",
    "save_packets",
]
