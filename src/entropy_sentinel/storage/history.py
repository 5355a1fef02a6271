"""Detection history stores."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List, Protocol

from ..data.structures import DetectionRecord

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS detection_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp REAL NOT NULL,
    ip_entropy REAL NOT NULL,
    size_entropy REAL NOT NULL,
    is_attack INTEGER NOT NULL,
    detected_attack INTEGER NOT NULL
);
"""


class HistoryWriteError(RuntimeError):
    """Raised when a store cannot record or delete detection results."""


class HistoryStore(Protocol):
    def append(self, record: DetectionRecord) -> None: ...

    def list_all(self) -> List[DetectionRecord]: ...

    def clear(self) -> None: ...


class InMemoryHistoryStore:
    """Process-local store, mainly for tests and dry runs."""

    def __init__(self) -> None:
        self._records: List[DetectionRecord] = []

    def append(self, record: DetectionRecord) -> None:
        self._records.append(record)

    def list_all(self) -> List[DetectionRecord]:
        return sorted(self._records, key=lambda record: record.timestamp, reverse=True)

    def clear(self) -> None:
        self._records.clear()


class SQLiteHistoryStore:
    """Append-only detection log backed by a SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute(CREATE_TABLE_SQL)
        return conn

    def append(self, record: DetectionRecord) -> None:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as exc:
            raise HistoryWriteError(f"Cannot open {self.db_path}: {exc}") from exc
        try:
            conn.execute(
                """
                INSERT INTO detection_results (timestamp, ip_entropy, size_entropy, is_attack, detected_attack)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    record.timestamp,
                    record.ip_entropy,
                    record.size_entropy,
                    int(record.is_attack),
                    int(record.detected_attack),
                ),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise HistoryWriteError(f"Cannot append to {self.db_path}: {exc}") from exc
        finally:
            conn.close()

    def list_all(self) -> List[DetectionRecord]:
        conn = self._connect()
        conn.row_factory = sqlite3.Row
        try:
            rows = conn.execute(
                "SELECT * FROM detection_results ORDER BY timestamp DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        return [
            DetectionRecord(
                timestamp=float(row["timestamp"]),
                ip_entropy=float(row["ip_entropy"]),
                size_entropy=float(row["size_entropy"]),
                is_attack=bool(row["is_attack"]),
                detected_attack=bool(row["detected_attack"]),
            )
            for row in rows
        ]

    def clear(self) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM detection_results")
            conn.commit()
        finally:
            conn.close()


__all__ = ["HistoryStore", "HistoryWriteError", "InMemoryHistoryStore", "SQLiteHistoryStore"]
