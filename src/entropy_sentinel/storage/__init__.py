"""Persistence adapters for detection history."""

from .history import (
    HistoryStore,
    HistoryWriteError,
    InMemoryHistoryStore,
    SQLiteHistoryStore,
)

__all__ = ["HistoryStore", "HistoryWriteError", "InMemoryHistoryStore", "SQLiteHistoryStore"]
