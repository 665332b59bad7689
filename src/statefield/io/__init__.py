"""History persistence and report export."""

from statefield.io.exporter import ReportExporter
from statefield.io.history import HistoryStore, InMemoryHistoryStore, JsonHistoryStore

__all__ = ["HistoryStore", "InMemoryHistoryStore", "JsonHistoryStore", "ReportExporter"]
