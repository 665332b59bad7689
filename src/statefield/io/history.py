"""
History stores for recorded samples.

The mapping core only needs "all samples", "samples near now" and
"append one sample". Two implementations are provided: an in-memory store
for sessions and tests, and a JSON file store that survives restarts.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Protocol, Union

from statefield.core.jitter import MS_PER_HOUR
from statefield.core.sample import Sample

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = 500


class HistoryStore(Protocol):
    """Minimal interface used by StatePipeline."""

    def samples(self) -> list[Sample]:
        ...

    def window(self, now: int, window_ms: float = 24 * MS_PER_HOUR) -> list[Sample]:
        ...

    def append(self, sample: Sample) -> None:
        ...

    def last(self) -> Sample | None:
        ...

    def clear(self) -> None:
        ...


class InMemoryHistoryStore:
    """
    Append-only sample list with optional FIFO retention.

    Eviction happens inside append(), so readers never see more than
    ``retention`` samples.
    """

    def __init__(
        self,
        samples: Iterable[Sample] = (),
        retention: int | None = DEFAULT_RETENTION,
    ) -> None:
        if retention is not None and retention < 1:
            raise ValueError(f"retention must be positive, got {retention}")
        self.retention = retention
        self._samples: list[Sample] = []
        for sample in samples:
            self._push(sample)

    def _push(self, sample: Sample) -> None:
        self._samples.append(sample)
        if self.retention is not None and len(self._samples) > self.retention:
            del self._samples[: len(self._samples) - self.retention]

    def __len__(self) -> int:
        return len(self._samples)

    def samples(self) -> list[Sample]:
        return list(self._samples)

    def window(self, now: int, window_ms: float = 24 * MS_PER_HOUR) -> list[Sample]:
        """Samples with ``now - t <= window_ms``, in stored order."""
        return [s for s in self._samples if now - s.timestamp <= window_ms]

    def append(self, sample: Sample) -> None:
        self._push(sample)

    def last(self) -> Sample | None:
        return self._samples[-1] if self._samples else None

    def clear(self) -> None:
        self._samples.clear()


def parse_history(data: Any) -> tuple[list[Sample], Sample | None]:
    """
    Decode persisted history into samples plus the optional snapshot.

    Accepts the store layout ``{"history": [...], "last_state": ...,
    "last_timestamp": ...}`` or a bare list of samples. Entries that cannot
    be decoded are skipped.
    """
    snapshot = None
    if isinstance(data, dict):
        entries = data.get("history", [])
        if "last_state" in data and "last_timestamp" in data:
            try:
                snapshot = Sample.from_dict(
                    {"timestamp": data["last_timestamp"], "state": data["last_state"]}
                )
            except (ValueError, TypeError):
                logger.warning("Ignoring malformed last-state snapshot")
    else:
        entries = data

    if not isinstance(entries, list):
        logger.warning("History payload is not a list; starting empty")
        return [], snapshot

    samples = []
    skipped = 0
    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        try:
            samples.append(Sample.from_dict(entry))
        except (ValueError, TypeError):
            skipped += 1
    if skipped:
        logger.warning("Skipped %d malformed history entries", skipped)
    return samples, snapshot


class JsonHistoryStore(InMemoryHistoryStore):
    """
    File-backed store.

    The whole history is rewritten on each append, together with a
    last-state snapshot for quick reloads. A missing or unreadable file
    loads as an empty history.
    """

    def __init__(
        self,
        path: Union[str, Path],
        retention: int | None = DEFAULT_RETENTION,
    ) -> None:
        self.path = Path(path)
        samples, self._snapshot = self._load()
        super().__init__(samples, retention=retention)

    def _load(self) -> tuple[list[Sample], Sample | None]:
        if not self.path.exists():
            return [], None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read history %s: %s. Starting empty.", self.path, e)
            return [], None

        if not raw.strip():
            return [], None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("History %s is not valid JSON (%s). Starting empty.", self.path, e)
            return [], None
        return parse_history(data)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"history": [s.to_dict() for s in self._samples]}
        latest = self.last()
        if latest is not None:
            payload["last_state"] = latest.state.to_dict()
            payload["last_timestamp"] = latest.timestamp
        return payload

    def save(self) -> Path:
        """Write the store to disk atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        os.replace(tmp_path, self.path)
        return self.path

    def append(self, sample: Sample) -> None:
        super().append(sample)
        self._snapshot = sample
        self.save()

    def last(self) -> Sample | None:
        if self._samples:
            return self._samples[-1]
        return self._snapshot

    def clear(self) -> None:
        super().clear()
        self._snapshot = None
        self.save()
