"""
Main state-tracking pipeline.

Orchestrates the flow from a recorded state vector to parameters,
analysis text and report.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Union

from statefield.core.classifier import AnalysisClassifier, AnalysisVerdict
from statefield.core.dimensions import StateInput, StateVector
from statefield.core.jitter import JitterEstimator, WindowParams
from statefield.core.mapper import (
    DEFAULT_POLICY,
    CoherencePolicy,
    ParameterMappingPolicy,
    ParameterRecord,
    get_policy,
)
from statefield.core.sample import Sample
from statefield.io.exporter import ReportExporter
from statefield.io.history import (
    DEFAULT_RETENTION,
    HistoryStore,
    InMemoryHistoryStore,
    JsonHistoryStore,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Settings for a tracking session."""

    policy: str = DEFAULT_POLICY
    window_hours: float = 24.0
    retention: int | None = DEFAULT_RETENTION
    precision: int = 3
    # Only used by the coherence policy.
    clamp_diffusion: bool = True
    # None keeps history in memory; persist=True with no path uses the data dir.
    history_path: Path | None = None
    persist: bool = False


class StatePipeline:
    """
    Session context for state tracking.

    Owns the history store and the latest state, record and verdict. Every
    edit runs one full recompute: append, window, estimate, map, classify.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        store: HistoryStore | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Session settings (default: weighted policy, in-memory).
            store: History store. Built from ``config`` when None.
            clock: Returns the current time in ms (default: wall clock).
        """
        self.config = config or PipelineConfig()
        self.clock = clock or (lambda: int(time.time() * 1000))

        self.window = WindowParams(hours=self.config.window_hours)
        self.estimator = JitterEstimator(window=self.window)
        self.policy = self._build_policy()
        self.classifier = AnalysisClassifier()
        self.exporter = ReportExporter(precision=self.config.precision)
        self.store = store if store is not None else self._build_store()

        self.state: StateVector | None = None
        self.timestamp: int | None = None
        self.params: ParameterRecord | None = None
        self.verdict: AnalysisVerdict | None = None

    def _get_data_dir(self) -> Path:
        """Return the directory holding persisted history."""
        data_dir = Path.home() / ".statefield"
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def _build_policy(self) -> ParameterMappingPolicy:
        if self.config.policy == CoherencePolicy.name:
            return get_policy(
                self.config.policy,
                estimator=self.estimator,
                clamp_diffusion=self.config.clamp_diffusion,
            )
        return get_policy(self.config.policy)

    def _build_store(self) -> HistoryStore:
        path = self.config.history_path
        if path is None and self.config.persist:
            path = self._get_data_dir() / "history.json"
        if path is None:
            return InMemoryHistoryStore(retention=self.config.retention)
        return JsonHistoryStore(path, retention=self.config.retention)

    def compute(
        self,
        state: StateInput,
        now: int | None = None,
    ) -> tuple[ParameterRecord, AnalysisVerdict]:
        """
        Map a state against the current history without recording it.

        Args:
            state: State vector (coerced if necessary).
            now: Reference time in ms for the history window.

        Returns:
            (record, verdict) tuple.
        """
        state = StateVector(state)
        now = self.clock() if now is None else now

        recent = self.store.window(now, self.window.ms)
        record = self.policy.compute(state, recent)
        verdict = self.classifier.classify(record, state)
        return record, verdict

    def _update(
        self,
        state: StateVector,
        timestamp: int,
        now: int | None = None,
    ) -> dict[str, Any]:
        record, verdict = self.compute(state, now=timestamp if now is None else now)

        self.state = state
        self.timestamp = timestamp
        self.params = record
        self.verdict = verdict
        return self.result()

    def record(
        self,
        state: StateInput,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """
        Record a new state and recompute everything.

        Args:
            state: State vector (coerced if necessary).
            timestamp: Sample time in ms (default: now).

        Returns:
            Dictionary with the state, record, verdict and report.
        """
        state = StateVector(state)
        timestamp = self.clock() if timestamp is None else int(timestamp)

        self.store.append(Sample(timestamp=timestamp, state=state))
        logger.debug("Recorded sample at %d (%d in history)", timestamp, len(self.store.samples()))
        return self._update(state, timestamp)

    def adjust(
        self,
        key: str,
        delta: int,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """
        Step one axis of the current state by ``delta`` and record it.

        Raises:
            KeyError: If ``key`` is not a known dimension.
        """
        base = self.current_state()
        return self.record(base.adjust(key, delta), timestamp=timestamp)

    def current_state(self) -> StateVector:
        """Latest state: in session, else last persisted, else the default."""
        if self.state is not None:
            return self.state
        last = self.store.last()
        if last is not None:
            return last.state
        return StateVector.default()

    def restore(self) -> dict[str, Any] | None:
        """
        Re-derive the current record from the last stored sample.

        Returns:
            Result dictionary, or None when the history is empty.
        """
        last = self.store.last()
        if last is None:
            return None
        logger.info("Restoring state from sample at %d", last.timestamp)
        return self._update(last.state, last.timestamp, now=self.clock())

    def result(self) -> dict[str, Any]:
        """Current state, record, verdict and report."""
        if self.state is None or self.params is None or self.verdict is None:
            return {}
        return {
            "state": self.state,
            "timestamp": self.timestamp,
            "record": self.params,
            "verdict": self.verdict,
            "report": self.report(),
        }

    def report(self) -> dict[str, Any]:
        """Report dictionary for the current record."""
        if self.state is None or self.params is None or self.verdict is None:
            return {}
        return self.exporter.build_report(
            self.state,
            self.params,
            self.verdict,
            timestamp=self.timestamp,
            n_samples=len(self.store.samples()),
        )

    def payload(self) -> dict[str, Any]:
        """Full history plus current parameters, for an external analyst."""
        return self.exporter.build_payload(self.store.samples(), self.params)

    def export(self, output_path: Union[str, Path], payload: bool = False) -> Path:
        """Write the current report (or the analysis payload) to JSON."""
        data = self.payload() if payload else self.report()
        return self.exporter.export_json(data, output_path)
