"""
Report serialization module.

Renders parameter records into display strings and exports JSON reports
and analysis payloads for presentation layers and external analysts.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Union

from statefield.core.classifier import AnalysisVerdict
from statefield.core.dimensions import DIMENSIONS, StateInput, StateVector
from statefield.core.mapper import ParameterRecord
from statefield.core.sample import Sample


@dataclass
class ReportMetadata:
    """Metadata header for an exported report."""

    timestamp: int | None
    policy: str
    n_samples: int
    version: str = "1.0"
    schema_version: str = "1.0"


class ReportExporter:
    """
    Formats records for display and exports JSON reports.

    Records stay full precision in exported data; ``precision`` only
    applies to the human-readable strings.
    """

    def __init__(self, precision: int = 3):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for displayed parameters.
        """
        self.precision = precision

    def _fmt(self, value: float) -> str:
        return f"{value:.{self.precision}f}"

    def format_state_vector(self, state: StateInput) -> str:
        state = StateVector(state)
        inner = ", ".join(f"{d.key}={state[d.key]}" for d in DIMENSIONS)
        return f"State Vector: [{inner}]"

    def format_feedback(self, record: ParameterRecord) -> str:
        """One-line summary of the record, percents at one decimal."""
        tension_pct = record.tension / record.tension_ceiling * 100.0
        return (
            f"Coherence: {record.coherence * 100.0:.1f}% | "
            f"Tension: {tension_pct:.1f}% | "
            f"D = {self._fmt(record.D)} | "
            f"λ = {self._fmt(record.lam)} | "
            f"μ = {self._fmt(record.mu)}"
        )

    def format_equation(self, record: ParameterRecord) -> str:
        """Display-only field equation label. Nothing evaluates it."""
        return (
            f"i ∂ψ/∂t (t,z) = - {self._fmt(record.D)} ∇ᵗ_z ∇_z ψ(t,z) + "
            f"({self._fmt(record.lam)} / |z|²) ψ(t,z) + "
            f"{self._fmt(record.mu)} ψ(t,z)"
        )

    def build_payload(
        self,
        history: Iterable[Sample],
        record: ParameterRecord | None,
    ) -> dict[str, Any]:
        """
        Full history plus current parameters, for an external analyst.

        Returns:
            JSON-serialisable dictionary.
        """
        return {
            "state_history": [s.to_dict() for s in history],
            "current_params": record.to_dict() if record is not None else {},
        }

    def build_report(
        self,
        state: StateInput,
        record: ParameterRecord,
        verdict: AnalysisVerdict,
        timestamp: int | None = None,
        n_samples: int = 0,
    ) -> dict[str, Any]:
        """
        Build the complete report dictionary.

        Args:
            state: State the record was computed from.
            record: Mapped parameters.
            verdict: Classifier output for the record.
            timestamp: Sample time in ms, if known.
            n_samples: Size of the history the record was computed against.

        Returns:
            Report dictionary ready for serialization.
        """
        state = StateVector(state)
        metadata = ReportMetadata(
            timestamp=timestamp,
            policy=record.policy,
            n_samples=n_samples,
        )

        return {
            "metadata": {
                "timestamp": metadata.timestamp,
                "policy": metadata.policy,
                "n_samples": metadata.n_samples,
                "version": metadata.version,
                "schema_version": metadata.schema_version,
            },
            "state": state.to_dict(),
            "params": record.to_dict(),
            "analysis": verdict.to_dict(),
            "display": {
                "state_vector": self.format_state_vector(state),
                "feedback": self.format_feedback(record),
                "equation": self.format_equation(record),
            },
        }

    def export_json(
        self,
        report: dict[str, Any],
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Write a report (or payload) to a JSON file.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=indent, ensure_ascii=False)

        return output_path
