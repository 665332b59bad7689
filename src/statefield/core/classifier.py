"""
Rule-based analysis of a parameter record.

Five independent threshold ladders (coherence, chaos, D, lambda, mu) each
pick exactly one sentence. Ladders are evaluated top-down and the first
matching rung wins; no ladder looks at another's outcome.
"""

import operator
from dataclasses import dataclass, field
from typing import Any, Callable

from statefield.core.dimensions import CHAOS_KEY, StateInput, StateVector
from statefield.core.mapper import ParameterRecord
from statefield.core.shaping import clamp, normalize


@dataclass(frozen=True)
class Rung:
    """One (comparison, threshold, sentence) row of a ladder."""

    compare: Callable[[float, float], bool]
    threshold: float
    sentence: str

    def matches(self, value: float) -> bool:
        return self.compare(value, self.threshold)


@dataclass(frozen=True)
class Ladder:
    """Ordered rungs plus the sentence used when none match."""

    axis: str
    rungs: tuple[Rung, ...]
    otherwise: str

    def evaluate(self, value: float) -> str:
        for rung in self.rungs:
            if rung.matches(value):
                return rung.sentence
        return self.otherwise


COHERENCE_LADDER = Ladder(
    axis="coherence",
    rungs=(
        Rung(operator.ge, 80, "The state is highly coherent: the dimensions are pulling in the same direction."),
        Rung(operator.ge, 55, "The state is moderately coherent, with a few dimensions out of phase."),
        Rung(operator.ge, 35, "Coherence is weak; the dimensions are drifting apart."),
    ),
    otherwise="The state is near decoherence: the dimensions no longer form a consistent picture.",
)

CHAOS_LADDER = Ladder(
    axis="chaos",
    rungs=(
        Rung(operator.le, 0.2, "Chaos load is minimal."),
        Rung(operator.le, 0.45, "Chaos load is present but contained."),
        Rung(operator.le, 0.7, "Chaos load is elevated and starting to dominate."),
    ),
    otherwise="Chaos load is saturating the field.",
)

DIFFUSION_LADDER = Ladder(
    axis="D",
    rungs=(
        Rung(operator.lt, 0.4, "Diffusion is low: the state is stable and slow to wander."),
        Rung(operator.lt, 0.9, "Diffusion is moderate: there is room to explore without losing shape."),
    ),
    otherwise="Diffusion is high: the state is spreading out and hard to hold.",
)

ATTRACTOR_LADDER = Ladder(
    axis="lambda",
    rungs=(
        Rung(operator.gt, 1.1, "Attractor strength is high: there is a strong pull toward the goal."),
        Rung(operator.gt, 0.5, "Attractor strength is moderate."),
    ),
    otherwise="Attractor strength is weak: little is pulling toward any goal.",
)

ALIASING_LADDER = Ladder(
    axis="mu",
    rungs=(
        Rung(operator.gt, 1.0, "Aliasing coupling is strong: there is heavy pressure to reinterpret the situation."),
        Rung(operator.gt, 0.5, "Aliasing coupling is moderate."),
    ),
    otherwise="Aliasing coupling is low: the current framing is holding.",
)

LADDERS: tuple[Ladder, ...] = (
    COHERENCE_LADDER,
    CHAOS_LADDER,
    DIFFUSION_LADDER,
    ATTRACTOR_LADDER,
    ALIASING_LADDER,
)


@dataclass(frozen=True)
class AnalysisVerdict:
    """Ordered (axis, sentence) pairs."""

    sentences: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return " ".join(sentence for _, sentence in self.sentences)

    def get(self, axis: str) -> str | None:
        for name, sentence in self.sentences:
            if name == axis:
                return sentence
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentences": [{"axis": a, "text": s} for a, s in self.sentences],
            "text": self.text,
        }


def chaos_level(state: StateInput) -> float:
    """Chaos load as a clamped [0, 1] level."""
    return clamp(normalize(StateVector(state)[CHAOS_KEY]), 0.0, 1.0)


class AnalysisClassifier:
    """Evaluates the five ladders against a record and the raw state."""

    def __init__(self, ladders: tuple[Ladder, ...] = LADDERS):
        self.ladders = ladders

    def _inputs(self, record: ParameterRecord, state: StateInput) -> dict[str, float]:
        return {
            "coherence": record.coherence_percent,
            "chaos": chaos_level(state),
            "D": record.D,
            "lambda": record.lam,
            "mu": record.mu,
        }

    def classify(self, record: ParameterRecord, state: StateInput) -> AnalysisVerdict:
        """
        Build the verdict for ``record``.

        Args:
            record: Parameters from a mapping policy.
            state: Raw state the record was computed from (for chaos load).

        Returns:
            AnalysisVerdict with one sentence per ladder, in ladder order.
        """
        inputs = self._inputs(record, state)
        return AnalysisVerdict(
            sentences=tuple(
                (ladder.axis, ladder.evaluate(inputs[ladder.axis]))
                for ladder in self.ladders
            )
        )
