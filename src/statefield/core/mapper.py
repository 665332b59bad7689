"""
State-to-parameter mapping.

Turns the current state vector (and, for the coherence policy, recent
history) into the parameter record {D, lambda, mu, coherence, tension}.

Two policies are kept side by side:

    coherence  - driven by jitter over history, mean level and chaos load.
    weighted   - fixed-weight combination of reshaped axes, no history.

Both are deterministic and bounded; the ceilings below are part of the
observable contract since percent displays divide by them.
"""

import abc
import math
from dataclasses import asdict, dataclass
from typing import Any, Sequence

import numpy as np

from statefield.core.dimensions import (
    CHAOS_KEY,
    DIMENSION_KEYS,
    DIMENSIONS,
    StateInput,
    StateVector,
)
from statefield.core.jitter import JitterEstimator
from statefield.core.sample import Sample
from statefield.core.shaping import clamp, normalize, reshape

D_MAX = 1.8
LAMBDA_MAX = 1.5
MU_MAX = 1.5
TENSION_MAX = 1.4


def round_percent(fraction: float) -> int:
    """Round a [0, 1] fraction to an integer percent, halves rounding up."""
    return int(math.floor(fraction * 100.0 + 0.5))


@dataclass(frozen=True)
class ParameterRecord:
    """Derived parameters for one state. Values are full precision."""

    D: float
    lam: float
    mu: float
    coherence: float
    tension: float
    # Ceiling the tension percent is reported against.
    tension_ceiling: float = TENSION_MAX
    policy: str = ""
    jitter: float = 0.0

    @property
    def coherence_percent(self) -> int:
        return round_percent(self.coherence)

    @property
    def tension_percent(self) -> int:
        return round_percent(self.tension / self.tension_ceiling)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["coherence_percent"] = self.coherence_percent
        data["tension_percent"] = self.tension_percent
        return data


class ParameterMappingPolicy(abc.ABC):
    """Common interface for the mapping strategies."""

    name: str = ""

    @abc.abstractmethod
    def compute(
        self,
        state: StateInput,
        history_window: Sequence[Sample] = (),
        now: int | None = None,
    ) -> ParameterRecord:
        """
        Map a state (plus optional recent history) to a ParameterRecord.

        Args:
            state: Current state vector, coerced if necessary.
            history_window: Recent samples in stored order.
            now: Reference time in ms used to window ``history_window``.
                When None the history is assumed to be pre-windowed.
        """
        pass


class CoherencePolicy(ParameterMappingPolicy):
    """
    History-driven mapping.

    D follows jitter, lambda falls with chaos load, mu falls with the mean
    level (coherence). Tension is reported as the chaos level itself.
    """

    name = "coherence"

    def __init__(
        self,
        estimator: JitterEstimator | None = None,
        clamp_diffusion: bool = True,
    ):
        """
        Args:
            estimator: Jitter estimator (default 24 h window).
            clamp_diffusion: Clamp D to [0, D_MAX]. Large jitter pushes the
                raw value past the ceiling when disabled.
        """
        self.estimator = estimator or JitterEstimator()
        self.clamp_diffusion = clamp_diffusion

    def compute(
        self,
        state: StateInput,
        history_window: Sequence[Sample] = (),
        now: int | None = None,
    ) -> ParameterRecord:
        state = StateVector(state)
        values = normalize(np.array(state.as_array(), dtype=np.float64))

        coherence = float(values.mean())
        chaos = float(normalize(state[CHAOS_KEY]))
        jitter = self.estimator.estimate(history_window, now)

        D = 0.1 + 0.9 * (jitter / 5.0)
        if self.clamp_diffusion:
            D = clamp(D, 0.0, D_MAX)
        lam = 0.2 + 0.8 * (1.0 - chaos)
        mu = 0.1 + 0.9 * (1.0 - coherence)

        return ParameterRecord(
            D=D,
            lam=lam,
            mu=mu,
            coherence=coherence,
            tension=chaos,
            tension_ceiling=1.0,
            policy=self.name,
            jitter=jitter,
        )


class WeightedPolicy(ParameterMappingPolicy):
    """
    Fixed-weight mapping over reshaped axes.

    D rises with chaos and falls with focus, skill growth and environment.
    Lambda is carried by resource and support axes. Mu is carried by
    creative output, chaos and long-horizon thinking.
    """

    name = "weighted"

    EXPONENTS = np.array([d.exponent for d in DIMENSIONS], dtype=np.float64)

    def shaped(self, state: StateVector) -> dict[str, float]:
        """Reshaped [0, 1] value per axis."""
        raw = normalize(np.array(state.as_array(), dtype=np.float64))
        values = reshape(raw, self.EXPONENTS)
        return {key: float(v) for key, v in zip(DIMENSION_KEYS, values)}

    def compute(
        self,
        state: StateInput,
        history_window: Sequence[Sample] = (),
        now: int | None = None,
    ) -> ParameterRecord:
        n = self.shaped(StateVector(state))
        chaos = n[CHAOS_KEY]

        D = clamp(
            0.45 * (1.0 - n["Focus"])
            + 0.35 * (1.0 - n["Skill_Growth"])
            + 0.35 * (1.0 - n["Environment"])
            + 0.7 * chaos,
            0.0,
            D_MAX,
        )
        lam = clamp(
            0.25 * n["Energy"]
            + 0.18 * n["Money"]
            + 0.18 * n["Relationships"]
            + 0.12 * n["Opportunities"]
            + 0.10 * n["Social_Presence"]
            + 0.09 * n["Health"]
            + 0.08 * n["Long_term_Trajectory"],
            0.0,
            LAMBDA_MAX,
        )
        mu = clamp(
            0.45 * n["Creative_Output"]
            + 0.30 * chaos
            + 0.25 * n["Long_term_Trajectory"],
            0.0,
            MU_MAX,
        )

        calm = [n[key] for key in DIMENSION_KEYS if key != CHAOS_KEY]
        coherence = clamp(
            0.6 * (sum(calm) / len(calm))
            + 0.2 * n["Long_term_Trajectory"]
            + 0.15 * (lam / LAMBDA_MAX)
            - 0.35 * chaos
            - 0.25 * (D / D_MAX),
            0.0,
            1.0,
        )
        tension = clamp(
            0.55 * (lam / LAMBDA_MAX)
            + 0.35 * (mu / MU_MAX)
            + 0.10 * (1.0 - D / D_MAX),
            0.0,
            TENSION_MAX,
        )

        return ParameterRecord(
            D=D,
            lam=lam,
            mu=mu,
            coherence=coherence,
            tension=tension,
            tension_ceiling=TENSION_MAX,
            policy=self.name,
        )


POLICIES: dict[str, type[ParameterMappingPolicy]] = {
    CoherencePolicy.name: CoherencePolicy,
    WeightedPolicy.name: WeightedPolicy,
}

DEFAULT_POLICY = WeightedPolicy.name


def get_policy(name: str, **kwargs: Any) -> ParameterMappingPolicy:
    """Instantiate a policy by name. Raises ValueError for unknown names."""
    try:
        policy_cls = POLICIES[name]
    except KeyError:
        choices = ", ".join(sorted(POLICIES))
        raise ValueError(f"Unknown mapping policy {name!r} (choose from: {choices})") from None
    return policy_cls(**kwargs)
