"""
Rate-of-change estimation over recent history.

Jitter is the mean, over consecutive sample pairs inside a time window, of
the per-axis mean absolute change divided by the elapsed seconds.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from statefield.core.sample import Sample

MS_PER_HOUR = 60 * 60 * 1000


@dataclass
class WindowParams:
    """Look-back window for the jitter estimate."""

    hours: float = 24.0

    @property
    def ms(self) -> float:
        return self.hours * MS_PER_HOUR


class JitterEstimator:
    """
    Estimates how fast the whole state vector is moving.

    The estimate ignores which axes moved; it only measures the average
    magnitude of change per second.
    """

    def __init__(self, window: WindowParams | None = None):
        """
        Initialize the estimator.

        Args:
            window: Look-back window (default: 24 hours).
        """
        self.window_params = window or WindowParams()

    def window(self, samples: Sequence[Sample], now: int) -> list[Sample]:
        """Samples with ``now - t <= window``, in stored order."""
        limit = self.window_params.ms
        return [s for s in samples if now - s.timestamp <= limit]

    def pair_rates(self, samples: Sequence[Sample]) -> np.ndarray:
        """
        Per-pair change rates for consecutive samples.

        Pairs whose timestamps do not advance are skipped rather than
        treated as errors.

        Returns:
            1-D array of mean-absolute-delta per second, one per valid pair.
        """
        if len(samples) < 2:
            return np.zeros(0)

        times = np.array([s.timestamp for s in samples], dtype=np.float64)
        states = np.array([s.state.as_array() for s in samples], dtype=np.float64)

        dt = np.diff(times) / 1000.0
        mean_abs_delta = np.abs(np.diff(states, axis=0)).mean(axis=1)

        valid = dt > 0
        return mean_abs_delta[valid] / dt[valid]

    def estimate(self, samples: Sequence[Sample], now: int | None = None) -> float:
        """
        Compute jitter for ``samples``.

        Args:
            samples: History in stored order.
            now: Reference time in ms. When None, ``samples`` is taken as an
                already-windowed slice.

        Returns:
            Mean rate of change, 0.0 with fewer than two usable samples.
        """
        if now is not None:
            samples = self.window(samples, now)

        rates = self.pair_rates(samples)
        if rates.size == 0:
            return 0.0
        return float(rates.mean())
