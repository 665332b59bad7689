"""
Timestamped samples of the state vector.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping

from statefield.core.dimensions import StateVector


@dataclass(frozen=True)
class Sample:
    """One recorded state: milliseconds since epoch plus the full vector."""

    timestamp: int
    state: StateVector

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": int(self.timestamp), "state": self.state.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Sample":
        """
        Build a sample from its JSON form.

        Understands both ``{"timestamp", "state"}`` and the legacy
        ``{"t", "x": [...]}`` positional layout. Raises ValueError when
        neither timestamp field holds a number.
        """
        if "timestamp" in data:
            raw_t = data["timestamp"]
            raw_state = data.get("state")
        else:
            raw_t = data.get("t")
            raw_state = data.get("x")

        if isinstance(raw_t, bool) or not isinstance(raw_t, (int, float)):
            raise ValueError(f"Sample has no numeric timestamp: {raw_t!r}")
        if not math.isfinite(raw_t):
            raise ValueError(f"Sample timestamp is not finite: {raw_t!r}")

        return cls(timestamp=int(raw_t), state=StateVector(raw_state))
