"""
Dimension registry and state vector model.

Defines the twelve self-report axes, their bounds, and the coercion rules
that turn raw UI input into a well-formed StateVector.
"""

import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

MIN_VALUE = 0
MAX_VALUE = 5
DEFAULT_VALUE = 3


@dataclass(frozen=True)
class Dimension:
    """A single bounded self-report axis."""

    key: str
    # Reshape exponent used by the weighted policy. Higher values suppress
    # weak readings so the axis only counts once strongly engaged.
    exponent: float = 1.15

    @property
    def label(self) -> str:
        return self.key.replace("_", " ")


DIMENSIONS: tuple[Dimension, ...] = (
    Dimension("Energy", exponent=1.15),
    Dimension("Focus", exponent=1.2),
    Dimension("Money", exponent=1.1),
    Dimension("Relationships", exponent=1.15),
    Dimension("Creative_Output", exponent=1.25),
    Dimension("Skill_Growth", exponent=1.2),
    Dimension("Health", exponent=1.1),
    Dimension("Environment", exponent=1.15),
    Dimension("Social_Presence", exponent=1.1),
    Dimension("Opportunities", exponent=1.2),
    Dimension("Chaos_Load", exponent=1.25),
    Dimension("Long_term_Trajectory", exponent=1.2),
)

DIMENSION_KEYS: tuple[str, ...] = tuple(d.key for d in DIMENSIONS)
CHAOS_KEY = "Chaos_Load"

_BY_KEY = {d.key: d for d in DIMENSIONS}


def get_dimension(key: str) -> Dimension:
    """Look up a dimension by key. Raises KeyError for unknown keys."""
    try:
        return _BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown dimension: {key!r}") from None


def coerce_value(raw: Any) -> int:
    """
    Coerce a raw slider value into the [0, 5] integer domain.

    Non-numeric input and NaN become 0; everything else is rounded to the
    nearest integer and clamped to the bounds.
    """
    if isinstance(raw, bool):
        raw = int(raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return MIN_VALUE
    if math.isnan(value):
        return MIN_VALUE
    if value <= MIN_VALUE:
        return MIN_VALUE
    if value >= MAX_VALUE:
        return MAX_VALUE
    return int(math.floor(value + 0.5))


StateInput = Union["StateVector", Mapping[str, Any], Sequence[Any], None]


class StateVector(Mapping[str, int]):
    """
    Immutable mapping of every dimension key to an integer in [0, 5].

    Accepts a mapping (missing keys become 0, unknown keys are dropped) or
    the legacy positional array in canonical dimension order. Anything else
    yields all zeros.
    """

    __slots__ = ("_values",)

    def __init__(self, values: StateInput = None):
        if isinstance(values, StateVector):
            self._values = dict(values._values)
            return

        if values is None:
            values = {}

        if isinstance(values, Mapping):
            self._values = {
                key: coerce_value(values.get(key)) for key in DIMENSION_KEYS
            }
        elif isinstance(values, (str, bytes)):
            self._values = {key: MIN_VALUE for key in DIMENSION_KEYS}
        else:
            try:
                items = list(values)
            except TypeError:
                items = []
            self._values = {
                key: coerce_value(items[i] if i < len(items) else None)
                for i, key in enumerate(DIMENSION_KEYS)
            }

    @classmethod
    def default(cls) -> "StateVector":
        """Every axis at the slider's starting position."""
        return cls({key: DEFAULT_VALUE for key in DIMENSION_KEYS})

    @classmethod
    def from_array(cls, values: Sequence[Any]) -> "StateVector":
        return cls(list(values))

    def __getitem__(self, key: str) -> int:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(DIMENSION_KEYS)

    def __len__(self) -> int:
        return len(DIMENSION_KEYS)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StateVector):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.as_array())

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v}" for k, v in self._values.items())
        return f"StateVector({inner})"

    def adjust(self, key: str, delta: int) -> "StateVector":
        """Return a copy with one axis stepped by ``delta`` and clamped."""
        get_dimension(key)
        values = dict(self._values)
        values[key] = coerce_value(values[key] + delta)
        return StateVector(values)

    def as_array(self) -> tuple[int, ...]:
        """Positional encoding in canonical dimension order."""
        return tuple(self._values[key] for key in DIMENSION_KEYS)

    def to_dict(self) -> dict[str, int]:
        return dict(self._values)
