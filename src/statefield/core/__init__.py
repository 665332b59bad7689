"""Core mapping modules."""

from statefield.core.classifier import AnalysisClassifier, AnalysisVerdict
from statefield.core.dimensions import DIMENSIONS, StateVector
from statefield.core.jitter import JitterEstimator
from statefield.core.mapper import (
    CoherencePolicy,
    ParameterMappingPolicy,
    ParameterRecord,
    WeightedPolicy,
    get_policy,
)
from statefield.core.sample import Sample

__all__ = [
    "AnalysisClassifier",
    "AnalysisVerdict",
    "CoherencePolicy",
    "DIMENSIONS",
    "JitterEstimator",
    "ParameterMappingPolicy",
    "ParameterRecord",
    "Sample",
    "StateVector",
    "WeightedPolicy",
    "get_policy",
]
