"""State-vector tracking engine with derived field parameters."""

from statefield.core.classifier import AnalysisClassifier
from statefield.core.dimensions import StateVector
from statefield.core.jitter import JitterEstimator
from statefield.core.mapper import CoherencePolicy, WeightedPolicy, get_policy
from statefield.io.exporter import ReportExporter
from statefield.io.history import InMemoryHistoryStore, JsonHistoryStore
from statefield.pipeline import PipelineConfig, StatePipeline

__version__ = "0.1.0"
__all__ = [
    "AnalysisClassifier",
    "CoherencePolicy",
    "InMemoryHistoryStore",
    "JitterEstimator",
    "JsonHistoryStore",
    "PipelineConfig",
    "ReportExporter",
    "StatePipeline",
    "StateVector",
    "WeightedPolicy",
    "get_policy",
]
