"""Tests for the AnalysisClassifier module."""

import pytest

from statefield.core.classifier import (
    ALIASING_LADDER,
    ATTRACTOR_LADDER,
    CHAOS_LADDER,
    COHERENCE_LADDER,
    DIFFUSION_LADDER,
    AnalysisClassifier,
    AnalysisVerdict,
    chaos_level,
)
from statefield.core.dimensions import StateVector
from statefield.core.mapper import ParameterRecord, WeightedPolicy


def make_record(**overrides) -> ParameterRecord:
    values = dict(D=0.2, lam=0.3, mu=0.2, coherence=0.5, tension=0.0)
    values.update(overrides)
    return ParameterRecord(**values)


class TestLadders:
    """Bucket boundaries are inclusive/exclusive exactly as documented."""

    def test_coherence_80_is_top_bucket(self):
        assert "highly coherent" in COHERENCE_LADDER.evaluate(80)

    def test_coherence_79_is_next_bucket(self):
        sentence = COHERENCE_LADDER.evaluate(79)
        assert sentence == COHERENCE_LADDER.rungs[1].sentence

    @pytest.mark.parametrize(
        "value, index",
        [(100, 0), (55, 1), (54, 2), (35, 2), (34, None), (0, None)],
    )
    def test_coherence_buckets(self, value, index):
        expected = (
            COHERENCE_LADDER.otherwise if index is None
            else COHERENCE_LADDER.rungs[index].sentence
        )
        assert COHERENCE_LADDER.evaluate(value) == expected

    @pytest.mark.parametrize(
        "value, index",
        [(0.0, 0), (0.2, 0), (0.21, 1), (0.45, 1), (0.7, 2), (0.71, None), (1.0, None)],
    )
    def test_chaos_buckets(self, value, index):
        expected = (
            CHAOS_LADDER.otherwise if index is None
            else CHAOS_LADDER.rungs[index].sentence
        )
        assert CHAOS_LADDER.evaluate(value) == expected

    def test_diffusion_boundary(self):
        """D == 0.4 lands in the middle bucket, not the low one."""
        assert DIFFUSION_LADDER.evaluate(0.39) == DIFFUSION_LADDER.rungs[0].sentence
        assert DIFFUSION_LADDER.evaluate(0.4) == DIFFUSION_LADDER.rungs[1].sentence
        assert DIFFUSION_LADDER.evaluate(0.9) == DIFFUSION_LADDER.otherwise

    def test_attractor_boundary(self):
        assert ATTRACTOR_LADDER.evaluate(1.11) == ATTRACTOR_LADDER.rungs[0].sentence
        assert ATTRACTOR_LADDER.evaluate(1.1) == ATTRACTOR_LADDER.rungs[1].sentence
        assert ATTRACTOR_LADDER.evaluate(0.5) == ATTRACTOR_LADDER.otherwise

    def test_aliasing_boundary(self):
        assert ALIASING_LADDER.evaluate(1.01) == ALIASING_LADDER.rungs[0].sentence
        assert ALIASING_LADDER.evaluate(1.0) == ALIASING_LADDER.rungs[1].sentence
        assert ALIASING_LADDER.evaluate(0.5) == ALIASING_LADDER.otherwise


class TestAnalysisClassifier:
    def test_fixed_axis_order(self, mid_state):
        verdict = AnalysisClassifier().classify(make_record(), mid_state)
        axes = [axis for axis, _ in verdict.sentences]

        assert axes == ["coherence", "chaos", "D", "lambda", "mu"]

    def test_uses_coherence_percent(self, mid_state):
        top = AnalysisClassifier().classify(make_record(coherence=0.80), mid_state)
        lower = AnalysisClassifier().classify(make_record(coherence=0.79), mid_state)

        assert "highly coherent" in top.get("coherence")
        assert lower.get("coherence") == COHERENCE_LADDER.rungs[1].sentence

    def test_chaos_read_from_raw_state(self):
        record = make_record()
        calm = AnalysisClassifier().classify(record, {"Chaos_Load": 1})
        wild = AnalysisClassifier().classify(record, {"Chaos_Load": 5})

        assert calm.get("chaos") == CHAOS_LADDER.rungs[0].sentence
        assert wild.get("chaos") == CHAOS_LADDER.otherwise

    def test_ladders_independent(self, mid_state):
        """Changing D only changes the D sentence."""
        low = AnalysisClassifier().classify(make_record(D=0.1), mid_state)
        high = AnalysisClassifier().classify(make_record(D=1.5), mid_state)

        for (axis, a), (_, b) in zip(low.sentences, high.sentences):
            if axis == "D":
                assert a != b
            else:
                assert a == b

    def test_all_zero_state_near_decoherence(self, zero_state):
        record = WeightedPolicy().compute(zero_state)
        verdict = AnalysisClassifier().classify(record, zero_state)

        assert "near decoherence" in verdict.get("coherence")
        assert verdict.get("chaos") == CHAOS_LADDER.rungs[0].sentence

    def test_driven_state_verdict(self, driven_state):
        record = WeightedPolicy().compute(driven_state)
        verdict = AnalysisClassifier().classify(record, driven_state)

        assert verdict.get("mu") == ALIASING_LADDER.otherwise
        assert verdict.get("D") == DIFFUSION_LADDER.rungs[0].sentence
        assert verdict.get("lambda") == ATTRACTOR_LADDER.rungs[1].sentence


class TestAnalysisVerdict:
    def test_text_joins_in_order(self):
        verdict = AnalysisVerdict(sentences=(("a", "One."), ("b", "Two.")))
        assert verdict.text == "One. Two."

    def test_get_missing_axis(self):
        assert AnalysisVerdict().get("coherence") is None

    def test_to_dict(self):
        verdict = AnalysisVerdict(sentences=(("a", "One."),))
        data = verdict.to_dict()

        assert data["sentences"] == [{"axis": "a", "text": "One."}]
        assert data["text"] == "One."


def test_chaos_level_clamped():
    assert chaos_level({"Chaos_Load": 9}) == 1.0
    assert chaos_level(StateVector()) == 0.0
