"""Tests for model ranking."""

import pytest

from color_matcher.color_names import ColorDistribution
from color_matcher.hypothesis import Reason, rank_models, similarity
from color_matcher.models import ModelStore


def dist(**weights):
    return ColorDistribution.from_mapping(weights)


@pytest.fixture
def store():
    s = ModelStore()
    s.append("red_ball", [dist(red=0.9, black=0.1)])
    return s


class TestSimilarity:
    def test_symmetric_and_bounded(self):
        p = dist(red=0.7, white=0.3)
        q = dist(red=0.2, blue=0.8)
        assert similarity(p, q) == similarity(q, p)
        assert similarity(p, q) == pytest.approx(0.2)
        assert similarity(p, p) == pytest.approx(1.0)
        assert similarity(dist(red=1.0), dist(blue=1.0)) == 0.0

    def test_undefined_for_empty(self):
        with pytest.raises(ValueError):
            similarity(ColorDistribution.empty(), dist(red=1.0))


class TestRankModels:
    def test_red_ball_scenario(self, store):
        hyp = rank_models(dist(red=0.85, black=0.15), store)
        assert hyp.found
        assert hyp.reason is Reason.RANKED
        assert hyp.label == "red_ball"
        assert hyp.score == pytest.approx(0.95)
        assert hyp.score > 0.5

    def test_empty_store(self):
        hyp = rank_models(dist(red=1.0), ModelStore())
        assert not hyp.found
        assert hyp.reason is Reason.NO_HYPOTHESIS
        assert hyp.ranking == []

    def test_empty_observation(self, store):
        hyp = rank_models(ColorDistribution.empty(), store)
        assert not hyp.found
        assert hyp.reason is Reason.NO_OBSERVATION

    def test_ranking_is_sorted_by_score(self, store):
        store.append("blue_cup", [dist(blue=0.9, white=0.1)])
        store.append("mixed", [dist(red=0.5, blue=0.5)])
        hyp = rank_models(dist(red=1.0), store)
        assert [n for n, _ in hyp.ranking] == ["red_ball", "mixed", "blue_cup"]
        assert hyp.scores["blue_cup"] == pytest.approx(0.0)

    def test_tie_breaks_by_name(self):
        s = ModelStore()
        s.append("zebra", [dist(red=1.0)])
        s.append("apple", [dist(red=1.0)])
        s.append("mango", [dist(red=1.0)])
        hyp = rank_models(dist(red=1.0), s)
        assert hyp.label == "apple"
        assert [n for n, _ in hyp.ranking] == ["apple", "mango", "zebra"]

    def test_max_aggregation_ignores_sample_count(self):
        s = ModelStore()
        s.append("few", [dist(red=1.0)])
        s.append("many", [dist(red=1.0)] + [dist(blue=1.0)] * 20)
        hyp = rank_models(dist(red=1.0), s)
        assert hyp.scores["few"] == hyp.scores["many"] == pytest.approx(1.0)
        assert hyp.label == "few"

    def test_deterministic(self, store):
        store.append("blue_cup", [dist(blue=0.9, white=0.1)])
        store.append("red_cup", [dist(red=0.9, black=0.1)])
        observed = dist(red=0.6, blue=0.3, black=0.1)
        first = rank_models(observed, store)
        for _ in range(5):
            again = rank_models(observed, store)
            assert again.ranking == first.ranking
            assert again.label == first.label == "red_ball"
