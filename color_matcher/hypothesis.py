"""Ranking of learned models against an observed color distribution.

Similarity between two distributions is the histogram intersection
``sum(min(p, q))`` over the color vocabulary, which lies in [0, 1]. A model
scores the best similarity over its training distributions, so the number of
samples a model was trained with does not inflate its score.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .color_names import ColorDistribution
from .models import ModelStore

TIE_TOLERANCE = 1e-9


class Reason(str, Enum):
    ACCEPTED = "accepted"
    NO_OBSERVATION = "no_observation"
    NO_HYPOTHESIS = "no_hypothesis"
    BELOW_THRESHOLD = "below_threshold"
    RANKED = "ranked"


@dataclass(frozen=True)
class Hypothesis:
    scores: Dict[str, float] = field(default_factory=dict)
    ranking: List[Tuple[str, float]] = field(default_factory=list)
    label: Optional[str] = None
    score: float = 0.0
    reason: Reason = Reason.NO_HYPOTHESIS

    @property
    def found(self) -> bool:
        return self.label is not None


def similarity(p: ColorDistribution, q: ColorDistribution) -> float:
    """Histogram intersection of two complete distributions."""
    if p.is_empty or q.is_empty:
        raise ValueError("similarity is undefined for an empty distribution")
    return float(np.minimum(p.as_array(), q.as_array()).sum())


def rank_models(observed: ColorDistribution, store: ModelStore) -> Hypothesis:
    if observed.is_empty:
        return Hypothesis(reason=Reason.NO_OBSERVATION)
    entries = store.entries()
    if not entries:
        return Hypothesis(reason=Reason.NO_HYPOTHESIS)

    obs = observed.as_array()
    scores = {}
    for entry in entries:
        train = np.stack([d.as_array() for d in entry.distributions])
        scores[entry.name] = float(np.minimum(train, obs[None, :]).sum(axis=1).max())

    best_score = max(scores.values())

    def order(item):
        name, s = item
        # everything tied with the best ranks first, by name
        if s >= best_score - TIE_TOLERANCE:
            return (0, 0.0, name)
        return (1, -s, name)

    ranking = sorted(scores.items(), key=order)
    label = ranking[0][0]
    return Hypothesis(scores=scores, ranking=ranking, label=label, score=scores[label],
                      reason=Reason.RANKED)
