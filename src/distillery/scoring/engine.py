"""
Scoring Engine - Weighted Multi-Factor Candidate Ranking

Combines six independent sub-scores into one confidence value:

    final = (sum(weight_i * clamp(score_i))) * (1 - clamp(noise) * 0.5)

The noise penalty is multiplicative, so a candidate whose weighted sum is
zero scores zero regardless of noise, and more noise never raises a score.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import structlog

from ..dom.document import DocumentNode
from ..models import Candidate, ScoreBreakdown
from .components import (
    article_structure,
    clamp,
    content_density,
    metadata_score,
    position_score,
    semantic_score,
    text_quality,
)
from .features import CandidateFeatures
from .noise import NoiseClassifier

logger = structlog.get_logger(__name__)

WEIGHTS: Dict[str, float] = {
    "text_quality": 0.25,
    "content_density": 0.20,
    "article_structure": 0.20,
    "semantic_score": 0.15,
    "position_score": 0.10,
    "metadata_score": 0.10,
}

NOISE_PENALTY = 0.5


def weighted_sum(scores: ScoreBreakdown) -> float:
    return sum(weight * clamp(getattr(scores, name)) for name, weight in WEIGHTS.items())


def combine(scores: ScoreBreakdown) -> float:
    """Final score of a breakdown: weighted sum scaled down by the noise penalty."""
    return weighted_sum(scores) * (1.0 - clamp(scores.noise_score) * NOISE_PENALTY)


class ScoringEngine:
    """
    Scores and ranks main-content candidates.

    Args:
        noise_classifier: Source of the noise penalty; defaults to the
            accumulate-all policy
        min_content_score: Score the winner must reach to be trusted
    """

    def __init__(
        self,
        noise_classifier: Optional[NoiseClassifier] = None,
        min_content_score: float = 0.6,
    ) -> None:
        self.noise_classifier = noise_classifier or NoiseClassifier()
        self.min_content_score = min_content_score

    def breakdown(self, node: DocumentNode) -> ScoreBreakdown:
        """Compute every sub-score of ``node``."""
        features = CandidateFeatures.from_node(node)
        document = node.document
        return ScoreBreakdown(
            text_quality=text_quality(features),
            content_density=content_density(features),
            article_structure=article_structure(features),
            semantic_score=semantic_score(node),
            position_score=position_score(node.box, document.viewport),
            metadata_score=metadata_score(features, document),
            noise_score=self.noise_classifier.score(node, text=features.text, link_count=features.link_count),
        )

    def score(self, candidate: Candidate) -> float:
        """Score a candidate once; later calls reuse the stored breakdown."""
        if candidate.scores is None:
            candidate.scores = self.breakdown(candidate.node)
            logger.debug(
                "candidate_scored",
                candidate=candidate.describe(),
                source=candidate.source.value,
                **{k: round(v, 3) for k, v in candidate.scores.as_dict().items()},
            )
        return candidate.scores.final_score

    def rank(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        """
        Candidates ordered best first.

        Ties keep discovery order, so selector matches outrank density
        expansion on equal scores.
        """
        ranked = list(candidates)
        for candidate in ranked:
            self.score(candidate)
        ranked.sort(key=lambda c: (-c.final_score, c.order))
        return ranked

    def passes(self, candidate: Candidate) -> bool:
        return self.score(candidate) >= self.min_content_score
