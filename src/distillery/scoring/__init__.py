"""
Candidate scoring: weighted sub-scores, noise classification and ranking.
"""

from .components import check_heading_hierarchy
from .engine import WEIGHTS, ScoringEngine, combine, weighted_sum
from .noise import NOISE_CATEGORIES, NoiseClassifier, NoiseExplanation, NoisePolicy

__all__ = [
    "NOISE_CATEGORIES",
    "NoiseClassifier",
    "NoiseExplanation",
    "NoisePolicy",
    "ScoringEngine",
    "WEIGHTS",
    "check_heading_hierarchy",
    "combine",
    "weighted_sum",
]
