"""
Noise Classifier - Boilerplate Likelihood for a Subtree

Estimates how likely a node is page chrome (recommendation rails, ads,
share widgets, menus, banners) rather than article prose. The score is
additive over independent signals and capped at 1.0:

- class/id matches a noise category
- visible text opens with a boilerplate lead-in phrase (+0.4)
- more than 0.5 links per 100 characters of text (+0.3)
- less than 100 characters of text (+0.2)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Pattern, Tuple

import structlog

from ..dom.document import DocumentNode
from ..dom.walker import REJECTED_TAGS, DocumentWalker
from ..text import collapse_whitespace

logger = structlog.get_logger(__name__)

LEAD_PHRASE_WEIGHT = 0.4
LINK_DENSITY_WEIGHT = 0.3
SHORT_TEXT_WEIGHT = 0.2
FIRST_MATCH_WEIGHT = 0.3

LINK_DENSITY_LIMIT = 0.5  # links per 100 characters
SHORT_TEXT_LIMIT = 100


class NoisePolicy(str, Enum):
    """How class/id category matches add up."""

    ACCUMULATE = "accumulate"
    FIRST_MATCH = "first-match"


@dataclass(frozen=True)
class NoiseCategory:
    name: str
    pattern: Pattern[str]
    weight: float


NOISE_CATEGORIES: Tuple[NoiseCategory, ...] = (
    NoiseCategory("recommendation", re.compile(r"trending|popular|related|recommend"), 0.3),
    NoiseCategory(
        "sidebar",
        re.compile(r"sidebar|aside|widget|advert|sponsor|(?<![a-z])ads?(?![a-z])"),
        0.3,
    ),
    NoiseCategory("social", re.compile(r"social|share|comment|newsletter"), 0.25),
    NoiseCategory(
        "navigation",
        re.compile(r"navigation|(?<![a-z])nav(?![a-z])|navbar|menu|breadcrumb"),
        0.3,
    ),
    NoiseCategory("chrome", re.compile(r"footer|header|banner|promo"), 0.2),
)

LEAD_PHRASES: Pattern[str] = re.compile(
    r"^(?:trending|advertisement|advertising|sponsored|promoted|subscribe|sign up|"
    r"follow us|share this|most popular|most read|recommended for you|you might also like|"
    r"read next|we use cookies)\b",
    re.IGNORECASE,
)


@dataclass
class NoiseExplanation:
    """Per-signal breakdown of one noise score."""

    categories: Tuple[str, ...] = ()
    lead_phrase: Optional[str] = None
    links_per_100_chars: float = 0.0
    text_length: int = 0
    signals: Dict[str, float] = field(default_factory=dict)

    @property
    def score(self) -> float:
        return min(1.0, sum(self.signals.values()))


class NoiseClassifier:
    """
    Scores nodes for boilerplate likelihood.

    Args:
        policy: ``ACCUMULATE`` sums the weight of every matching category;
            ``FIRST_MATCH`` adds a flat 0.3 for the first one only
    """

    def __init__(self, policy: NoisePolicy = NoisePolicy.ACCUMULATE) -> None:
        self.policy = NoisePolicy(policy)

    def score(self, node: DocumentNode, *, text: Optional[str] = None, link_count: Optional[int] = None) -> float:
        """
        Noise score of ``node`` in [0, 1].

        ``text`` and ``link_count`` may be passed when the caller already
        computed them for the same node.
        """
        return self.explain(node, text=text, link_count=link_count).score

    def explain(
        self, node: DocumentNode, *, text: Optional[str] = None, link_count: Optional[int] = None
    ) -> NoiseExplanation:
        if text is None:
            text = node.inner_text(exclude=REJECTED_TAGS)
        text = collapse_whitespace(text)
        if link_count is None:
            link_count = self._count_links(node)

        explanation = NoiseExplanation(text_length=len(text))
        signals = explanation.signals

        marker = " ".join(part for part in (" ".join(node.classes), node.id) if part).lower()
        if marker:
            matched = tuple(c.name for c in NOISE_CATEGORIES if c.pattern.search(marker))
            explanation.categories = matched
            if matched:
                if self.policy is NoisePolicy.FIRST_MATCH:
                    signals[f"category:{matched[0]}"] = FIRST_MATCH_WEIGHT
                else:
                    weights = {c.name: c.weight for c in NOISE_CATEGORIES}
                    for name in matched:
                        signals[f"category:{name}"] = weights[name]

        lead = LEAD_PHRASES.match(text)
        if lead:
            explanation.lead_phrase = lead.group(0)
            signals["lead_phrase"] = LEAD_PHRASE_WEIGHT

        if text:
            explanation.links_per_100_chars = link_count * 100.0 / len(text)
        elif link_count:
            explanation.links_per_100_chars = float("inf")
        if explanation.links_per_100_chars > LINK_DENSITY_LIMIT:
            signals["link_density"] = LINK_DENSITY_WEIGHT

        if len(text) < SHORT_TEXT_LIMIT:
            signals["short_text"] = SHORT_TEXT_WEIGHT

        logger.debug(
            "noise_scored",
            node=node.tag,
            policy=self.policy.value,
            signals=dict(signals),
            score=round(explanation.score, 3),
        )
        return explanation

    @staticmethod
    def _count_links(node: DocumentNode) -> int:
        return sum(1 for child in DocumentWalker(node) if child.tag == "a")
