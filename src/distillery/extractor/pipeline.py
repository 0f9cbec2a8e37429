"""
Extraction Pipeline - Tiered Main-Content Extraction

Runs the extraction core with graceful degradation. Each tier either
produces chunks or raises a ``DistilleryError`` that hands control to the
next one:

1. ENHANCED: exhaustive candidates, noise filtering, full scoring with a
   confidence threshold, boundary detection
2. SIMPLIFIED: the single selector/density candidate, no boundary
   detection, accepted on text length alone
3. BASIC: candidates ranked by semantic score and noise penalty only
4. EMERGENCY: truncated body text as one paragraph

The public ``extract()`` never raises for content reasons; an empty
``text`` in the result means every tier came up empty.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

import structlog

from ..config.config import ExtractionConfig
from ..dom.document import Document, DocumentNode
from ..errors import BelowConfidenceThreshold, DistilleryError, NoCandidateFound
from ..models import (
    Candidate,
    ContentChunk,
    ExtractionContext,
    ExtractionResult,
    ExtractionTier,
    HeadingCrumb,
    ParagraphChunk,
    ScoreBreakdown,
)
from ..render.boilerplate import BoilerplateFilter
from ..render.markdown import MarkdownRenderer
from ..scoring.engine import NOISE_PENALTY, ScoringEngine
from ..scoring.noise import NoiseClassifier
from ..text import clean_inline, collapse_whitespace, truncate_inline
from .boundary import BoundaryDetector
from .candidates import CandidateCollector
from .chunker import SemanticChunker

logger = structlog.get_logger(__name__)

SELECTION_EXCERPT_LIMIT = 300

TierOutcome = Tuple[List[ContentChunk], Optional[ScoreBreakdown]]
ConfigLike = Union[ExtractionConfig, Mapping[str, Any], None]


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds, e.g. ``2024-01-15T10:00:00.000Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_context(document: Document) -> ExtractionContext:
    """Metadata header for one extraction of ``document``."""
    excerpt = None
    selection = document.selection
    if selection is not None and selection.active:
        excerpt = truncate_inline(selection.text, SELECTION_EXCERPT_LIMIT)

    crumbs = []
    for heading in document.soup.find_all(["h1", "h2"]):
        text = collapse_whitespace(heading.get_text())
        if text:
            crumbs.append(HeadingCrumb(level=int(heading.name[1]), text=text))

    return ExtractionContext(
        url=document.url,
        title=document.title,
        timestamp=format_timestamp(document.captured_at),
        selection_excerpt=excerpt,
        breadcrumbs=tuple(crumbs),
    )


def resolve_target(target: Union[Document, DocumentNode]) -> Tuple[Document, DocumentNode]:
    if isinstance(target, Document):
        return target, target.root
    if isinstance(target, DocumentNode):
        return target.document, target
    raise TypeError(f"extract() needs a Document or DocumentNode, got {type(target).__name__}")


class Extractor:
    """
    One configured extraction core. Holds no per-document state, so an
    instance can be reused for any number of documents.
    """

    def __init__(self, config: ConfigLike = None) -> None:
        self.config = ExtractionConfig.coerce(config)
        self.noise = NoiseClassifier(self.config.noise_policy)
        self.engine = ScoringEngine(self.noise, self.config.effective_min_content_score)
        self.collector = CandidateCollector()
        self.chunker = SemanticChunker()
        self.boundary = BoundaryDetector()
        self.renderer = MarkdownRenderer(
            include=self.config.include,
            boilerplate=BoilerplateFilter(self.config.filter_rules()),
        )

    def extract(self, target: Union[Document, DocumentNode]) -> ExtractionResult:
        document, root = resolve_target(target)
        context = build_context(document)

        tiers: List[Tuple[ExtractionTier, Callable[[Document, DocumentNode], TierOutcome]]] = [
            (ExtractionTier.ENHANCED, self._enhanced),
            (ExtractionTier.SIMPLIFIED, self._simplified),
            (ExtractionTier.BASIC, self._basic),
            (ExtractionTier.EMERGENCY, self._emergency),
        ]

        chunks: List[ContentChunk] = []
        scores: Optional[ScoreBreakdown] = None
        tier = ExtractionTier.EMERGENCY
        for tier, run in tiers:
            try:
                chunks, scores = run(document, root)
                break
            except DistilleryError as e:
                logger.info("extraction_tier_fallback", tier=tier.value, reason=str(e))
            except Exception as e:
                logger.warning("extraction_tier_error", tier=tier.value, error=str(e), exc_info=True)

        text = self.renderer.render(chunks, context) if chunks else ""
        logger.debug("extraction_complete", tier=tier.value, chunks=len(chunks), length=len(text))
        return ExtractionResult(text=text, chunks=tuple(chunks), context=context, tier=tier, scores=scores)

    # --- tiers ---

    def _enhanced(self, document: Document, root: DocumentNode) -> TierOutcome:
        candidates = self.collector.collect(root, exhaustive=self.config.enable_semantic_analysis)
        if self.config.enable_noise_filtering:
            candidates = self._drop_noisy(candidates)
        if not candidates:
            raise NoCandidateFound("every candidate exceeded the noise threshold")

        best = self.engine.rank(candidates)[0]
        threshold = self.config.effective_min_content_score
        if best.final_score < threshold:
            raise BelowConfidenceThreshold(best.final_score, threshold)

        chunks = self.chunker.chunk(self._chunk_root(document, best.node))
        if self.config.enable_boundary_detection:
            chunks = self.boundary.apply(chunks)
        if not chunks:
            raise NoCandidateFound("winning candidate produced no chunks")
        return chunks, best.scores

    def _simplified(self, document: Document, root: DocumentNode) -> TierOutcome:
        candidate = self.collector.collect(root)[0]
        if candidate.text_length <= self.config.simplified_min_length:
            raise NoCandidateFound(
                f"best candidate has {candidate.text_length} chars, needs more than {self.config.simplified_min_length}"
            )
        chunks = self.chunker.chunk(self._chunk_root(document, candidate.node))
        if not chunks:
            raise NoCandidateFound("simplified candidate produced no chunks")
        self.engine.score(candidate)
        return chunks, candidate.scores

    def _basic(self, document: Document, root: DocumentNode) -> TierOutcome:
        threshold = self.config.effective_noise_threshold
        candidates = [c for c in self.collector.collect(root, exhaustive=True) if c.text_length > 0]
        for candidate in candidates:
            self.engine.score(candidate)
        remaining = [c for c in candidates if c.scores is not None and c.scores.noise_score <= threshold]

        def basic_score(candidate: Candidate) -> float:
            scores = candidate.scores
            assert scores is not None
            return scores.semantic_score * (1.0 - scores.noise_score * NOISE_PENALTY)

        remaining.sort(key=lambda c: (-basic_score(c), -c.text_length, c.order))
        for candidate in remaining:
            chunks = self.chunker.chunk(self._chunk_root(document, candidate.node))
            if chunks:
                return chunks, candidate.scores
        raise NoCandidateFound("no candidate below the noise threshold produced chunks")

    def _emergency(self, document: Document, root: DocumentNode) -> TierOutcome:
        text = clean_inline(root.inner_text())[: self.config.fallback_char_limit].rstrip()
        if not text:
            raise NoCandidateFound("document has no visible text")
        return [ParagraphChunk(text=text)], None

    # --- helpers ---

    def _drop_noisy(self, candidates: List[Candidate]) -> List[Candidate]:
        threshold = self.config.effective_noise_threshold
        kept = []
        for candidate in candidates:
            self.engine.score(candidate)
            assert candidate.scores is not None
            if candidate.scores.noise_score > threshold:
                logger.debug(
                    "candidate_dropped_as_noise",
                    candidate=candidate.describe(),
                    noise=round(candidate.scores.noise_score, 3),
                    threshold=threshold,
                )
                continue
            kept.append(candidate)
        return kept

    def _chunk_root(self, document: Document, node: DocumentNode) -> DocumentNode:
        selection = document.selection
        if (
            self.config.prefer_selection
            and selection is not None
            and selection.active
            and selection.container is not None
        ):
            return selection.container
        return node


def extract(target: Union[Document, DocumentNode], config: ConfigLike = None) -> ExtractionResult:
    """
    Extract the main content of a document.

    Args:
        target: A parsed ``Document`` (its body is used) or any node in one
        config: ``ExtractionConfig``, a mapping of options (snake_case or
            camelCase keys) or None for balanced defaults

    Returns:
        ``ExtractionResult`` with rendered text, chunks and context. Empty
        ``text`` means extraction failed.
    """
    return Extractor(config).extract(target)
