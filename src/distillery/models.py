"""
Data models for extraction results.

Content chunks form a tagged union: every variant is a frozen dataclass with
a literal ``kind`` tag, so renderers can dispatch exhaustively on the type.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Tuple, Union

if TYPE_CHECKING:
    from .dom.document import DocumentNode


# --- Content chunks ---


@dataclass(slots=True, frozen=True)
class HeadingChunk:
    """A heading (h1-h6) with the chain of ancestor headings above it."""

    level: int
    text: str
    breadcrumb: Tuple[str, ...] = ()
    kind: Literal["heading"] = field(default="heading", init=False)

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError("Heading level must be between 1 and 6")


@dataclass(slots=True, frozen=True)
class ParagraphChunk:
    text: str
    kind: Literal["paragraph"] = field(default="paragraph", init=False)


@dataclass(slots=True, frozen=True)
class ListChunk:
    ordered: bool
    items: Tuple[str, ...]
    kind: Literal["list"] = field(default="list", init=False)


@dataclass(slots=True, frozen=True)
class CodeChunk:
    """A preformatted code block; ``code`` keeps its internal whitespace."""

    lang: str
    code: str
    kind: Literal["code"] = field(default="code", init=False)


@dataclass(slots=True, frozen=True)
class BlockquoteChunk:
    text: str
    kind: Literal["blockquote"] = field(default="blockquote", init=False)


@dataclass(slots=True, frozen=True)
class TableChunk:
    rows: Tuple[Tuple[str, ...], ...]
    kind: Literal["table"] = field(default="table", init=False)


ContentChunk = Union[HeadingChunk, ParagraphChunk, ListChunk, CodeChunk, BlockquoteChunk, TableChunk]

CHUNK_KINDS: Tuple[str, ...] = ("heading", "paragraph", "list", "code", "blockquote", "table")


def chunk_to_dict(chunk: ContentChunk) -> Dict[str, Any]:
    """Serialize a chunk to a JSON-friendly dict with its ``type`` tag first."""
    data = asdict(chunk)
    kind = data.pop("kind")
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = [list(v) if isinstance(v, tuple) else v for v in value]
    return {"type": kind, **data}


# --- Extraction context ---


@dataclass(slots=True, frozen=True)
class HeadingCrumb:
    level: int
    text: str


@dataclass(slots=True, frozen=True)
class ExtractionContext:
    """Metadata captured once per extraction."""

    url: str
    title: str
    timestamp: str
    selection_excerpt: Optional[str] = None
    breadcrumbs: Tuple[HeadingCrumb, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "timestamp": self.timestamp,
            "selection_excerpt": self.selection_excerpt,
            "breadcrumbs": [{"level": b.level, "text": b.text} for b in self.breadcrumbs],
        }


# --- Candidates and scores ---


class CandidateSource(Enum):
    """Heuristic that proposed a candidate, in tie-break priority order."""

    SELECTOR = "selector-match"
    DENSITY_EXPANSION = "density-expansion"
    BODY_FALLBACK = "body-fallback"


@dataclass(slots=True, frozen=True)
class ScoreBreakdown:
    """Per-candidate sub-scores, each in [0, 1]."""

    text_quality: float = 0.0
    content_density: float = 0.0
    article_structure: float = 0.0
    semantic_score: float = 0.0
    position_score: float = 0.0
    metadata_score: float = 0.0
    noise_score: float = 0.0

    @property
    def weighted_sum(self) -> float:
        from .scoring.engine import weighted_sum

        return weighted_sum(self)

    @property
    def final_score(self) -> float:
        from .scoring.engine import combine

        return combine(self)

    def as_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["final_score"] = self.final_score
        return data


@dataclass(slots=True)
class Candidate:
    """A proposed main-content root. Scored once, then discarded."""

    node: DocumentNode
    source: CandidateSource
    order: int
    text_length: int
    scores: Optional[ScoreBreakdown] = None

    @property
    def final_score(self) -> float:
        return self.scores.final_score if self.scores else 0.0

    def describe(self) -> str:
        """Short human-readable locator such as ``article#main.post``."""
        node = self.node
        label = node.tag
        if node.id:
            label += f"#{node.id}"
        if node.classes:
            label += "." + ".".join(node.classes[:3])
        return label


# --- Pipeline output ---


class ExtractionTier(Enum):
    """Fallback tier that produced a result, from most to least confident."""

    ENHANCED = "enhanced"
    SIMPLIFIED = "simplified"
    BASIC = "basic"
    EMERGENCY = "emergency"


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Result of one extraction call. Empty ``text`` means extraction failed."""

    text: str
    chunks: Tuple[ContentChunk, ...]
    context: ExtractionContext
    tier: ExtractionTier
    scores: Optional[ScoreBreakdown] = None

    @property
    def ok(self) -> bool:
        return bool(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "chunks": [chunk_to_dict(c) for c in self.chunks],
            "context": self.context.to_dict(),
            "tier": self.tier.value,
            "scores": self.scores.as_dict() if self.scores else None,
        }
