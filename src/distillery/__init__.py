"""
distillery - main-content extraction from HTML pages into clean markdown.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ExtractionConfig, ExtractionMode
from .dom import Document, DocumentNode
from .errors import DistilleryError
from .extractor import Extractor, extract
from .models import (
    BlockquoteChunk,
    CodeChunk,
    ContentChunk,
    ExtractionContext,
    ExtractionResult,
    ExtractionTier,
    HeadingChunk,
    ListChunk,
    ParagraphChunk,
    TableChunk,
)
from .render import DEFAULT_FILTER_KEYWORDS, filter_markdown
from .scoring import NoiseClassifier, ScoringEngine

__all__ = [
    "__version__",
    "BlockquoteChunk",
    "CodeChunk",
    "ContentChunk",
    "DEFAULT_FILTER_KEYWORDS",
    "DistilleryError",
    "Document",
    "DocumentNode",
    "ExtractionConfig",
    "ExtractionContext",
    "ExtractionMode",
    "ExtractionResult",
    "ExtractionTier",
    "Extractor",
    "HeadingChunk",
    "ListChunk",
    "NoiseClassifier",
    "ParagraphChunk",
    "ScoringEngine",
    "TableChunk",
    "extract",
    "filter_markdown",
]
