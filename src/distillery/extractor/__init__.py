"""
Main-content extraction: candidate collection, chunking, boundary
trimming and the tiered pipeline that ties them together.
"""

from .boundary import BoundaryDetector
from .candidates import CONTENT_SELECTORS, CandidateCollector, filtered_text_length
from .chunker import BLOCK_TAGS, SemanticChunker, detect_code_language
from .pipeline import Extractor, build_context, extract

__all__ = [
    "BLOCK_TAGS",
    "BoundaryDetector",
    "CONTENT_SELECTORS",
    "CandidateCollector",
    "Extractor",
    "SemanticChunker",
    "build_context",
    "detect_code_language",
    "extract",
    "filtered_text_length",
]
