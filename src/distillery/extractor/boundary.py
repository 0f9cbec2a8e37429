"""
Boundary detection over a chunk sequence.

Finds where the article ends and page furniture begins (related stories,
comment threads, newsletter prompts, legal lines) and drops those chunks.
Works on the immutable chunk list, never on the document.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Sequence

import structlog

from ..models import ContentChunk, HeadingChunk, ParagraphChunk

logger = structlog.get_logger(__name__)

BOUNDARY_HEADINGS: Pattern[str] = re.compile(
    r"^(?:related(?:\s+(?:articles|stories|content|posts|coverage|topics))?|recommended(?:\s+for\s+you)?|"
    r"more\s+(?:stories|from\b.*|in\b.*|on\b.*)|you\s+(?:might|may)\s+also\s+like|read\s+(?:next|more)|"
    r"(?:reader\s+)?comments?|leave\s+a\s+(?:reply|comment)|join\s+the\s+discussion|"
    r"(?:sign\s+up|subscribe)(?:\s+(?:for|to)\b.*)?|newsletter|trending(?:\s+(?:now|stories|in\b.*))?|"
    r"most\s+(?:popular|read)|popular(?:\s+(?:now|stories|posts|articles))?|up\s+next|what\s+to\s+read\s+next|editor['’]s\s+picks|"
    r"share\s+this(?:\s+article)?|about\s+the\s+author)\s*:?$",
    re.IGNORECASE,
)

TERMINAL_MARKERS: Pattern[str] = re.compile(
    r"^(?:copyright\b|all\s+rights\s+reserved|©\s*\d{4}|\(c\)\s*\d{4})|\ball\s+rights\s+reserved\.?$",
    re.IGNORECASE,
)


class BoundaryDetector:
    """
    Drops boilerplate sections from a chunk sequence.

    A heading whose text is a boundary phrase removes itself and every chunk
    up to the next heading of the same or higher level. A paragraph that is
    a copyright or rights line truncates everything from it onward.
    """

    def __init__(
        self,
        headings: Pattern[str] = BOUNDARY_HEADINGS,
        terminal: Pattern[str] = TERMINAL_MARKERS,
    ) -> None:
        self.headings = headings
        self.terminal = terminal

    def is_boundary_heading(self, chunk: ContentChunk) -> bool:
        return isinstance(chunk, HeadingChunk) and bool(self.headings.match(chunk.text.strip()))

    def is_terminal(self, chunk: ContentChunk) -> bool:
        return isinstance(chunk, ParagraphChunk) and bool(self.terminal.search(chunk.text.strip()))

    def apply(self, chunks: Sequence[ContentChunk]) -> List[ContentChunk]:
        kept: List[ContentChunk] = []
        skip_level = 0  # level of the boundary heading being skipped, 0 when not skipping
        dropped = 0

        for index, chunk in enumerate(chunks):
            if skip_level:
                if isinstance(chunk, HeadingChunk) and chunk.level <= skip_level:
                    skip_level = 0
                else:
                    dropped += 1
                    continue

            if self.is_boundary_heading(chunk):
                skip_level = chunk.level  # type: ignore[union-attr]
                dropped += 1
                continue

            if self.is_terminal(chunk):
                dropped += len(chunks) - index
                break

            kept.append(chunk)

        if dropped:
            logger.debug("boundary_trimmed", dropped=dropped, kept=len(kept))
        return kept
