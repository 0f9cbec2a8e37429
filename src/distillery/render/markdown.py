"""
Markdown rendering of extracted chunks.

Output layout::

    ---
    url: https://example.com/post
    title: Example
    timestamp: 2024-01-15T10:00:00.000Z
    selection_excerpt: ...        (only with an active selection)
    breadcrumbs: # Title | ## Part (only when there are h1/h2 headings)
    ---
    # Title

    First paragraph.

The header field names are literal and always come first.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

import structlog

from ..models import (
    CHUNK_KINDS,
    BlockquoteChunk,
    CodeChunk,
    ContentChunk,
    ExtractionContext,
    HeadingChunk,
    ListChunk,
    ParagraphChunk,
    TableChunk,
)
from .boilerplate import BoilerplateFilter

logger = structlog.get_logger(__name__)

HEADER_DELIMITER = "---"


def render_header(context: ExtractionContext) -> str:
    lines = [
        HEADER_DELIMITER,
        f"url: {context.url}",
        f"title: {context.title}",
        f"timestamp: {context.timestamp}",
    ]
    if context.selection_excerpt:
        lines.append(f"selection_excerpt: {context.selection_excerpt}")
    if context.breadcrumbs:
        crumbs = " | ".join(("# " if b.level == 1 else "## ") + b.text for b in context.breadcrumbs)
        lines.append(f"breadcrumbs: {crumbs}")
    lines.append(HEADER_DELIMITER)
    return "\n".join(lines) + "\n"


def render_chunk(chunk: ContentChunk) -> List[str]:
    """Markdown lines for one chunk."""
    if isinstance(chunk, HeadingChunk):
        return [f"{'#' * min(6, chunk.level)} {chunk.text}"]
    if isinstance(chunk, ParagraphChunk):
        return [chunk.text]
    if isinstance(chunk, ListChunk):
        if chunk.ordered:
            return [f"{i}. {item}" for i, item in enumerate(chunk.items, start=1)]
        return [f"- {item}" for item in chunk.items]
    if isinstance(chunk, CodeChunk):
        return [f"```{chunk.lang}", chunk.code, "```"]
    if isinstance(chunk, BlockquoteChunk):
        return [f"> {line}" for line in chunk.text.split("\n")]
    if isinstance(chunk, TableChunk):
        lines = []
        for index, row in enumerate(chunk.rows):
            lines.append(f"| {' | '.join(row)} |")
            if index == 0 and len(chunk.rows) > 1:
                lines.append(f"| {' | '.join('---' for _ in row)} |")
        return lines
    raise TypeError(f"Unknown chunk type: {type(chunk).__name__}")


class MarkdownRenderer:
    """
    Serializes chunks and context into the markdown output format.

    Args:
        include: Per-kind toggles (``{"table": False}``); kinds not named
            stay enabled
        boilerplate: Filter applied to the body; None renders unfiltered
    """

    def __init__(
        self,
        include: Optional[Mapping[str, bool]] = None,
        boilerplate: Optional[BoilerplateFilter] = None,
    ) -> None:
        self.include: Dict[str, bool] = {kind: True for kind in CHUNK_KINDS}
        if include:
            unknown = set(include) - set(CHUNK_KINDS)
            if unknown:
                raise ValueError(f"Unknown chunk kinds: {sorted(unknown)}")
            self.include.update(include)
        self.boilerplate = boilerplate

    def render_body(self, chunks: Sequence[ContentChunk]) -> str:
        lines: List[str] = []
        for chunk in chunks:
            if not self.include[chunk.kind]:
                continue
            lines.extend(render_chunk(chunk))
            lines.append("")
        return "\n".join(lines).strip() + "\n"

    def render(self, chunks: Sequence[ContentChunk], context: ExtractionContext) -> str:
        body = self.render_body(chunks)
        if self.boilerplate is not None:
            body = self.boilerplate.apply(body)
        return render_header(context) + body
