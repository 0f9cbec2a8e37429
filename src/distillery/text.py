"""
Text normalization helpers shared by the chunker, scorer and renderer.
"""

from __future__ import annotations

import re

_TRIPLE_NEWLINES = re.compile(r"\n{3,}")
_SPACE_RUNS = re.compile(r"[ \u00a0]{2,}")
_ANY_WHITESPACE = re.compile(r"\s+")


def clean_inline(text: str) -> str:
    """
    Normalize extracted inline text.

    Strips carriage returns, turns tabs into spaces, strips trailing
    whitespace on every line, collapses 3+ newlines to exactly 2, collapses
    runs of spaces/non-breaking spaces to one space and trims the result.
    """
    if not text:
        return ""
    cleaned = text.replace("\r", "").replace("\t", " ")
    cleaned = "\n".join(line.rstrip() for line in cleaned.split("\n"))
    cleaned = _TRIPLE_NEWLINES.sub("\n\n", cleaned)
    cleaned = _SPACE_RUNS.sub(" ", cleaned)
    return cleaned.strip()


def collapse_whitespace(text: str) -> str:
    return _ANY_WHITESPACE.sub(" ", text or "").strip()


def truncate_inline(text: str, limit: int) -> str:
    """Collapse whitespace and cut to ``limit`` chars, ending with an ellipsis."""
    flat = collapse_whitespace(text)
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1] + "…"
