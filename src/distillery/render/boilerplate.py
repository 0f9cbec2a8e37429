"""
Boilerplate Filter - Pattern-Based Cleanup of Rendered Markdown

A second-pass safety net that runs on the rendered text, catching
boilerplate that looked like ordinary headings and paragraphs to the
chunker. Passes, in order:

1. one section regex per filter keyword (H1/H2 boundary, so nested
   ###/#### subsections go with their parent)
2. standalone runs of three or more markdown link-list lines
3. a footer or legal block at the end of the text
4. any ``##`` recommendation section left over
5. orphaned recommendation headings with no body, repeated until nothing
   changes (at most ``MAX_SWEEPS`` passes)

followed by blank-line normalization.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Union

import structlog

from .rules import FilterRuleSet

logger = structlog.get_logger(__name__)

MAX_SWEEPS = 10

LINK_LIST: Pattern[str] = re.compile(r"\n(?:[ \t]*[-*][ \t]*\[[^\]\n]+\]\([^)\n]+\)[ \t]*\n?){3,}\n?")

LEGAL_FOOTER: Pattern[str] = re.compile(
    r"\n\n(?:\*\*Note\*\*|Disclaimer|Copyright|All rights reserved|Privacy Policy|Terms of Use"
    r"|[^\n]+ © \d{4}|© \d{4} [^\n]+)[\s\S]*\Z",
    re.IGNORECASE,
)

_RECOMMENDATION_LABELS = (
    r"Related(?:\s+Content)?"
    r"|Editor['’]s\s+Picks"
    r"|Trending(?:\s+in\s+[^\n]+)?"
    r"|More\s+in\s+[^\n]+"
    r"|More\s+from\s+[^\n]+"
    r"|Recommended"
    r"|Popular"
)

RECOMMENDATION_SECTION: Pattern[str] = re.compile(
    r"(?:\A|\n)##[ \t]*(?:" + _RECOMMENDATION_LABELS + r")[^\n]*\n[\s\S]*?(?=^#{1,2}\s|\Z)",
    re.IGNORECASE | re.MULTILINE,
)

ORPHAN_HEADING: Pattern[str] = re.compile(
    r"(?:\A|\n)#{2,4}[ \t]*(?:" + _RECOMMENDATION_LABELS + r")[ \t]*(?=\n(?:#{1,6}\s|\Z)|\Z)",
    re.IGNORECASE,
)

_BLANK_WITH_SPACES = re.compile(r"\n[ \t]+(?=\n)")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")

RulesLike = Union[FilterRuleSet, str, Iterable[str], None]


class BoilerplateFilter:
    """
    Removes boilerplate sections from rendered markdown.

    Args:
        rules: A ``FilterRuleSet``, newline-delimited rule text, a list of
            keywords, or None for the built-in defaults
    """

    def __init__(self, rules: RulesLike = None) -> None:
        self.rules = FilterRuleSet.coerce(rules)
        self._patterns = self.rules.compiled()

    def apply(self, markdown: str) -> str:
        content = markdown

        for rule, pattern in self._patterns:
            content, count = pattern.subn("\n\n", content)
            if count:
                logger.debug("boilerplate_section_removed", rule=rule.keyword, count=count)

        content = LINK_LIST.sub("\n\n", content)
        content = LEGAL_FOOTER.sub("\n\n", content)
        content = RECOMMENDATION_SECTION.sub("\n", content)
        content = self.sweep_orphan_headings(content)
        return normalize_blank_lines(content)

    @staticmethod
    def sweep_orphan_headings(content: str) -> str:
        """Drop body-less recommendation headings until a fixed point, bounded."""
        for _ in range(MAX_SWEEPS):
            swept = ORPHAN_HEADING.sub("\n", content)
            if swept == content:
                return content
            content = swept
        logger.warning("orphan_sweep_not_converged", passes=MAX_SWEEPS)
        return content


def normalize_blank_lines(content: str) -> str:
    """Whitespace-only lines emptied, 3+ newlines collapsed, trimmed, one trailing newline."""
    content = _BLANK_WITH_SPACES.sub("\n", content)
    content = _EXTRA_NEWLINES.sub("\n\n", content)
    return content.strip() + "\n"


def filter_markdown(markdown: str, rules: RulesLike = None) -> str:
    """Filter ``markdown`` with ``rules`` (defaults when None or empty)."""
    return BoilerplateFilter(rules).apply(markdown)
