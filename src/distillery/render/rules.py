"""
Boilerplate filter rules.

A rule set is an ordered list of keywords naming sections to strip from
rendered markdown ("Related Articles", "Leave a Reply", ...). User rule text
is newline-delimited; blank lines and ``#`` comment lines are ignored and an
empty result falls back to the built-in defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Tuple

import structlog

from ..errors import MalformedFilterRule

logger = structlog.get_logger(__name__)

DEFAULT_FILTER_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "recommendations": (
        "Read More",
        "Read Next",
        "Also Read",
        "Related",
        "Related Articles",
        "Related Content",
        "Related Stories",
        "Further Reading",
        "More from",
        "More in",
        "Don't Miss",
        "Up Next",
        "Recommended",
        "Trending",
        "Popular",
        "In Case You Missed It",
        "You Might Also Like",
        "Continue Reading",
        "More Stories",
        "Latest News",
        "Editor's Picks",
        "What to Read Next",
    ),
    "social": (
        "Share this article",
        "Follow us on",
        "Connect with us",
        "Join our newsletter",
        "Sign up for updates",
        "Enter your email",
        "Subscribe to our newsletter",
        "Get the latest updates",
        "Don't miss out",
    ),
    "comments": (
        "Comments",
        "Discussions",
        "Leave a Reply",
        "Add Your Comment",
        "Reader Comments",
    ),
    "author_bio": (
        "About the Author",
        "Author Bio",
    ),
    "tags": (
        "Tags",
        "Categories",
        "Filed Under",
    ),
    "legal": (
        "Disclaimer",
        "Copyright",
        "All rights reserved",
        "Privacy Policy",
        "Terms of Use",
    ),
}

DEFAULT_FILTER_KEYWORDS: Tuple[str, ...] = tuple(
    keyword for keywords in DEFAULT_FILTER_CATEGORIES.values() for keyword in keywords
)

COMMENT_PREFIX = "#"
RAW_PREFIX = "re:"

# Line starting a level-1/2 heading, a horizontal rule line or end of text.
# Nested ###/#### headings are not boundaries, so they go with their parent
# section. Needs re.MULTILINE.
SECTION_BOUNDARY = r"(?=^#{1,2} |^(?:---|\*\*\*)[ \t]*$|\Z)"

_APOSTROPHES = re.compile(r"['’]")


def keyword_fragment(keyword: str) -> str:
    """Regex fragment matching ``keyword`` literally, either apostrophe style."""
    return _APOSTROPHES.sub("['’]", re.escape(keyword))


def section_pattern(fragment: str) -> str:
    """
    Full section regex for one keyword fragment.

    Matches start-of-text or one or two newlines, optional heading or bold
    markup, the keyword, a short trailing label on the same line, an
    optional colon, the newline, and everything up to the next section
    boundary. A label right after ``Keyword:`` may hold any text
    (``**Tags:** rivers, farming.``); otherwise it carries no sentence
    punctuation, so prose lines that open with the keyword are kept.
    """
    return (
        r"(?:\A|\n{1,2})[ \t]*(?:#{1,6}[ \t]*|\*\*)?[ \t]*"
        rf"(?:{fragment})(?!\w)"
        r"(?:(?:\*\*)?[ \t]*:(?:\*\*)?[^\n]{0,80}?|[^\n.!?]{0,80}?)"
        r"(?:\*\*)?[ \t]*:?[ \t]*\n"
        r"[\s\S]*?" + SECTION_BOUNDARY
    )


@dataclass(frozen=True)
class FilterRule:
    """One keyword rule; ``raw`` rules use their text as a regex fragment."""

    keyword: str
    raw: bool = False

    @classmethod
    def from_line(cls, line: str) -> FilterRule:
        text = line.strip()
        if text.lower().startswith(RAW_PREFIX):
            return cls(keyword=text[len(RAW_PREFIX):].strip(), raw=True)
        return cls(keyword=text)

    @property
    def fragment(self) -> str:
        return self.keyword if self.raw else keyword_fragment(self.keyword)

    def compile(self) -> Pattern[str]:
        """Compile the section regex; raises ``MalformedFilterRule`` on bad input."""
        if not self.keyword:
            raise MalformedFilterRule(self.keyword, "empty pattern")
        try:
            return re.compile(section_pattern(self.fragment), re.IGNORECASE | re.MULTILINE)
        except re.error as e:
            raise MalformedFilterRule(self.keyword, str(e)) from e


class FilterRuleSet:
    """Ordered, immutable collection of filter rules."""

    def __init__(self, rules: Iterable[FilterRule], *, is_default: bool = False) -> None:
        self.rules: Tuple[FilterRule, ...] = tuple(rules)
        self.is_default = is_default

    def __iter__(self) -> Iterator[FilterRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"FilterRuleSet({len(self.rules)} rules, default={self.is_default})"

    @property
    def keywords(self) -> List[str]:
        return [rule.keyword for rule in self.rules]

    @classmethod
    def default(cls) -> FilterRuleSet:
        return cls((FilterRule(keyword) for keyword in DEFAULT_FILTER_KEYWORDS), is_default=True)

    @classmethod
    def parse(cls, text: Optional[str]) -> FilterRuleSet:
        """
        Parse newline-delimited rule text.

        Blank lines and lines starting with ``#`` are skipped. When nothing
        is left the default rule set is returned instead.
        """
        rules = [
            FilterRule.from_line(line)
            for line in (text or "").splitlines()
            if line.strip() and not line.strip().startswith(COMMENT_PREFIX)
        ]
        if not rules:
            return cls.default()
        return cls(rules)

    @classmethod
    def coerce(cls, rules: "FilterRuleSet | str | Iterable[str] | None") -> FilterRuleSet:
        if rules is None:
            return cls.default()
        if isinstance(rules, FilterRuleSet):
            return rules
        if isinstance(rules, str):
            return cls.parse(rules)
        return cls.parse("\n".join(rules))

    def compiled(self) -> List[Tuple[FilterRule, Pattern[str]]]:
        """Compiled patterns in rule order. Malformed rules are logged and skipped."""
        patterns: List[Tuple[FilterRule, Pattern[str]]] = []
        for rule in self.rules:
            try:
                patterns.append((rule, rule.compile()))
            except MalformedFilterRule as e:
                logger.warning("filter_rule_skipped", rule=e.rule, reason=e.reason)
        return patterns
