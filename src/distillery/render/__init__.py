"""
Output rendering: markdown serialization and boilerplate filtering.
"""

from .boilerplate import BoilerplateFilter, filter_markdown
from .markdown import MarkdownRenderer, render_chunk, render_header
from .rules import DEFAULT_FILTER_CATEGORIES, DEFAULT_FILTER_KEYWORDS, FilterRule, FilterRuleSet

__all__ = [
    "BoilerplateFilter",
    "DEFAULT_FILTER_CATEGORIES",
    "DEFAULT_FILTER_KEYWORDS",
    "FilterRule",
    "FilterRuleSet",
    "MarkdownRenderer",
    "filter_markdown",
    "render_chunk",
    "render_header",
]
