"""
Structured Data Detection - Schema.org Article Types

Finds schema.org Article-family types declared through microdata
(``itemtype``) or JSON-LD ``<script type="application/ld+json">`` blocks.
Only the type matters for scoring, so property extraction is not performed.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterator, List

import structlog
from bs4 import BeautifulSoup

from ..dom.document import Document, DocumentNode
from ..errors import StructuredDataParseError

logger = structlog.get_logger(__name__)

ARTICLE_TYPES = frozenset(
    {
        "article",
        "newsarticle",
        "blogposting",
        "techarticle",
        "scholarlyarticle",
        "report",
        "analysisnewsarticle",
        "opinionnewsarticle",
        "reportagenewsarticle",
        "reviewnewsarticle",
        "backgroundnewsarticle",
        "socialmediaposting",
        "liveblogposting",
    }
)

_TYPE_SUFFIX = re.compile(r"[/#:]")


def normalize_type(value: str) -> str:
    """``http://schema.org/NewsArticle`` -> ``newsarticle``."""
    return _TYPE_SUFFIX.split(value.strip())[-1].lower()


def is_article_type(value: Any) -> bool:
    if isinstance(value, list):
        return any(is_article_type(v) for v in value)
    if not isinstance(value, str) or not value.strip():
        return False
    return any(normalize_type(part) in ARTICLE_TYPES for part in value.split())


def has_article_microdata(node: DocumentNode) -> bool:
    """True when ``node`` or a descendant declares an Article-family itemtype."""
    if is_article_type(node.itemtype):
        return True
    if not node.is_element:
        return False
    return any(is_article_type(el.get("itemtype")) for el in node.element.find_all(attrs={"itemtype": True}))


def parse_json_ld(text: str) -> List[Dict[str, Any]]:
    """
    Parse one JSON-LD block into its list of top-level objects.

    ``@graph`` containers are flattened. Raises ``StructuredDataParseError``
    when the block is not valid JSON.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise StructuredDataParseError(f"Invalid JSON-LD: {e}") from e

    items: List[Dict[str, Any]] = []
    pending = data if isinstance(data, list) else [data]
    while pending:
        item = pending.pop(0)
        if not isinstance(item, dict):
            continue
        items.append(item)
        graph = item.get("@graph")
        if isinstance(graph, list):
            pending.extend(graph)
    return items


def iter_json_ld(soup: BeautifulSoup) -> Iterator[Dict[str, Any]]:
    """Every JSON-LD object in the document; malformed blocks are skipped."""
    for script in soup.find_all("script", type="application/ld+json"):
        text = script.string
        if not text or not text.strip():
            continue
        try:
            yield from parse_json_ld(str(text).strip())
        except StructuredDataParseError as e:
            logger.debug("json_ld_ignored", error=str(e))


def has_article_json_ld(document: Document) -> bool:
    """True when any JSON-LD object in the document is an Article-family type."""
    return any(is_article_type(item.get("@type")) for item in iter_json_ld(document.soup))
