"""
Semantic Chunker - Typed Content Blocks from a Subtree

Walks the chosen content root in document order and emits one typed chunk
per structural block:

- h1-h6 -> heading (with ancestor-heading breadcrumb)
- pre -> code (language from class names, whitespace preserved)
- blockquote -> blockquote
- ul/ol -> list of direct ``<li>`` items
- table -> rows of cell text
- p/div/section/article without block-level children -> paragraph

Headings, code, quotes, tables and leaf paragraphs are consumed whole, so
nothing inside them is chunked twice. Loose inline text sitting beside
block children becomes its own paragraph.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

import structlog
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from ..dom.document import RENDER_BLOCK_TAGS, DocumentNode
from ..dom.walker import DocumentWalker
from ..models import (
    BlockquoteChunk,
    CodeChunk,
    ContentChunk,
    HeadingChunk,
    ListChunk,
    ParagraphChunk,
    TableChunk,
)
from ..text import clean_inline, collapse_whitespace

logger = structlog.get_logger(__name__)

HEADING_TAGS: FrozenSet[str] = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

# Children that stop a container from being captured as one paragraph
BLOCK_TAGS: FrozenSet[str] = frozenset(
    {"p", "div", "section", "article", "ul", "ol", "table", "pre", "blockquote"} | HEADING_TAGS
)

PARAGRAPH_TAGS: FrozenSet[str] = frozenset({"p", "div", "section", "article"})

# Blocks consumed whole; inside a list item their text already belongs to the item
WHOLE_BLOCK_TAGS: FrozenSet[str] = HEADING_TAGS | {"pre", "blockquote", "table"}

# Elements that end a run of loose inline text
_RUN_BREAKS: FrozenSet[str] = BLOCK_TAGS | RENDER_BLOCK_TAGS | {"br", "hr", "li", "td", "th"}

_LANGUAGE_CLASS = re.compile(r"(?:language|lang|highlight)-([a-z0-9+#_.-]+)", re.IGNORECASE)
_SINGLE_WORD = re.compile(r"^[a-z0-9+#]+$", re.IGNORECASE)


@lru_cache(maxsize=256)
def is_known_language(name: str) -> bool:
    """True when pygments has a lexer registered under alias ``name``."""
    try:
        get_lexer_by_name(name)
    except ClassNotFound:
        return False
    return True


def detect_code_language(*candidates: Optional[DocumentNode]) -> str:
    """
    Language tag from the class attribute of the first node that has one.

    ``language-xxx``, ``lang-xxx`` and ``highlight-xxx`` classes win; failing
    that, a single-word class naming a known lexer (``python``, ``js``) is
    accepted. Returns an empty string when nothing matches.
    """
    nodes = [n for n in candidates if n is not None]
    for node in nodes:
        match = _LANGUAGE_CLASS.search(" ".join(node.classes))
        if match:
            return match.group(1).lower()
    for node in nodes:
        for cls in node.classes:
            word = cls.lower()
            if _SINGLE_WORD.match(word) and is_known_language(word):
                return word
    return ""


def has_block_children(node: DocumentNode) -> bool:
    return any(child.tag in BLOCK_TAGS for child in node.element_children)


def heading_breadcrumb(node: DocumentNode) -> Tuple[str, ...]:
    """Ancestor headings of ``node`` in document order, each ``H{level}:{text}``."""
    crumbs: List[str] = []
    for ancestor in node.ancestors():
        if ancestor.tag == "body":
            break
        if ancestor.tag in HEADING_TAGS:
            text = collapse_whitespace(ancestor.text_content())
            if text:
                crumbs.append(f"H{ancestor.tag[1]}:{text}")
    crumbs.reverse()
    return tuple(crumbs)


class SemanticChunker:
    """
    Decomposes a subtree into ordered content chunks.

    Args:
        rejected_tags: Extra tags to prune on top of the walker's defaults
    """

    def __init__(self, rejected_tags: Iterable[str] = ()) -> None:
        self.rejected_tags = frozenset(rejected_tags)

    def chunk(self, root: DocumentNode) -> List[ContentChunk]:
        chunks: List[ContentChunk] = []
        consumed: Set[DocumentNode] = set()
        run: List[str] = []
        run_container: List[Optional[DocumentNode]] = [None]

        def flush() -> None:
            if run:
                text = clean_inline(collapse_whitespace("".join(run)))
                if text:
                    chunks.append(ParagraphChunk(text=text))
                run.clear()
            run_container[0] = None

        walker = DocumentWalker(
            root,
            rejected_tags=self.rejected_tags,
            include_text=True,
            include_root=True,
            descend=lambda node: node not in consumed,
        )

        for node in walker:
            if node.is_text:
                if self._owned_by_list(node, root):
                    continue
                container = self._block_container(node, root)
                if run and container != run_container[0]:
                    flush()
                run_container[0] = container
                run.append(str(node.element))
                continue

            tag = node.tag
            if tag in _RUN_BREAKS:
                flush()

            chunk = self._dispatch(node, root, consumed)
            if chunk is not None:
                chunks.append(chunk)

        flush()
        logger.debug("chunked", root=root.tag, chunks=len(chunks))
        return chunks

    def _dispatch(self, node: DocumentNode, root: DocumentNode, consumed: Set[DocumentNode]) -> Optional[ContentChunk]:
        tag = node.tag

        if tag in WHOLE_BLOCK_TAGS and self._owned_by_list(node, root):
            consumed.add(node)
            return None

        if tag in HEADING_TAGS:
            consumed.add(node)
            text = collapse_whitespace(node.text_content())
            if not text:
                return None
            return HeadingChunk(level=int(tag[1]), text=text, breadcrumb=heading_breadcrumb(node))

        if tag == "pre":
            consumed.add(node)
            code_nodes = node.find_all("code")
            code_node = code_nodes[0] if code_nodes else None
            code = (code_node or node).text_content().rstrip()
            if not code.strip():
                return None
            return CodeChunk(lang=detect_code_language(code_node, node), code=code)

        if tag == "blockquote":
            consumed.add(node)
            text = clean_inline(node.inner_text())
            return BlockquoteChunk(text=text) if text else None

        if tag in ("ul", "ol"):
            items = tuple(
                item
                for item in (
                    clean_inline(li.inner_text(exclude=("ul", "ol")))
                    for li in node.element_children
                    if li.tag == "li" and not li.is_hidden
                )
                if item
            )
            return ListChunk(ordered=tag == "ol", items=items) if items else None

        if tag == "table":
            consumed.add(node)
            rows = []
            for tr in node.find_all("tr"):
                if tr.is_hidden:
                    continue
                cells = tuple(
                    clean_inline(cell.inner_text()) for cell in tr.element_children if cell.tag in ("td", "th")
                )
                if cells:
                    rows.append(cells)
            return TableChunk(rows=tuple(rows)) if rows else None

        if tag in PARAGRAPH_TAGS and not has_block_children(node):
            consumed.add(node)
            if self._owned_by_list(node, root):
                return None
            text = clean_inline(node.inner_text())
            return ParagraphChunk(text=text) if text else None

        return None

    @staticmethod
    def _owned_by_list(node: DocumentNode, root: DocumentNode) -> bool:
        """Inside an ``<li>`` of a list under ``root``; the list chunk holds that text."""
        if node == root:
            return False
        for ancestor in node.ancestors():
            if ancestor.tag == "li":
                parent = ancestor.parent
                if parent is not None and parent.tag in ("ul", "ol") and root.contains(parent):
                    return True
            if ancestor == root:
                return False
        return False

    @staticmethod
    def _block_container(node: DocumentNode, root: DocumentNode) -> Optional[DocumentNode]:
        for ancestor in node.ancestors():
            if ancestor.tag in _RUN_BREAKS or ancestor == root:
                return ancestor
        return None
