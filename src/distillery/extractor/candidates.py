"""
Candidate Collection - Proposing Main-Content Roots

Two heuristics propose subtree roots that may hold the article:

1. Selector pass: high-confidence content selectors (``article``, ``main``,
   ``.post-content`` ...) ranked by filtered visible text length, with an
   early exit once a match is clearly substantial.
2. Density expansion: when selectors find nothing substantial, start from
   the longest visible paragraph and climb a few ancestors, accepting a
   larger container only when it adds markedly more text.

If neither yields anything, the document body becomes a single
low-confidence candidate.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import structlog

from ..dom.document import DocumentNode
from ..models import Candidate, CandidateSource

logger = structlog.get_logger(__name__)

CONTENT_SELECTORS: Tuple[str, ...] = (
    "article",
    "main",
    ".content",
    ".post-content",
    ".article-content",
    ".entry-content",
    "#content",
    ".main-content",
)

# Subtrees removed before measuring a candidate's text
NON_CONTENT_TAGS: Tuple[str, ...] = ("script", "style", "nav", "header", "footer", "aside")

EARLY_EXIT_LENGTH = 1000
DENSITY_TRIGGER_LENGTH = 500
MIN_PARAGRAPH_LENGTH = 100
MAX_ANCESTOR_STEPS = 3
ANCESTOR_GAIN_RATIO = 1.2


def filtered_text_length(node: Optional[DocumentNode]) -> int:
    """Visible text length with script/style/nav/header/footer/aside removed."""
    if node is None:
        return 0
    return len(node.text_content(exclude=NON_CONTENT_TAGS).strip())


class CandidateCollector:
    """
    Proposes main-content candidates for a document subtree.

    In the simple pipeline a single candidate is returned. With
    ``exhaustive=True`` every visible selector match is kept (no early exit)
    and the density-expansion candidate is always added, so the scoring
    engine can arbitrate between competing roots.
    """

    def __init__(self, selectors: Sequence[str] = CONTENT_SELECTORS) -> None:
        self.selectors = tuple(selectors)

    def collect(self, root: DocumentNode, *, exhaustive: bool = False) -> List[Candidate]:
        """
        Collect candidates under ``root``.

        Args:
            root: Subtree to search, usually the document body
            exhaustive: Keep every competing candidate instead of one

        Returns:
            Candidates in discovery order (selector matches first)
        """
        candidates: List[Candidate] = []

        def add(node: DocumentNode, source: CandidateSource, length: int) -> None:
            if any(c.node == node for c in candidates):
                return
            candidates.append(Candidate(node=node, source=source, order=len(candidates), text_length=length))

        best_node, best_length, matches = self._selector_pass(root, exhaustive=exhaustive)

        if exhaustive:
            for node, length in matches:
                add(node, CandidateSource.SELECTOR, length)
        elif best_node is not None and best_length >= DENSITY_TRIGGER_LENGTH:
            add(best_node, CandidateSource.SELECTOR, best_length)

        if exhaustive or best_length < DENSITY_TRIGGER_LENGTH:
            expanded = self._density_expansion(root)
            if expanded is not None:
                add(expanded[0], CandidateSource.DENSITY_EXPANSION, expanded[1])
            elif not exhaustive and best_node is not None and best_length > 0:
                # A short selector match still beats the bare body
                add(best_node, CandidateSource.SELECTOR, best_length)

        if not candidates:
            add(root, CandidateSource.BODY_FALLBACK, filtered_text_length(root))

        logger.debug(
            "candidates_collected",
            count=len(candidates),
            sources=[c.source.value for c in candidates],
            exhaustive=exhaustive,
        )
        return candidates

    def _selector_pass(
        self, root: DocumentNode, *, exhaustive: bool
    ) -> Tuple[Optional[DocumentNode], int, List[Tuple[DocumentNode, int]]]:
        best_node: Optional[DocumentNode] = None
        best_length = 0
        matches: List[Tuple[DocumentNode, int]] = []
        seen = set()

        for selector in self.selectors:
            for node in self._matches(root, selector):
                if node in seen or not self._visible(node, root):
                    continue
                seen.add(node)
                length = filtered_text_length(node)
                matches.append((node, length))
                if length > best_length:
                    best_node, best_length = node, length
            if not exhaustive and best_length > EARLY_EXIT_LENGTH:
                break

        return best_node, best_length, matches

    @staticmethod
    def _matches(root: DocumentNode, selector: str) -> List[DocumentNode]:
        found = root.select(selector)
        # select() only searches descendants; the root itself may match too
        if root.is_element and root.element.css.match(selector):
            found.insert(0, root)
        return found

    @staticmethod
    def _visible(node: DocumentNode, root: DocumentNode) -> bool:
        """A node is usable when neither it nor an ancestor below root is hidden."""
        if node.is_hidden:
            return False
        for ancestor in node.ancestors():
            if ancestor == root:
                break
            if ancestor.is_hidden:
                return False
        return True

    def _density_expansion(self, root: DocumentNode) -> Optional[Tuple[DocumentNode, int]]:
        best_paragraph: Optional[DocumentNode] = None
        best_paragraph_length = 0
        for paragraph in root.find_all("p"):
            if not self._visible(paragraph, root):
                continue
            length = len(paragraph.text_content().strip())
            if length > best_paragraph_length:
                best_paragraph, best_paragraph_length = paragraph, length

        if best_paragraph is None or best_paragraph_length <= MIN_PARAGRAPH_LENGTH:
            return None

        parent = best_paragraph.parent
        if parent is None:
            return best_paragraph, filtered_text_length(best_paragraph)

        best_parent = parent
        best_parent_length = filtered_text_length(parent)
        for _ in range(MAX_ANCESTOR_STEPS):
            parent = parent.parent
            if parent is None:
                break
            length = filtered_text_length(parent)
            if length > best_parent_length * ANCESTOR_GAIN_RATIO:
                best_parent, best_parent_length = parent, length
        return best_parent, best_parent_length
