"""
Document walker: filtered pre-order traversal of a document subtree.
"""

from __future__ import annotations

from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional

from .document import DocumentNode

# Elements whose whole subtree never contributes main content
REJECTED_TAGS: FrozenSet[str] = frozenset(
    {"script", "style", "noscript", "template", "meta", "link", "nav", "header", "footer", "aside"}
)


class DocumentWalker:
    """
    Lazy, restartable pre-order iteration over the nodes under ``root``.

    Elements whose tag is rejected, and elements that are hidden, are skipped
    together with their entire subtree. Every call to ``iter()`` starts a new
    traversal, so one walker can be consumed any number of times.

    Args:
        root: Subtree root
        rejected_tags: Additional tags to reject on top of ``REJECTED_TAGS``
        include_text: Also yield text nodes
        include_root: Yield ``root`` itself before its descendants
        descend: Predicate deciding whether to enter a yielded element's
            children; callers use it to skip subtrees they consumed whole
    """

    def __init__(
        self,
        root: DocumentNode,
        *,
        rejected_tags: Iterable[str] = (),
        include_text: bool = False,
        include_root: bool = False,
        descend: Optional[Callable[[DocumentNode], bool]] = None,
    ) -> None:
        self.root = root
        self.rejected_tags = REJECTED_TAGS | frozenset(rejected_tags)
        self.include_text = include_text
        self.include_root = include_root
        self.descend = descend

    def __iter__(self) -> Iterator[DocumentNode]:
        return self._walk()

    def accepts(self, node: DocumentNode) -> bool:
        """True when ``node`` and its subtree survive the rejection rules."""
        if node.is_text:
            return self.include_text
        return node.tag not in self.rejected_tags and not node.is_hidden

    def _walk(self) -> Iterator[DocumentNode]:
        root = self.root
        stack: List[DocumentNode] = []
        if self.include_root:
            if not self.accepts(root):
                return
            stack.append(root)
        else:
            stack.extend(reversed(root.children))

        while stack:
            node = stack.pop()
            if node is not root and not self.accepts(node):
                continue
            yield node
            if node.is_element and (self.descend is None or self.descend(node)):
                stack.extend(reversed(node.children))
