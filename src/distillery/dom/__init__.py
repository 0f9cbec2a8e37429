"""
Host document view: read-only nodes, visibility and filtered traversal.
"""

from .document import (
    BoundingBox,
    ComputedStyle,
    Document,
    DocumentNode,
    InlineStyleLayout,
    LayoutProvider,
    Selection,
    SnapshotLayout,
    Viewport,
)
from .walker import REJECTED_TAGS, DocumentWalker

__all__ = [
    "BoundingBox",
    "ComputedStyle",
    "Document",
    "DocumentNode",
    "DocumentWalker",
    "InlineStyleLayout",
    "LayoutProvider",
    "REJECTED_TAGS",
    "Selection",
    "SnapshotLayout",
    "Viewport",
]
