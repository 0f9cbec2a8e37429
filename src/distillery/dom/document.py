"""
Host Document Model - Read-Only View over a Parsed HTML Snapshot

Wraps a BeautifulSoup tree in ``DocumentNode`` objects that expose exactly
what the extraction core consumes: tag, attributes, text, children, computed
visibility and (when the host can measure it) bounding geometry. The soup is
never mutated; "filtered clone" text is computed by skipping subtrees.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)

# Subtrees that never render as text
SCRIPT_LIKE_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})

# Elements rendered on their own line(s) by inner_text()
RENDER_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "caption", "dd", "details",
        "dialog", "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer",
        "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main",
        "nav", "ol", "pre", "section", "summary", "table", "tbody", "tfoot",
        "thead", "tr", "ul",
    }
)

_WHITESPACE = re.compile(r"[ \t\n\r\f]+")
_STYLE_DECLARATION = re.compile(r"\s*([-a-zA-Z]+)\s*:\s*([^;]+)")
_ZERO_LENGTH = re.compile(r"^0(?:\.0+)?(?:px|em|rem|%|vh|vw|pt)?$")


@dataclass(slots=True, frozen=True)
class BoundingBox:
    """Rendered geometry of an element in CSS pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)


@dataclass(slots=True, frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(slots=True, frozen=True)
class ComputedStyle:
    """The subset of computed style that decides visibility."""

    display: str = ""
    visibility: str = "visible"
    opacity: float = 1.0
    collapsed: bool = False  # explicit zero width or height

    @property
    def hides(self) -> bool:
        return (
            self.display == "none"
            or self.visibility in ("hidden", "collapse")
            or self.opacity <= 0.0
            or self.collapsed
        )


VISIBLE = ComputedStyle()


@runtime_checkable
class LayoutProvider(Protocol):
    """Source of computed style and geometry for elements."""

    def style(self, element: Tag) -> ComputedStyle:
        ...

    def box(self, element: Tag) -> Optional[BoundingBox]:
        ...


class InlineStyleLayout:
    """
    Layout derived from markup alone.

    Reads ``display``, ``visibility``, ``opacity`` and explicit zero sizes from
    the inline ``style`` attribute and treats the ``hidden`` attribute as
    ``display: none``. Static HTML has no geometry, so ``box`` is always None.
    """

    def style(self, element: Tag) -> ComputedStyle:
        declarations = parse_inline_style(element.get("style"))
        display = declarations.get("display", "")
        if element.has_attr("hidden"):
            display = "none"

        opacity = 1.0
        if "opacity" in declarations:
            try:
                opacity = float(declarations["opacity"])
            except ValueError:
                opacity = 1.0

        collapsed = any(
            _ZERO_LENGTH.match(declarations.get(prop, "")) is not None for prop in ("width", "height")
        )
        if not declarations and display != "none":
            return VISIBLE
        return ComputedStyle(
            display=display,
            visibility=declarations.get("visibility", "visible"),
            opacity=opacity,
            collapsed=collapsed,
        )

    def box(self, element: Tag) -> Optional[BoundingBox]:
        return None


class SnapshotLayout(InlineStyleLayout):
    """
    Layout measured by a rendering host (e.g. a headless browser).

    Elements that were never measured fall back to inline-style detection.
    """

    def __init__(self) -> None:
        self._boxes: Dict[int, Tuple[Tag, BoundingBox]] = {}
        self._styles: Dict[int, Tuple[Tag, ComputedStyle]] = {}

    def measure(
        self,
        target: Tag | DocumentNode,
        *,
        box: Optional[BoundingBox] = None,
        style: Optional[ComputedStyle] = None,
    ) -> None:
        element = target.element if isinstance(target, DocumentNode) else target
        # Keep a reference to the element so its id() stays unique
        if box is not None:
            self._boxes[id(element)] = (element, box)
        if style is not None:
            self._styles[id(element)] = (element, style)

    def style(self, element: Tag) -> ComputedStyle:
        measured = self._styles.get(id(element))
        if measured is not None:
            return measured[1]
        return super().style(element)

    def box(self, element: Tag) -> Optional[BoundingBox]:
        measured = self._boxes.get(id(element))
        return measured[1] if measured is not None else None


def parse_inline_style(style: Any) -> Dict[str, str]:
    """Parse a ``style`` attribute into lowercase property -> value."""
    if not style:
        return {}
    if isinstance(style, list):
        style = " ".join(style)
    declarations: Dict[str, str] = {}
    for part in str(style).split(";"):
        match = _STYLE_DECLARATION.match(part)
        if match:
            value = match.group(2).replace("!important", "").strip().lower()
            declarations[match.group(1).lower()] = value
    return declarations


@dataclass(slots=True, frozen=True)
class Selection:
    """The user's active text selection at extraction time."""

    text: str
    container: Optional[DocumentNode] = None

    @property
    def active(self) -> bool:
        return bool(self.text and self.text.strip())


class Document:
    """One consistent read of a host page."""

    def __init__(
        self,
        soup: BeautifulSoup,
        *,
        url: str = "",
        title: Optional[str] = None,
        viewport: Optional[Viewport] = None,
        layout: Optional[LayoutProvider] = None,
        captured_at: Optional[datetime] = None,
    ) -> None:
        self.soup = soup
        self.url = url
        self.viewport = viewport
        self.layout: LayoutProvider = layout or InlineStyleLayout()
        self.captured_at = captured_at or datetime.now(timezone.utc)
        self.selection: Optional[Selection] = None
        self._nodes: Dict[int, DocumentNode] = {}

        if title is None:
            title_tag = soup.find("title")
            title = title_tag.get_text() if title_tag else ""
        self.title = _WHITESPACE.sub(" ", title).strip()

    @classmethod
    def from_html(
        cls,
        html: str,
        *,
        url: str = "",
        title: Optional[str] = None,
        viewport: Optional[Viewport] = None,
        layout: Optional[LayoutProvider] = None,
        selection: Optional[str] = None,
        selection_selector: Optional[str] = None,
        parser: str = "lxml",
        captured_at: Optional[datetime] = None,
    ) -> Document:
        """
        Parse an HTML snapshot.

        Args:
            html: Page markup
            url: Source URL recorded in the context header
            title: Explicit title; defaults to the ``<title>`` text
            viewport: Viewport size, needed for position scoring
            layout: Style/geometry provider; defaults to inline styles
            selection: Text of the user's active selection, if any
            selection_selector: CSS selector of the selection's container
            parser: BeautifulSoup tree builder
            captured_at: Snapshot time; defaults to now (UTC)
        """
        soup = BeautifulSoup(html or "", parser)
        document = cls(soup, url=url, title=title, viewport=viewport, layout=layout, captured_at=captured_at)
        if selection is not None:
            container = document.select_one(selection_selector) if selection_selector else None
            document.selection = Selection(text=selection, container=container)
        return document

    @property
    def root(self) -> DocumentNode:
        """The ``<body>`` element, or the whole document when there is none."""
        body = self.soup.body
        return self.node(body if body is not None else self.soup)

    def node(self, element: Tag | NavigableString) -> DocumentNode:
        key = id(element)
        node = self._nodes.get(key)
        if node is None:
            node = DocumentNode(self, element)
            self._nodes[key] = node
        return node

    def select(self, css: str) -> List[DocumentNode]:
        return [self.node(el) for el in self.soup.select(css)]

    def select_one(self, css: str) -> Optional[DocumentNode]:
        element = self.soup.select_one(css)
        return self.node(element) if element is not None else None


class DocumentNode:
    """Read-only wrapper around one element or text node of a ``Document``."""

    __slots__ = ("document", "element")

    def __init__(self, document: Document, element: Tag | NavigableString) -> None:
        self.document = document
        self.element = element

    # --- identity ---

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DocumentNode) and other.element is self.element

    def __hash__(self) -> int:
        return id(self.element)

    def __repr__(self) -> str:
        if self.is_text:
            return f"<DocumentNode #text {str(self.element)[:30]!r}>"
        return f"<DocumentNode {self.tag}>"

    # --- attributes ---

    @property
    def is_element(self) -> bool:
        return isinstance(self.element, Tag)

    @property
    def is_text(self) -> bool:
        return not isinstance(self.element, Tag)

    @property
    def tag(self) -> str:
        if isinstance(self.element, Tag):
            return (self.element.name or "").lower()
        return "#text"

    @property
    def attrs(self) -> Dict[str, Any]:
        return dict(self.element.attrs) if isinstance(self.element, Tag) else {}

    def get(self, name: str, default: str = "") -> str:
        if not isinstance(self.element, Tag):
            return default
        value = self.element.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @property
    def classes(self) -> Tuple[str, ...]:
        if not isinstance(self.element, Tag):
            return ()
        value = self.element.get("class") or ()
        if isinstance(value, str):
            value = value.split()
        return tuple(value)

    @property
    def id(self) -> str:
        return self.get("id").strip()

    @property
    def role(self) -> str:
        return self.get("role").strip().lower()

    @property
    def itemtype(self) -> str:
        return self.get("itemtype").strip()

    # --- tree ---

    @property
    def parent(self) -> Optional[DocumentNode]:
        parent = self.element.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self.document.node(parent)

    def ancestors(self) -> Iterator[DocumentNode]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def children(self) -> List[DocumentNode]:
        if not isinstance(self.element, Tag):
            return []
        return [
            self.document.node(child)
            for child in self.element.children
            if isinstance(child, Tag) or not isinstance(child, _NON_TEXT_STRINGS)
        ]

    @property
    def element_children(self) -> List[DocumentNode]:
        if not isinstance(self.element, Tag):
            return []
        return [self.document.node(child) for child in self.element.children if isinstance(child, Tag)]

    def find_all(self, *names: str) -> List[DocumentNode]:
        """Descendant elements with any of ``names``, in document order."""
        if not isinstance(self.element, Tag):
            return []
        return [self.document.node(el) for el in self.element.find_all(list(names))]

    def select(self, css: str) -> List[DocumentNode]:
        if not isinstance(self.element, Tag):
            return []
        return [self.document.node(el) for el in self.element.select(css)]

    def contains(self, other: DocumentNode) -> bool:
        return other == self or any(a == self for a in other.ancestors())

    # --- rendering ---

    @property
    def style(self) -> ComputedStyle:
        if not isinstance(self.element, Tag):
            return VISIBLE
        return self.document.layout.style(self.element)

    @property
    def box(self) -> Optional[BoundingBox]:
        if not isinstance(self.element, Tag):
            return None
        return self.document.layout.box(self.element)

    @property
    def is_hidden(self) -> bool:
        if not isinstance(self.element, Tag):
            return False
        if self.style.hides:
            return True
        box = self.box
        return box is not None and box.area == 0

    @property
    def markup_length(self) -> int:
        return len(str(self.element))

    def text_content(self, exclude: Iterable[str] = ()) -> str:
        """DOM ``textContent``, skipping subtrees whose tag is in ``exclude``."""
        if not isinstance(self.element, Tag):
            return str(self.element)
        excluded = frozenset(exclude)
        if not excluded:
            return "".join(_iter_strings(self.element))
        pieces: List[str] = []
        stack: List[Any] = [self.element]
        while stack:
            item = stack.pop()
            if isinstance(item, Tag):
                if item is not self.element and (item.name or "").lower() in excluded:
                    continue
                stack.extend(reversed(item.contents))
            elif not isinstance(item, _NON_TEXT_STRINGS):
                pieces.append(str(item))
        return "".join(pieces)

    def inner_text(self, exclude: Iterable[str] = ()) -> str:
        """
        Rendered text, approximating the DOM ``innerText`` property.

        Hidden and script-like subtrees are skipped, ``<br>`` becomes a newline
        and block-level elements start on their own line. Whitespace inside
        ``<pre>`` is preserved, elsewhere it collapses to single spaces.
        """
        if not isinstance(self.element, Tag):
            return _WHITESPACE.sub(" ", str(self.element))
        excluded = frozenset(exclude)
        pieces: List[str] = []
        # (element-or-string, preserve-whitespace) or a literal string to emit
        stack: List[Any] = [(self.element, self.tag == "pre")]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                pieces.append(item)
                continue
            element, preserve = item
            if not isinstance(element, Tag):
                if isinstance(element, _NON_TEXT_STRINGS):
                    continue
                text = str(element)
                pieces.append(text if preserve else _WHITESPACE.sub(" ", text))
                continue
            name = (element.name or "").lower()
            if element is not self.element:
                if name in SCRIPT_LIKE_TAGS or name in excluded:
                    continue
                if self.document.node(element).is_hidden:
                    continue
            if name == "br":
                pieces.append("\n")
                continue
            preserve = preserve or name == "pre"
            if name in ("td", "th"):
                stack.append("\t")
            elif name == "p":
                pieces.append("\n\n")
                stack.append("\n\n")
            elif name in RENDER_BLOCK_TAGS:
                pieces.append("\n")
                stack.append("\n")
            stack.extend((child, preserve) for child in reversed(element.contents))

        lines = [line.strip(" ") for line in "".join(pieces).split("\n")]
        return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


def _iter_strings(element: Tag) -> Iterator[str]:
    for descendant in element.descendants:
        if isinstance(descendant, NavigableString) and not isinstance(descendant, _NON_TEXT_STRINGS):
            yield str(descendant)
