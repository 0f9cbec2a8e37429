"""
Candidate features, computed once per candidate and shared by every scorer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from ..dom.document import DocumentNode
from ..dom.walker import REJECTED_TAGS, DocumentWalker
from ..text import collapse_whitespace

_WORD = re.compile(r"[^\W_]+(?:['’-][^\W_]+)*")
# Closing quotes and brackets stay with the sentence they end
_SENTENCE_SPLIT = re.compile(r"(?:(?<=[.!?…])|(?<=[.!?…][\"'”’)\]]))\s+")
_HEADING = re.compile(r"^h([1-6])$")

# Paragraphs shorter than this are captions, labels or UI text
BODY_PARAGRAPH_MIN_WORDS = 20


def words_of(text: str) -> List[str]:
    return _WORD.findall(text)


def split_sentences(text: str) -> List[str]:
    """Split running text into sentences; line breaks always end a sentence."""
    sentences: List[str] = []
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        sentences.extend(s.strip() for s in _SENTENCE_SPLIT.split(line) if s.strip())
    return sentences


def attribute_marker(node: DocumentNode) -> str:
    """Lowercased ``tag class id itemprop rel`` string used for substring tests."""
    return " ".join(
        part
        for part in (
            node.tag,
            " ".join(node.classes),
            node.id,
            node.get("itemprop"),
            node.get("rel"),
        )
        if part
    ).lower()


@dataclass(slots=True)
class CandidateFeatures:
    """
    Text and structure statistics of one candidate subtree.

    Text statistics follow the walker's rejection rules (hidden, script-like,
    nav/header/footer/aside subtrees removed). ``markers`` cover every
    descendant element, including headers, because bylines and dates
    usually live there.
    """

    text: str
    words: List[str]
    sentences: List[str]
    paragraphs: List[str]
    headings: List[Tuple[int, str]]
    link_count: int
    link_text_length: int
    element_count: int
    markup_length: int
    markers: List[str] = field(default_factory=list)
    all_heading_levels: List[int] = field(default_factory=list)

    @property
    def text_length(self) -> int:
        return len(self.text)

    @property
    def body_paragraphs(self) -> List[str]:
        return [p for p in self.paragraphs if len(words_of(p)) >= BODY_PARAGRAPH_MIN_WORDS]

    @property
    def paragraph_text_length(self) -> int:
        return sum(len(p) for p in self.paragraphs)

    def count(self, tag: str) -> int:
        """Number of descendant elements with ``tag``, rejected subtrees included."""
        prefix = tag + " "
        return sum(1 for m in self.markers if m == tag or m.startswith(prefix))

    @classmethod
    def from_node(cls, node: DocumentNode) -> CandidateFeatures:
        text = node.inner_text(exclude=REJECTED_TAGS)

        paragraphs: List[str] = []
        headings: List[Tuple[int, str]] = []
        link_count = 0
        link_text_length = 0
        element_count = 0

        for child in DocumentWalker(node):
            element_count += 1
            tag = child.tag
            if tag == "p":
                paragraph = collapse_whitespace(child.inner_text())
                if paragraph:
                    paragraphs.append(paragraph)
            elif tag == "a":
                link_count += 1
                link_text_length += len(collapse_whitespace(child.inner_text()))
            else:
                match = _HEADING.match(tag)
                if match:
                    heading = collapse_whitespace(child.inner_text())
                    if heading:
                        headings.append((int(match.group(1)), heading))

        markers: List[str] = []
        all_levels: List[int] = []
        if node.is_element:
            for element in node.element.find_all(True):
                descendant = node.document.node(element)
                markers.append(attribute_marker(descendant))
                match = _HEADING.match(descendant.tag)
                if match:
                    all_levels.append(int(match.group(1)))

        return cls(
            text=text,
            words=words_of(text),
            sentences=split_sentences(text),
            paragraphs=paragraphs,
            headings=headings,
            link_count=link_count,
            link_text_length=link_text_length,
            element_count=element_count,
            markup_length=node.markup_length,
            markers=markers,
            all_heading_levels=all_levels,
        )
