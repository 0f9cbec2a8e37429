"""
Component scorers for candidate ranking.

Each scorer maps a candidate to [0, 1] using explicit thresholds with
graded fallbacks, e.g. sentences score highest at 15-25 words and degrade
to partial credit at 10-35.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Sequence, Set

from ..dom.document import BoundingBox, Document, DocumentNode, Viewport
from .features import CandidateFeatures, words_of
from .structured_data import has_article_json_ld, has_article_microdata


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def check_heading_hierarchy(levels: Sequence[int]) -> bool:
    """
    True unless some heading is more than one level deeper than the
    heading immediately before it (h2 -> h4 skips a level; h4 -> h2 is fine).
    """
    return all(current - previous <= 1 for previous, current in zip(levels, levels[1:]))


def _any_marker(markers: Iterable[str], pattern: Pattern[str]) -> bool:
    return any(pattern.search(marker) for marker in markers)


# --- textQuality ---


def sentence_length_score(word_count: int) -> float:
    if 15 <= word_count <= 25:
        return 1.0
    if 10 <= word_count <= 35:
        return 0.6
    return 0.2


def paragraph_count_score(count: int) -> float:
    if count >= 5:
        return 1.0
    if count >= 3:
        return 0.8
    if count >= 1:
        return 0.4
    return 0.0


def paragraph_length_score(mean_words: float) -> float:
    if 40 <= mean_words <= 150:
        return 1.0
    if 20 <= mean_words <= 250:
        return 0.6
    return 0.3


_SENTENCE_START = re.compile(r"^[\"'“‘(\[]*[A-Z0-9À-ÖØ-Þ]")
_SENTENCE_END = re.compile(r"[.!?…:][\"'”’)\]]*$")


def is_well_formed(sentence: str) -> bool:
    """Starts with a capital (or digit) and ends with terminal punctuation."""
    return bool(_SENTENCE_START.match(sentence)) and bool(_SENTENCE_END.search(sentence))


def text_quality(features: CandidateFeatures) -> float:
    """Sentence length, paragraph shape, casing/punctuation and lexical diversity."""
    sentences = features.sentences
    if not sentences or not features.words:
        return 0.0

    sentence_score = sum(sentence_length_score(len(words_of(s))) for s in sentences) / len(sentences)

    paragraphs = features.paragraphs
    if paragraphs:
        mean_words = sum(len(words_of(p)) for p in paragraphs) / len(paragraphs)
        paragraph_score = (paragraph_count_score(len(paragraphs)) + paragraph_length_score(mean_words)) / 2
    else:
        paragraph_score = 0.0

    correctness = sum(1 for s in sentences if is_well_formed(s)) / len(sentences)

    sample = [w.lower() for w in features.words[:1000]]
    diversity = clamp((len(set(sample)) / len(sample)) / 0.5)

    return clamp(0.30 * sentence_score + 0.25 * paragraph_score + 0.25 * correctness + 0.20 * diversity)


# --- contentDensity ---


def content_density(features: CandidateFeatures) -> float:
    """Text/markup ratio, text per element, link density and paragraph share."""
    length = features.text_length
    if length == 0:
        return 0.0

    markup_ratio = clamp((length / max(1, features.markup_length)) / 0.5)
    per_element = clamp((length / max(1, features.element_count)) / 200)

    link_density = features.link_text_length / length
    if link_density <= 0.2:
        link_score = 1.0
    else:
        link_score = clamp(1.0 - (link_density - 0.2) / 0.6)

    paragraph_share = clamp(features.paragraph_text_length / length)

    return clamp(0.30 * markup_ratio + 0.25 * per_element + 0.25 * link_score + 0.20 * paragraph_share)


# --- articleStructure ---

BYLINE = re.compile(r"byline|(?<![a-z])author")
DATE = re.compile(r"^time(?:\s|$)|datepublished|datemodified|(?<![a-z])date|published|timestamp|posted-on")
INTRO_MIN_WORDS = 25
CONCLUSION_MARKERS = re.compile(
    r"\b(?:in conclusion|in summary|to sum up|overall|ultimately|finally|in the end)\b", re.IGNORECASE
)


def article_structure(features: CandidateFeatures) -> float:
    """Additive checklist of the parts a typical article has."""
    score = 0.0
    markers = features.markers
    levels = features.all_heading_levels

    if 1 in levels:
        score += 0.20
    if any(level > 1 for level in levels):
        score += 0.10
    if _any_marker(markers, BYLINE):
        score += 0.10
    if _any_marker(markers, DATE):
        score += 0.10

    body = features.body_paragraphs
    if len(body) >= 3:
        score += 0.20

    heading_levels = [level for level, _ in features.headings]
    if heading_levels and check_heading_hierarchy(heading_levels):
        score += 0.10

    if features.count("img") or features.count("figure") or features.count("blockquote") or (
        features.count("ul") or features.count("ol")
    ):
        score += 0.10

    paragraphs = features.paragraphs
    if paragraphs and len(words_of(paragraphs[0])) >= INTRO_MIN_WORDS:
        score += 0.05
    if len(paragraphs) >= 2:
        last = paragraphs[-1]
        if len(words_of(last)) >= INTRO_MIN_WORDS or CONCLUSION_MARKERS.search(last):
            score += 0.05

    return clamp(score)


# --- semanticScore ---

CONTENT_HINT = re.compile(r"content|article|post|entry|story|main|body|text")
TAG_BONUS = {"main": 0.6, "article": 0.5, "section": 0.3}


def semantic_score(node: DocumentNode) -> float:
    """HTML5 tag, ARIA role, schema.org type and content-ish class/id hints."""
    score = TAG_BONUS.get(node.tag, 0.0)

    if node.role in ("main", "article"):
        score += 0.2

    if has_article_microdata(node) or has_article_json_ld(node.document):
        score += 0.3

    hint = " ".join(part for part in (" ".join(node.classes), node.id) if part).lower()
    if hint and CONTENT_HINT.search(hint):
        score += 0.2

    return clamp(score)


# --- positionScore ---

NEUTRAL_POSITION = 0.5


def position_score(box: Optional[BoundingBox], viewport: Optional[Viewport]) -> float:
    """
    Geometry plausibility of a main column. Neutral when the host could not
    measure the element or the viewport.
    """
    if box is None or viewport is None or viewport.width <= 0:
        return NEUTRAL_POSITION

    width = viewport.width
    center_offset = abs((box.x + box.width / 2) - width / 2) / (width / 2)
    centering = clamp(1.0 - center_offset)

    ratio = box.width / width
    if 0.4 <= ratio <= 0.8:
        width_score = 1.0
    elif ratio < 0.4:
        width_score = clamp(ratio / 0.4)
    else:
        width_score = clamp(1.0 - (ratio - 0.8) / 0.4)

    main_column = 1.0 if box.x < 0.7 * width and box.width > 0.4 * width else 0.0

    if 400 <= box.height <= 15000:
        height_score = 1.0
    elif 150 <= box.height < 400:
        height_score = 0.5
    else:
        height_score = 0.2

    return clamp(0.30 * centering + 0.30 * width_score + 0.20 * main_column + 0.20 * height_score)


# --- metadataScore ---

_READING_TIME = re.compile(r"\b\d+\s*(?:-\s*)?min(?:ute)?s?\s+read\b", re.IGNORECASE)
_WORD_COUNT = re.compile(r"\b\d[\d,]*\s+words\b", re.IGNORECASE)
_COMMENT_COUNT = re.compile(r"\b\d+\s+comments?\b", re.IGNORECASE)

METADATA_MARKERS = {
    "author": re.compile(r"(?<![a-z])author|byline"),
    "byline_link": re.compile(r"^a .*(?:author|byline)"),
    "date": DATE,
    "tags": re.compile(r"(?<![a-z])tags?(?![a-z])|(?<![a-z])tag-"),
    "category": re.compile(r"categor"),
    "share": re.compile(r"shar(?:e|ing)"),
    "comment_count": re.compile(r"comments?-count|comment-count|count-comments"),
    "images": re.compile(r"^img(?:\s|$)"),
    "captions": re.compile(r"caption"),
    "video": re.compile(r"video|youtube|vimeo"),
    "reading_time": re.compile(r"reading-time|read-time|readtime"),
    "word_count": re.compile(r"wordcount|word-count"),
}

METADATA_CHECKLIST = tuple(METADATA_MARKERS)

# Document-level <meta> names/properties counted as present
DOCUMENT_META = {
    "author": ("author", "article:author", "dc.creator", "parsely-author", "sailthru.author"),
    "date": (
        "article:published_time",
        "article:modified_time",
        "date",
        "pubdate",
        "dc.date",
        "og:updated_time",
        "parsely-pub-date",
    ),
    "tags": ("article:tag", "keywords", "news_keywords"),
    "category": ("article:section", "parsely-section"),
}


def document_metadata(document: Document) -> Set[str]:
    present: Set[str] = set()
    for meta in document.soup.find_all("meta"):
        key = (meta.get("name") or meta.get("property") or "").strip().lower()
        if not key or not (meta.get("content") or "").strip():
            continue
        for item, names in DOCUMENT_META.items():
            if key in names:
                present.add(item)
    return present


def metadata_score(features: CandidateFeatures, document: Optional[Document] = None) -> float:
    """Fraction of the metadata checklist present, plus 0.2 for author + date + images."""
    present = {name for name, pattern in METADATA_MARKERS.items() if _any_marker(features.markers, pattern)}

    text = features.text
    if _READING_TIME.search(text):
        present.add("reading_time")
    if _WORD_COUNT.search(text):
        present.add("word_count")
    if _COMMENT_COUNT.search(text):
        present.add("comment_count")

    if document is not None:
        present |= document_metadata(document)

    score = len(present) / len(METADATA_CHECKLIST)
    if {"author", "date", "images"} <= present:
        score += 0.2
    return clamp(score)
