"""
Unit tests for boundary detection over chunk sequences.
"""

import pytest

from distillery.extractor import BoundaryDetector
from distillery.models import HeadingChunk, ListChunk, ParagraphChunk


class TestBoundaryDetector:
    """Dropping related/comment sections and truncating at legal lines."""

    def setup_method(self):
        self.detector = BoundaryDetector()

    def test_related_section_dropped_until_same_level(self):
        """Test a boundary heading drops its section and nested subsections."""
        chunks = [
            HeadingChunk(level=1, text="Story"),
            ParagraphChunk(text="Body."),
            HeadingChunk(level=2, text="Related Articles"),
            HeadingChunk(level=3, text="Article A"),
            ListChunk(ordered=False, items=("x", "y")),
            HeadingChunk(level=2, text="Next Real Section"),
            ParagraphChunk(text="More body."),
        ]
        assert self.detector.apply(chunks) == [
            HeadingChunk(level=1, text="Story"),
            ParagraphChunk(text="Body."),
            HeadingChunk(level=2, text="Next Real Section"),
            ParagraphChunk(text="More body."),
        ]

    def test_copyright_truncates_rest(self):
        """Test a copyright paragraph ends the article."""
        chunks = [
            ParagraphChunk(text="Body."),
            ParagraphChunk(text="© 2024 Example Media"),
            ParagraphChunk(text="Anything after."),
        ]
        assert self.detector.apply(chunks) == [ParagraphChunk(text="Body.")]

    def test_rights_reserved_suffix_is_terminal(self):
        """Test a line ending in 'All rights reserved.' is terminal."""
        assert self.detector.is_terminal(ParagraphChunk(text="Example Media Group. All rights reserved."))

    def test_prose_mentioning_comments_is_kept(self):
        """Test ordinary paragraphs and headings that merely mention boilerplate words survive."""
        chunks = [
            HeadingChunk(level=2, text="Comments from the minister"),
            ParagraphChunk(text="Related research shows copyright law is complex."),
        ]
        assert self.detector.apply(chunks) == chunks

    @pytest.mark.parametrize(
        "text",
        [
            "Related",
            "Related Stories",
            "Recommended for you",
            "More from Science",
            "You might also like",
            "Comments",
            "Leave a Reply",
            "Subscribe to our newsletter",
            "Trending now",
            "Most Popular",
            "Editor’s Picks",
            "About the author:",
        ],
    )
    def test_boundary_headings(self, text):
        """Test the boundary phrase list."""
        assert self.detector.is_boundary_heading(HeadingChunk(level=2, text=text))

    def test_paragraphs_are_never_boundary_headings(self):
        """Test only heading chunks start a skipped section."""
        assert not self.detector.is_boundary_heading(ParagraphChunk(text="Related"))

    def test_boundary_at_end_drops_trailing_section(self):
        """Test a trailing boundary section is dropped to the end."""
        chunks = [
            ParagraphChunk(text="Body."),
            HeadingChunk(level=3, text="Comments"),
            ParagraphChunk(text="First!"),
        ]
        assert self.detector.apply(chunks) == [ParagraphChunk(text="Body.")]

    def test_input_not_mutated(self):
        """Test the input sequence is left untouched."""
        chunks = [HeadingChunk(level=2, text="Related"), ParagraphChunk(text="x")]
        before = list(chunks)
        self.detector.apply(chunks)
        assert chunks == before
