"""
Unit tests for CandidateCollector.
"""

from distillery.dom import Document
from distillery.extractor import CandidateCollector, filtered_text_length
from distillery.models import CandidateSource


class TestFilteredTextLength:
    """Text length with page chrome removed."""

    def test_excludes_chrome_and_scripts(self):
        """Test nav, script and similar subtrees do not count."""
        doc = Document.from_html("<body><div id='x'> abc<nav>xyz</nav><script>q()</script><aside>r</aside> </div></body>")
        assert filtered_text_length(doc.select_one("#x")) == 3

    def test_none_is_zero(self):
        """Test a missing node has no length."""
        assert filtered_text_length(None) == 0


class TestCandidateCollector:
    """Selector pass, density expansion and body fallback."""

    def setup_method(self):
        self.collector = CandidateCollector()

    def test_substantial_article_found_by_selector(self, clean_article_html):
        """Test a long <article> is the single simple-mode candidate."""
        doc = Document.from_html(clean_article_html)
        candidates = self.collector.collect(doc.root)
        assert len(candidates) == 1
        assert candidates[0].node.tag == "article"
        assert candidates[0].source is CandidateSource.SELECTOR
        assert candidates[0].text_length > 1000

    def test_exhaustive_dedupes_density_result(self, sidebar_article_html):
        """Test density expansion landing on the selector match adds no duplicate."""
        doc = Document.from_html(sidebar_article_html)
        candidates = self.collector.collect(doc.root, exhaustive=True)
        assert [c.node.tag for c in candidates] == ["article"]

    def test_exhaustive_keeps_every_selector_match(self, paragraphs):
        """Test every visible selector match is kept, in discovery order."""
        doc = Document.from_html(
            f"<body><main><p>{paragraphs[0]}</p></main>"
            f"<div class='content'><p>{paragraphs[1]}</p><p>{paragraphs[2]}</p></div></body>"
        )
        candidates = self.collector.collect(doc.root, exhaustive=True)
        nodes = [c.node for c in candidates]
        assert nodes[0].tag == "main"
        assert doc.select_one(".content") in nodes
        assert [c.order for c in candidates] == list(range(len(candidates)))

    def test_density_expansion_without_selectors(self, paragraphs):
        """Test the longest paragraph's container is proposed when no selector matches."""
        doc = Document.from_html(
            "<body><div id='wrap'>"
            f"<div id='story'><p>{paragraphs[0]}</p><p>{paragraphs[1]}</p></div>"
            "<div class='side'><p>Short note.</p></div>"
            "</div></body>"
        )
        candidates = self.collector.collect(doc.root)
        assert len(candidates) == 1
        assert candidates[0].source is CandidateSource.DENSITY_EXPANSION
        assert candidates[0].node.id == "story"

    def test_density_expansion_climbs_when_gain_is_large(self, paragraphs):
        """Test an ancestor with markedly more text replaces the paragraph's parent."""
        doc = Document.from_html(
            "<body><div id='wrap'>"
            f"<div id='first'><p>{paragraphs[0]}</p></div>"
            f"<div id='second'><p>{paragraphs[1][:300]}</p><p>{paragraphs[2]}</p></div>"
            "</div></body>"
        )
        candidates = self.collector.collect(doc.root)
        assert candidates[0].node.id == "wrap"

    def test_short_selector_match_kept(self):
        """Test a short selector match beats the body when density finds nothing."""
        doc = Document.from_html("<body><main><p>Short text here.</p></main><div>other</div></body>")
        candidates = self.collector.collect(doc.root)
        assert len(candidates) == 1
        assert candidates[0].node.tag == "main"
        assert candidates[0].source is CandidateSource.SELECTOR

    def test_body_fallback(self):
        """Test the root is the only candidate when nothing qualifies."""
        doc = Document.from_html("<body><div>tiny</div></body>")
        candidates = self.collector.collect(doc.root)
        assert len(candidates) == 1
        assert candidates[0].source is CandidateSource.BODY_FALLBACK
        assert candidates[0].node == doc.root

    def test_hidden_selector_match_ignored(self, paragraphs):
        """Test hidden matches, and matches under hidden ancestors, are skipped."""
        long_text = "".join(f"<p>{p}</p>" for p in paragraphs)
        doc = Document.from_html(
            f"<body><article style='display:none'>{long_text}</article>"
            f"<div hidden><main>{long_text}</main></div>"
            f"<div class='post-content'>{long_text}</div></body>"
        )
        candidates = self.collector.collect(doc.root, exhaustive=True)
        assert [c.node.classes for c in candidates if c.source is CandidateSource.SELECTOR] == [("post-content",)]

    def test_root_itself_can_match(self, clean_article_html):
        """Test a subtree root that matches a selector is its own candidate."""
        doc = Document.from_html(clean_article_html)
        article = doc.select("article")[0]
        candidates = self.collector.collect(article)
        assert candidates[0].node == article

    def test_custom_selectors(self, paragraphs):
        """Test the selector list is configurable."""
        doc = Document.from_html(f"<body><div class='story-body'><p>{paragraphs[0]}</p></div></body>")
        collector = CandidateCollector(selectors=(".story-body",))
        candidates = collector.collect(doc.root, exhaustive=True)
        assert candidates[0].node.classes == ("story-body",)
        assert candidates[0].source is CandidateSource.SELECTOR
