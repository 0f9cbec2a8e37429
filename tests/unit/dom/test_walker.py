"""
Unit tests for DocumentWalker.
"""

from distillery.dom import Document, DocumentWalker

HTML = (
    "<body><div id='root'>"
    "<h1>A</h1>"
    "<nav><p>menu</p></nav>"
    "<section><p>B</p><p style='display:none'>C</p></section>"
    "<footer><p>legal</p></footer>"
    "<aside><p>rail</p></aside>"
    "<p class='tail'>D</p>"
    "</div></body>"
)


class TestDocumentWalker:
    """Filtered pre-order traversal."""

    def setup_method(self):
        self.doc = Document.from_html(HTML)
        self.root = self.doc.select_one("#root")

    def test_preorder_skips_rejected_and_hidden(self):
        """Test rejected tags and hidden elements are pruned with their subtrees."""
        tags = [node.tag for node in DocumentWalker(self.root)]
        assert tags == ["h1", "section", "p", "p"]

    def test_include_root(self):
        """Test the root is yielded first when requested."""
        nodes = list(DocumentWalker(self.root, include_root=True))
        assert nodes[0] == self.root

    def test_include_text(self):
        """Test text nodes are yielded in document order."""
        texts = [str(node.element) for node in DocumentWalker(self.root, include_text=True) if node.is_text]
        assert texts == ["A", "B", "D"]

    def test_extra_rejected_tags(self):
        """Test additional rejected tags extend the default set."""
        tags = [node.tag for node in DocumentWalker(self.root, rejected_tags=("section",))]
        assert tags == ["h1", "p"]

    def test_descend_predicate(self):
        """Test a false descend result skips the element's children."""
        walker = DocumentWalker(self.root, descend=lambda node: node.tag != "section")
        assert [node.tag for node in walker] == ["h1", "section", "p"]

    def test_restartable(self):
        """Test every iteration is a fresh traversal."""
        walker = DocumentWalker(self.root)
        assert list(walker) == list(walker)

    def test_rejected_root_yields_nothing_with_include_root(self):
        """Test a rejected root produces an empty walk."""
        nav = self.doc.select("nav")[0]
        assert list(DocumentWalker(nav, include_root=True)) == []

    def test_rejected_root_children_still_walk(self):
        """Test walking below an explicitly chosen rejected root visits its children."""
        nav = self.doc.select("nav")[0]
        assert [node.tag for node in DocumentWalker(nav)] == ["p"]
