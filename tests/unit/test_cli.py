"""
Tests for the distill command-line interface.
"""

import json
import logging

import pytest
import structlog
from click.testing import CliRunner

from distillery import __version__
from distillery.cli import cli

PROMO = "<h2>Partner Corner</h2><p>Buy a sturdy river boat today from our friends at the marina.</p>"


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs a root handler bound to the runner's stderr; undo it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run from an empty directory so no distill.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(cli, ["--log-level", "ERROR", *args], obj={}, env={"COLUMNS": "200"})


class TestExtractCommand:
    """distill extract"""

    def test_extract_markdown(self, runner, workdir, clean_article_html):
        """Test extraction prints the header and body on stdout."""
        source = workdir / "article.html"
        source.write_text(clean_article_html, encoding="utf-8")

        result = invoke(runner, "extract", str(source), "--url", "https://example.com/story")

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("---\nurl: https://example.com/story\ntitle: Salt in the Delta\n")
        assert "# Salt in the Delta" in result.stdout
        assert "The river delta has changed" in result.stdout

    def test_default_url_is_file_uri(self, runner, workdir, clean_article_html):
        """Test the source path becomes the URL when none is given."""
        source = workdir / "article.html"
        source.write_text(clean_article_html, encoding="utf-8")

        result = invoke(runner, "extract", str(source))

        assert f"url: {source.resolve().as_uri()}" in result.stdout

    def test_stdin(self, runner, workdir, clean_article_html):
        """Test '-' reads the page from stdin."""
        result = runner.invoke(
            cli, ["--log-level", "ERROR", "extract", "-", "--url", "https://example.com/s"], input=clean_article_html
        )
        assert result.exit_code == 0, result.output
        assert "# Salt in the Delta" in result.stdout

    def test_json_output(self, runner, workdir, clean_article_html):
        """Test --json prints the full result."""
        source = workdir / "article.html"
        source.write_text(clean_article_html, encoding="utf-8")

        result = invoke(runner, "extract", str(source), "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["tier"] == "enhanced"
        assert [chunk["type"] for chunk in data["chunks"]] == ["heading", "paragraph", "paragraph", "paragraph"]
        assert data["context"]["title"] == "Salt in the Delta"
        assert data["scores"]["final_score"] >= 0.6

    def test_output_file(self, runner, workdir, clean_article_html):
        """Test --output writes the result and reports the path."""
        source = workdir / "article.html"
        source.write_text(clean_article_html, encoding="utf-8")
        target = workdir / "out.md"

        result = invoke(runner, "extract", str(source), "-o", str(target))

        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert "Saved to" in result.stderr
        assert "# Salt in the Delta" in target.read_text(encoding="utf-8")

    def test_custom_filters(self, runner, workdir, article_page):
        """Test a filter file removes matching sections."""
        source = workdir / "article.html"
        source.write_text(article_page(extra=PROMO), encoding="utf-8")
        rules = workdir / "filters.txt"
        rules.write_text("# site specific\nPartner Corner\n", encoding="utf-8")

        unfiltered = invoke(runner, "extract", str(source))
        filtered = invoke(runner, "extract", str(source), "--filters", str(rules))

        assert "Buy a sturdy river boat" in unfiltered.stdout
        assert "Buy a sturdy river boat" not in filtered.stdout
        assert "The river delta has changed" in filtered.stdout

    def test_nothing_extracted(self, runner, workdir):
        """Test an empty page exits non-zero with a message."""
        source = workdir / "empty.html"
        source.write_text("<html><body></body></html>", encoding="utf-8")

        result = invoke(runner, "extract", str(source))

        assert result.exit_code == 1
        assert "No content could be extracted" in result.stderr

    def test_missing_source(self, runner, workdir):
        """Test a missing file is a usage error."""
        result = invoke(runner, "extract", str(workdir / "absent.html"))
        assert result.exit_code == 2

    def test_config_file(self, runner, workdir, article_page):
        """Test options come from the configuration file."""
        source = workdir / "article.html"
        source.write_text(article_page(extra=PROMO), encoding="utf-8")
        config = workdir / "custom.yaml"
        config.write_text("extraction:\n  filterKeywords: Partner Corner\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config), "--log-level", "ERROR", "extract", str(source)])

        assert result.exit_code == 0, result.output
        assert "Buy a sturdy river boat" not in result.stdout


class TestInspectionCommands:
    """distill candidates / filters / --version"""

    def test_candidates_table(self, runner, workdir, sidebar_article_html):
        """Test every candidate is listed with its scores."""
        source = workdir / "page.html"
        source.write_text(sidebar_article_html, encoding="utf-8")

        result = invoke(runner, "candidates", str(source))

        assert result.exit_code == 0, result.output
        assert "Candidates" in result.stdout
        assert "article" in result.stdout
        assert "selector-match" in result.stdout

    def test_filters_listing(self, runner, workdir):
        """Test the default keywords are listed by category."""
        result = invoke(runner, "filters")

        assert result.exit_code == 0, result.output
        assert "recommendations" in result.stdout
        assert "comments" in result.stdout

    def test_version(self, runner, workdir):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
