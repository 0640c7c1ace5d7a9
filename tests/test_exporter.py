"""Tests for article export templates."""

import pytest

from vid2blog.core.exporter import available_templates, export_article, slugify


class TestSlugify:
    def test_basic(self):
        assert slugify("Lightning Payments, Explained!") == "lightning-payments-explained"

    def test_empty_falls_back(self):
        assert slugify("???") == "article"


class TestAvailableTemplates:
    def test_lists_per_format(self):
        assert available_templates("markdown") == ["default", "blog", "minimal"]
        assert available_templates("html") == ["default", "article"]
        assert available_templates("plain") == ["default"]

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unknown export format"):
            available_templates("pdf")


class TestMarkdown:
    def test_default(self, article):
        result = export_article(article)
        assert result.filename == "lightning-payments-explained.md"
        assert result.mime_type == "text/markdown"
        assert result.content.startswith("# Lightning Payments, Explained\n")
        assert "**Channel:** Protocol Explained" in result.content
        assert "## Opening a Channel" in result.content
        assert "### Funding" in result.content
        assert "## Conclusion" in result.content
        assert "\n\n\n" not in result.content

    def test_without_metadata(self, article):
        result = export_article(article, include_metadata=False)
        assert "**Channel:**" not in result.content

    def test_blog_links_source(self, article):
        result = export_article(article, template="blog")
        assert "(https://youtube.com/watch?v=dQw4w9WgXcQ)" in result.content

    def test_minimal_skips_subsections(self, article):
        result = export_article(article, template="minimal")
        assert "### Funding" not in result.content

    def test_text_not_escaped(self, article):
        assert "<peers> & nodes" in export_article(article).content

    def test_unknown_template(self, article):
        with pytest.raises(ValueError, match="Unknown markdown template: fancy"):
            export_article(article, template="fancy")


class TestHtml:
    def test_default(self, article):
        result = export_article(article, "html")
        assert result.filename.endswith(".html")
        assert result.content.startswith("<!DOCTYPE html>")
        assert "<h2>Opening a Channel</h2>" in result.content
        assert '<span class="tag">lightning</span>' in result.content

    def test_escapes_content(self, article):
        result = export_article(article, "html")
        assert "&lt;peers&gt; &amp; nodes" in result.content

    def test_article_template(self, article):
        result = export_article(article, "html", template="article")
        assert "<article>" in result.content
        assert "Based on" in result.content


class TestPlain:
    def test_default(self, article):
        result = export_article(article, "plain")
        assert result.filename.endswith(".txt")
        assert result.content.startswith("LIGHTNING PAYMENTS, EXPLAINED\n")
        assert "OPENING A CHANNEL" in result.content
        assert "Reading time: 1 minutes" in result.content
