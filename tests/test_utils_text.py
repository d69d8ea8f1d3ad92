"""Tests for text utilities."""

from __future__ import annotations

from guidekit.utils.text import AnchorRegistry, slugify, strip_markup


class TestStripMarkup:
    """Test strip_markup function."""

    def test_plain_text(self) -> None:
        assert strip_markup("Plain text") == "Plain text"

    def test_code_and_emphasis(self) -> None:
        assert strip_markup("What is `lateinit` in **Kotlin**?") == "What is lateinit in Kotlin?"

    def test_links(self) -> None:
        assert strip_markup("See [the docs](https://example.com)") == "See the docs"

    def test_html_tags(self) -> None:
        assert strip_markup("Use <kbd>Ctrl</kbd>") == "Use Ctrl"

    def test_intraword_underscores_kept(self) -> None:
        """snake_case identifiers are not emphasis."""
        assert strip_markup("on_create_view") == "on_create_view"

    def test_underscore_emphasis(self) -> None:
        assert strip_markup("_italic_ text") == "italic text"


class TestSlugify:
    """Test slugify function."""

    def test_basic(self) -> None:
        assert slugify("Interview Questions & Answers") == "interview-questions--answers"

    def test_question_heading(self) -> None:
        assert slugify("Q1: What is a data class?") == "q1-what-is-a-data-class"

    def test_inline_code(self) -> None:
        assert slugify("What is `lateinit`?") == "what-is-lateinit"

    def test_keeps_hyphens_and_underscores(self) -> None:
        assert slugify("on_create - lifecycle") == "on_create---lifecycle"

    def test_unicode_letters(self) -> None:
        assert slugify("Café Näme") == "café-näme"


class TestAnchorRegistry:
    """Test AnchorRegistry deduplication."""

    def test_unique_anchors(self) -> None:
        registry = AnchorRegistry()

        assert registry.claim("Example") == "example"
        assert registry.claim("Example") == "example-1"
        assert registry.claim("Example") == "example-2"
        assert registry.claim("Other") == "other"

    def test_registries_are_independent(self) -> None:
        AnchorRegistry().claim("Example")

        assert AnchorRegistry().claim("Example") == "example"
