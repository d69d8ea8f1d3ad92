"""Tests for Markdown loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from guidekit.ingestion.markdown_loader import (
    FrontMatterError,
    MissingMetadataError,
    extract_nav_links,
    extract_questions,
    extract_sections,
    is_question_index,
    iter_headings,
    load_document,
    question_text,
    split_front_matter,
)


class TestSplitFrontMatter:
    """Test split_front_matter function."""

    def test_with_front_matter(self) -> None:
        data, body, present = split_front_matter("---\nlayout: default\ntitle: Kotlin\n---\n# Body\n")

        assert present is True
        assert data == {"layout": "default", "title": "Kotlin"}
        assert body == "# Body\n"

    def test_without_front_matter(self) -> None:
        data, body, present = split_front_matter("# Body\n")

        assert present is False
        assert data == {}
        assert body == "# Body\n"

    def test_empty_block(self) -> None:
        data, body, present = split_front_matter("---\n---\ntext\n")

        assert present is True
        assert data == {}
        assert body == "text\n"

    def test_dots_close_block(self) -> None:
        data, _, _ = split_front_matter("---\ntitle: A\n...\ntext\n")

        assert data == {"title": "A"}

    def test_unterminated_block_is_body(self) -> None:
        data, body, present = split_front_matter("---\ntitle: A\n")

        assert present is False
        assert data == {}
        assert body == "---\ntitle: A\n"

    def test_byte_order_mark(self) -> None:
        data, _, present = split_front_matter("\ufeff---\ntitle: A\n---\n")

        assert present is True
        assert data == {"title": "A"}

    def test_invalid_yaml(self) -> None:
        with pytest.raises(FrontMatterError):
            split_front_matter("---\ntitle: [unclosed\n---\n")

    def test_non_mapping(self) -> None:
        with pytest.raises(FrontMatterError, match="mapping"):
            split_front_matter("---\n- a\n- b\n---\n")


class TestHeadings:
    """Test heading and section extraction."""

    def test_ignores_fenced_code(self) -> None:
        body = "# Title\n```bash\n# comment\n```\n~~~~\n## not either\n~~~~\n## Real\n"

        headings = list(iter_headings(body))

        assert headings == [(1, 1, "Title"), (8, 2, "Real")]

    def test_shorter_fence_does_not_close(self) -> None:
        body = "````\n```\n# inside\n````\n# outside\n"

        assert [title for _, _, title in iter_headings(body)] == ["outside"]

    def test_closing_hashes_and_indent(self) -> None:
        body = "  ## Setup ##\n#NoSpace\n####### Too deep\n"

        assert list(iter_headings(body)) == [(1, 2, "Setup")]

    def test_duplicate_anchors(self) -> None:
        sections = extract_sections("## Example\n## Example\n")

        assert [section.anchor for section in sections] == ["example", "example-1"]


class TestQuestions:
    """Test question extraction."""

    def test_question_text_prefixes(self) -> None:
        assert question_text("Q1: What is X?") == "What is X?"
        assert question_text("Q12. What is Y?") == "What is Y?"
        assert question_text("Question 3 - What is Z?") == "What is Z?"
        assert question_text("4) Why?") == "Why?"
        assert question_text("**Q5:** What is `Flow`?") == "What is Flow?"
        assert question_text("What is Kotlin 2.0?") == "What is Kotlin 2.0?"

    def test_questions_under_section_only(self) -> None:
        body = (
            "## Overview\n### Not a question\n"
            "## Interview Questions\n### Q1: First?\nAnswer one.\n#### Detail\nMore.\n"
            "### Q2: Second?\nAnswer two.\n"
            "## Summary\n### Also not a question\n"
        )
        sections = extract_sections(body)

        questions = extract_questions(body, sections, document_slug="a.md")

        assert [q.text for q in questions] == ["First?", "Second?"]
        assert questions[0].anchor == "q1-first"
        assert questions[0].answer == "Answer one.\n#### Detail\nMore."
        assert questions[1].answer == "Answer two."
        assert all(q.document_slug == "a.md" for q in questions)

    def test_no_questions_section(self) -> None:
        body = "## Overview\n### Topic\n"

        assert extract_questions(body, extract_sections(body)) == []

    def test_empty_questions_section(self) -> None:
        body = "## Interview Questions\n## Next section\n"

        assert extract_questions(body, extract_sections(body)) == []

    def test_custom_heading_pattern(self) -> None:
        body = "## FAQ\n### Why?\nBecause.\n"

        questions = extract_questions(body, extract_sections(body), questions_heading=r"^faq$")

        assert [q.text for q in questions] == ["Why?"]


class TestNavLinks:
    """Test Previous/Next link extraction."""

    def test_footer_links(self) -> None:
        nav = extract_nav_links("[← Previous: A](a.md) | [Next: C →](c.md)\n")

        assert nav.previous == "a.md"
        assert nav.next == "c.md"

    def test_label_before_link(self) -> None:
        nav = extract_nav_links("**Previous:** [Basics](a.md)\n**Next:** [Flows](c.md#top)\n")

        assert nav.previous == "a.md"
        assert nav.next == "c.md#top"

    def test_last_occurrence_wins(self) -> None:
        nav = extract_nav_links("[Next](early.md)\n\nText.\n\n[Next](late.md)\n")

        assert nav.next == "late.md"

    def test_ignores_code_and_plain_links(self) -> None:
        body = "See [docs](https://developer.android.com).\n```\n[Next](fake.md)\n```\n"

        nav = extract_nav_links(body)

        assert nav.previous is None
        assert nav.next is None

    def test_prose_next_is_not_navigation(self) -> None:
        body = (
            "Next, read the [official docs](https://developer.android.com/jetpack/compose).\n"
            "Next, read the [setup notes](setup.md) first.\n"
        )

        nav = extract_nav_links(body)

        assert nav.next is None

    def test_anchor_links_are_not_navigation(self) -> None:
        nav = extract_nav_links("[Next question](#q2-what-is-a-flow)\n[← Previous](a.md)\n")

        assert nav.next is None
        assert nav.previous == "a.md"

    def test_external_link_with_direction_label(self) -> None:
        nav = extract_nav_links("[Next: Kotlin docs →](https://kotlinlang.org/docs/)\n")

        assert nav.next is None


class TestQuestionIndexPages:
    """Test recognising a page that is itself a question index."""

    def test_count_headings(self) -> None:
        sections = extract_sections("# Index\n\n## Kotlin Basics (2 Questions)\n\n1. A\n2. B\n")

        assert is_question_index(sections)

    def test_regular_page(self) -> None:
        sections = extract_sections("# Kotlin\n\n## Interview Questions\n\n### Q1: What is a val?\n")

        assert not is_question_index(sections)


class TestLoadDocument:
    """Test load_document function."""

    def test_full_document(self, guide_dir: Path) -> None:
        document = load_document(guide_dir / "01-kotlin.md", guide_dir)

        assert document.slug == "01-kotlin.md"
        assert document.title == "Kotlin Basics"
        assert document.title_source == "front_matter"
        assert document.order == 1.0
        assert document.front_matter["layout"] == "default"
        assert [q.text for q in document.questions] == [
            "What is a data class?",
            "What is lateinit?",
        ]
        assert document.nav.next == "02-coroutines.md"
        assert document.nav.previous is None
        assert len(document.sha256) == 64

    def test_title_from_heading(self, guide_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Without front matter the first level-1 heading is the title."""
        with caplog.at_level(logging.WARNING):
            document = load_document(guide_dir / "03-compose.md", guide_dir)

        assert document.title == "Jetpack Compose"
        assert document.title_source == "heading"
        assert document.order is None
        assert "no front-matter title" in caplog.text

    def test_title_from_filename(self, tmp_path: Path) -> None:
        page = tmp_path / "notes.md"
        page.write_text("Just text.\n", encoding="utf-8")

        document = load_document(page, tmp_path)

        assert document.title == "notes"
        assert document.title_source == "filename"

    def test_strict_mode_requires_front_matter(self, guide_dir: Path) -> None:
        with pytest.raises(MissingMetadataError, match="no front matter"):
            load_document(guide_dir / "03-compose.md", guide_dir, require_front_matter=True)

    def test_strict_mode_requires_title(self, tmp_path: Path) -> None:
        page = tmp_path / "page.md"
        page.write_text("---\nlayout: default\n---\n# Page\n", encoding="utf-8")

        with pytest.raises(MissingMetadataError, match="no title"):
            load_document(page, tmp_path, require_front_matter=True)

    def test_order_fallbacks(self, tmp_path: Path) -> None:
        page = tmp_path / "page.md"
        page.write_text("---\ntitle: Page\norder: 3\n---\n", encoding="utf-8")

        assert load_document(page, tmp_path).order == 3.0

    def test_non_numeric_order_ignored(self, tmp_path: Path) -> None:
        page = tmp_path / "page.md"
        page.write_text("---\ntitle: Page\nnav_order: first\n---\n", encoding="utf-8")

        assert load_document(page, tmp_path).order is None

    def test_slug_in_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / "topics").mkdir()
        page = tmp_path / "topics" / "page.md"
        page.write_text("---\ntitle: Page\n---\n", encoding="utf-8")

        assert load_document(page, tmp_path).slug == "topics/page.md"

    def test_slug_without_root(self, tmp_path: Path) -> None:
        page = tmp_path / "page.md"
        page.write_text("---\ntitle: Page\n---\n", encoding="utf-8")

        assert load_document(page).slug == "page.md"
