"""Question index (table of contents) building, rendering and parsing."""

from __future__ import annotations

import logging
import posixpath
import re
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote, unquote

import yaml

from guidekit.config import DEFAULT_INDEX_TITLE
from guidekit.index.collection import ContentCollection
from guidekit.ingestion.markdown_loader import DECLARED_COUNT, iter_body_lines, split_front_matter
from guidekit.models import QuestionEntry, TableOfContents, Topic
from guidekit.utils.text import slugify, strip_markup

LOGGER = logging.getLogger(__name__)

_TOPIC_HEADING = re.compile(r"^ {0,3}#{2,6}[ \t]+(.*?)[ \t]*#*[ \t]*$")
_LIST_ITEM = re.compile(r"^(?P<indent>[ \t]*)(?:\d+[.)]|[-*+])[ \t]+(?P<text>.+)$")
_LINK_LABEL = re.compile(r"^\[(?P<label>(?:[^\]\\]|\\.)+)\]\((?P<target>[^)\s]*)[^)]*\)")


def build_toc(
    entries: Sequence[Tuple[str, Sequence[str]]], title: str = DEFAULT_INDEX_TITLE
) -> TableOfContents:
    """Build an index from ``(topic, [question, ...])`` pairs, keeping input order."""
    topics = [
        Topic(
            title=topic,
            questions=[
                QuestionEntry(text=question, anchor=slugify(question), answer="", document_slug="")
                for question in questions
            ],
        )
        for topic, questions in entries
    ]
    return TableOfContents(title=title, topics=topics)


class TocBuilder:
    """Derives the question index from a loaded collection."""

    def __init__(self, collection: ContentCollection, *, title: str = DEFAULT_INDEX_TITLE) -> None:
        self.collection = collection
        self.title = title

    def build(self) -> TableOfContents:
        topics: List[Topic] = []
        for document in self.collection:
            if not document.questions:
                LOGGER.debug("No questions in %s", document.slug)
                continue
            topics.append(
                Topic(
                    title=document.title,
                    questions=list(document.questions),
                    document_slug=document.slug,
                )
            )
        return TableOfContents(title=self.title, topics=topics)

    @classmethod
    def from_collection(
        cls, collection: ContentCollection, *, title: str = DEFAULT_INDEX_TITLE
    ) -> TableOfContents:
        return cls(collection, title=title).build()


def count_label(count: int) -> str:
    return f"{count} Question" if count == 1 else f"{count} Questions"


def _link_path(slug: str, link_suffix: str, base_dir: str) -> str:
    stem, ext = posixpath.splitext(slug)
    path = slug if link_suffix == ext else stem + link_suffix
    if base_dir:
        path = posixpath.relpath(path, base_dir)
    return quote(path, safe="/")


def _escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")


def render_markdown(
    toc: TableOfContents,
    *,
    link_suffix: str = ".md",
    layout: Optional[str] = None,
    base_dir: str = "",
) -> str:
    """Render ``toc`` as Markdown.

    Topic counts come from the question lists. The output is a pure function
    of its inputs and ends with a single newline.
    """
    parts: List[str] = []
    if layout:
        front_matter = yaml.safe_dump(
            {"layout": layout, "title": toc.title},
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
        parts.append(f"---\n{front_matter}---\n")
    parts.append(f"# {toc.title}\n")

    for topic in toc.topics:
        lines = [f"## {topic.title} ({count_label(topic.count)})", ""]
        for number, question in enumerate(topic.questions, start=1):
            label = _escape_label(question.text)
            if topic.document_slug:
                target = _link_path(topic.document_slug, link_suffix, base_dir)
                lines.append(f"{number}. [{label}]({target}#{question.anchor})")
            else:
                lines.append(f"{number}. {label}")
        parts.append("\n".join(lines) + "\n")

    return "\n".join(parts)


def parse_index(text: str) -> TableOfContents:
    """Read an existing index back into topics carrying their declared counts.

    Only headings of the form ``Title (N Questions)`` start a topic. List
    items at the shallowest indentation under such a heading are its
    questions; nested items are ignored.
    """
    front_matter, body, _ = split_front_matter(text)
    title = str(front_matter.get("title") or "")
    topics: List[Topic] = []
    current: Optional[Topic] = None
    item_indent: Optional[int] = None

    for _, line, in_code in iter_body_lines(body):
        if in_code:
            continue
        if not title and line.startswith("# "):
            title = strip_markup(line[2:].strip().rstrip("#").strip())
            continue
        heading = _TOPIC_HEADING.match(line)
        if heading:
            declared = DECLARED_COUNT.match(strip_markup(heading.group(1)))
            if declared:
                current = Topic(
                    title=declared.group("title").strip(),
                    questions=[],
                    declared_count=int(declared.group("count")),
                )
                topics.append(current)
            else:
                current = None
            item_indent = None
            continue
        if current is None:
            continue
        item = _LIST_ITEM.match(line)
        if not item:
            continue
        indent = len(item.group("indent").expandtabs(4))
        if item_indent is None:
            item_indent = indent
        if indent != item_indent:
            continue
        question = _parse_item(item.group("text"))
        if current.document_slug is None and question.document_slug:
            current.document_slug = question.document_slug
        current.questions.append(question)

    return TableOfContents(title=title, topics=topics)


def _parse_item(text: str) -> QuestionEntry:
    link = _LINK_LABEL.match(text.strip())
    if not link:
        return QuestionEntry(text=strip_markup(text), anchor="", answer="", document_slug="")
    slug, _, anchor = link.group("target").partition("#")
    label = re.sub(r"\\(.)", r"\1", link.group("label"))
    return QuestionEntry(text=label.strip(), anchor=anchor, answer="", document_slug=unquote(slug))
