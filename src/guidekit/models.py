"""Core guidekit data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class Section:
    """Heading inside a document, addressable by its anchor."""

    title: str
    level: int
    anchor: str
    line: int


@dataclass(slots=True)
class QuestionEntry:
    """Question heading paired with its answer text."""

    text: str
    anchor: str
    answer: str
    document_slug: str


@dataclass(slots=True)
class NavLinks:
    """Raw targets of a page's Previous and Next links."""

    previous: Optional[str] = None
    next: Optional[str] = None


@dataclass(slots=True)
class Document:
    """A Markdown page with its front matter and derived structure."""

    path: Path
    slug: str
    title: str
    body: str
    sha256: str
    order: Optional[float] = None
    front_matter: Dict[str, Any] = field(default_factory=dict)
    sections: List[Section] = field(default_factory=list)
    questions: List[QuestionEntry] = field(default_factory=list)
    nav: NavLinks = field(default_factory=NavLinks)
    title_source: str = "front_matter"


@dataclass(slots=True)
class Topic:
    """One index section: a page title and the questions it holds."""

    title: str
    questions: List[QuestionEntry]
    document_slug: Optional[str] = None
    declared_count: Optional[int] = None

    @property
    def count(self) -> int:
        return len(self.questions)


@dataclass(slots=True)
class TableOfContents:
    """The whole question index, topics in guide order."""

    title: str
    topics: List[Topic] = field(default_factory=list)

    @property
    def question_count(self) -> int:
        return sum(topic.count for topic in self.topics)
