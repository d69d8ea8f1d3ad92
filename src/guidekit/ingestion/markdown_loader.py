"""Markdown loading: front matter, headings, questions and navigation links.

Front matter is the YAML block Jekyll reads from the top of a page, delimited
by ``---`` lines. Everything after it is the page body, which is only scanned
for structure here, never rendered.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from guidekit.config import DEFAULT_QUESTIONS_HEADING
from guidekit.models import Document, NavLinks, QuestionEntry, Section
from guidekit.utils.files import compute_sha256
from guidekit.utils.text import AnchorRegistry, strip_markup

LOGGER = logging.getLogger(__name__)

_FRONT_MATTER_OPEN = "---"
_FRONT_MATTER_CLOSE = ("---", "...")

_HEADING = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*)$")
_CLOSING_HASHES = re.compile(r"[ \t]+#+[ \t]*$")
_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_QUESTION_PREFIX = re.compile(
    r"^(?:q(?:uestion)?\s*\d+\s*[:.)\-]?|\d+\s*[.):\-])\s*", re.IGNORECASE
)
_LINK = re.compile(r"\[([^\]]+)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
_PREVIOUS_HINT = re.compile(r"\bprev(?:ious)?\b|←|&larr;|«", re.IGNORECASE)
_NEXT_HINT = re.compile(r"\bnext\b|→|&rarr;|»", re.IGNORECASE)
_NAV_LEAD_IN = re.compile(
    r"[*_]{0,2}\s*(?:←|«|&larr;)?\s*(?:prev(?:ious)?|next)(?:\s+(?:page|chapter|topic))?"
    r"\s*:?\s*[*_]{0,2}\s*:?\s*(?:→|»|&rarr;)?",
    re.IGNORECASE,
)
_LEAD_IN_SEPARATORS = " \t|\u00b7\u2013-"
_EXTERNAL_TARGET = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
DECLARED_COUNT = re.compile(r"^(?P<title>.*?)\s*\((?P<count>\d+)\s+questions?\)$", re.IGNORECASE)


class FrontMatterError(ValueError):
    """Raised when a front-matter block cannot be parsed."""


class MissingMetadataError(ValueError):
    """Raised in strict mode when a document has no front-matter title."""


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str, bool]:
    """Split ``text`` into (front matter mapping, body, has_front_matter)."""
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _FRONT_MATTER_OPEN:
        return {}, text, False

    for index in range(1, len(lines)):
        if lines[index].rstrip() in _FRONT_MATTER_CLOSE:
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        # An unterminated block is body text, as Jekyll treats it.
        return {}, text, False

    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid front matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )
    return data, body, True


def iter_body_lines(body: str) -> Iterator[Tuple[int, str, bool]]:
    """Yield (line number, line, inside_code_fence) for every body line."""
    fence: Optional[str] = None
    for number, line in enumerate(body.splitlines(), start=1):
        match = _FENCE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                yield number, line, True
                continue
            yield number, line, False
        else:
            if (
                match
                and match.group(1)[0] == fence[0]
                and len(match.group(1)) >= len(fence)
                and not line.strip()[len(match.group(1)) :].strip()
            ):
                fence = None
            yield number, line, True


def iter_headings(body: str) -> Iterator[Tuple[int, int, str]]:
    """Yield (line number, level, raw title) for ATX headings outside code fences."""
    for number, line, in_code in iter_body_lines(body):
        if in_code:
            continue
        match = _HEADING.match(line)
        if not match:
            continue
        title = _CLOSING_HASHES.sub("", match.group(2)).strip()
        if title:
            yield number, len(match.group(1)), title


def extract_sections(body: str) -> List[Section]:
    registry = AnchorRegistry()
    return [
        Section(title=strip_markup(title), level=level, anchor=registry.claim(title), line=number)
        for number, level, title in iter_headings(body)
    ]


def question_text(heading: str) -> str:
    """Visible question title without ``Q1:`` / ``1.`` numbering."""
    return _QUESTION_PREFIX.sub("", strip_markup(heading)).strip()


def extract_questions(
    body: str,
    sections: List[Section],
    *,
    document_slug: str = "",
    questions_heading: str = DEFAULT_QUESTIONS_HEADING,
) -> List[QuestionEntry]:
    """Collect the headings nested under every "Interview Questions" section.

    The shallowest heading level inside such a section is the question level;
    deeper headings belong to an answer.
    """
    pattern = re.compile(questions_heading, re.IGNORECASE)
    lines = body.splitlines()
    questions: List[QuestionEntry] = []

    for position, section in enumerate(sections):
        if not pattern.search(section.title):
            continue
        block: List[Section] = []
        for candidate in sections[position + 1 :]:
            if candidate.level <= section.level:
                break
            block.append(candidate)
        if not block:
            continue

        question_level = min(candidate.level for candidate in block)
        heads = [candidate for candidate in block if candidate.level == question_level]
        for head in heads:
            end = _answer_end(sections, head)
            answer = "\n".join(lines[head.line : end - 1 if end else len(lines)]).strip()
            questions.append(
                QuestionEntry(
                    text=question_text(head.title),
                    anchor=head.anchor,
                    answer=answer,
                    document_slug=document_slug,
                )
            )
    return questions


def _answer_end(sections: List[Section], head: Section) -> Optional[int]:
    """Line number of the heading that closes ``head``'s answer, if any."""
    started = False
    for candidate in sections:
        if candidate is head:
            started = True
            continue
        if started and candidate.level <= head.level:
            return candidate.line
    return None


def extract_nav_links(body: str) -> NavLinks:
    """Find Previous/Next link targets; the last occurrence of each wins.

    A link counts when its label names a direction, or when the only text
    between it and the previous link is a lead-in such as ``**Next:**``.
    Links to other sites and to anchors on the same page never count.
    """
    nav = NavLinks()
    for _, line, in_code in iter_body_lines(body):
        if in_code:
            continue
        cursor = 0
        for match in _LINK.finditer(line):
            label = match.group(1)
            prefix = line[cursor : match.start()].strip(_LEAD_IN_SEPARATORS)
            cursor = match.end()
            target = match.group(2)
            if target.startswith("#") or _EXTERNAL_TARGET.match(target):
                continue
            direction = _nav_direction(label)
            if direction is None and _NAV_LEAD_IN.fullmatch(prefix):
                direction = _nav_direction(prefix)
            if direction == "previous":
                nav.previous = target
            elif direction == "next":
                nav.next = target
    return nav


def _nav_direction(text: str) -> Optional[str]:
    is_previous = bool(_PREVIOUS_HINT.search(text))
    is_next = bool(_NEXT_HINT.search(text))
    if is_previous and not is_next:
        return "previous"
    if is_next and not is_previous:
        return "next"
    return None


def is_question_index(sections: List[Section]) -> bool:
    """True when the page is itself a question index (``Topic (N Questions)`` headings)."""
    return any(section.level >= 2 and DECLARED_COUNT.match(section.title) for section in sections)


def _parse_order(value: Any, path: Path) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-numeric order %r in %s", value, path)
        return None


def _slug_for(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return path.name


def load_document(
    path: Path,
    root: Optional[Path] = None,
    *,
    questions_heading: str = DEFAULT_QUESTIONS_HEADING,
    require_front_matter: bool = False,
) -> Document:
    """Read a Markdown file into a :class:`Document`.

    Title resolution is front-matter ``title``, then the first level-1
    heading, then the filename stem. With ``require_front_matter`` a missing
    front-matter title raises :class:`MissingMetadataError` instead.
    """
    text = path.read_text(encoding="utf-8")
    front_matter, body, has_front_matter = split_front_matter(text)
    slug = _slug_for(path, root)

    sections = extract_sections(body)
    title = front_matter.get("title")
    title_source = "front_matter"
    if title:
        title = strip_markup(str(title))
    if not title:
        if require_front_matter:
            reason = "no front matter" if not has_front_matter else "no title in front matter"
            raise MissingMetadataError(f"{path}: {reason}")
        heading = next((section for section in sections if section.level == 1), None)
        if heading is not None:
            title, title_source = heading.title, "heading"
        else:
            title, title_source = path.stem, "filename"
        LOGGER.warning("%s has no front-matter title, using %s %r", path, title_source, title)

    order = _parse_order(front_matter.get("nav_order", front_matter.get("order")), path)

    return Document(
        path=path,
        slug=slug,
        title=str(title),
        body=body,
        sha256=compute_sha256(path),
        order=order,
        front_matter=front_matter,
        sections=sections,
        questions=extract_questions(
            body, sections, document_slug=slug, questions_heading=questions_heading
        ),
        nav=extract_nav_links(body),
        title_source=title_source,
    )
