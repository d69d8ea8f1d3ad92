"""Editorial consistency checks over a content collection and its index."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from guidekit.index.collection import ContentCollection
from guidekit.index.toc import TocBuilder, parse_index
from guidekit.models import Document
from guidekit.utils.text import strip_markup

LOGGER = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"

_BACK_DIRECTION = {"next": "previous", "previous": "next"}


@dataclass(slots=True)
class Issue:
    """One finding of a check, tied to the page or index it was found in."""

    code: str
    message: str
    path: str
    severity: str = ERROR


@dataclass(slots=True)
class ValidationReport:
    """Issues collected over a validation run."""

    issues: List[Issue] = field(default_factory=list)

    def extend(self, issues: List[Issue]) -> None:
        self.issues.extend(issues)

    @property
    def errors(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors


def _title_key(title: str) -> str:
    return strip_markup(title).casefold()


def _nav_target(document: Document, direction: str) -> Optional[str]:
    return document.nav.next if direction == "next" else document.nav.previous


def check_navigation(collection: ContentCollection) -> List[Issue]:
    """Next/Previous links must exist and point back at each other."""
    issues: List[Issue] = []
    for document in collection:
        for direction, back in _BACK_DIRECTION.items():
            target = _nav_target(document, direction)
            if target is None:
                continue
            linked = collection.resolve_link(document, target)
            if linked is None:
                issues.append(
                    Issue(
                        code=f"broken-{direction}",
                        message=f"{direction.capitalize()} link {target!r} is not a document in the guide",
                        path=document.slug,
                    )
                )
                continue

            back_target = _nav_target(linked, back)
            returned = collection.resolve_link(linked, back_target) if back_target else None
            if returned is not document:
                found = repr(back_target) if back_target else "nothing"
                issues.append(
                    Issue(
                        code=f"asymmetric-{direction}",
                        message=(
                            f"{direction.capitalize()} link points to {linked.slug}, "
                            f"whose {back} link is {found}"
                        ),
                        path=document.slug,
                    )
                )
    return issues


def check_declared_counts(text: str, path: str = "") -> List[Issue]:
    """Every ``Title (N Questions)`` heading must list exactly N items."""
    issues: List[Issue] = []
    for topic in parse_index(text).topics:
        if topic.declared_count is None or topic.declared_count == topic.count:
            continue
        issues.append(
            Issue(
                code="count-mismatch",
                message=(
                    f"{topic.title!r} declares {topic.declared_count} questions "
                    f"but lists {topic.count}"
                ),
                path=path,
            )
        )
    return issues


def check_index_drift(collection: ContentCollection, index_text: str, path: str = "") -> List[Issue]:
    """Compare an existing index with the one derived from the documents."""
    derived = TocBuilder.from_collection(collection)
    existing = parse_index(index_text)
    existing_by_title: Dict[str, int] = {}
    for topic in existing.topics:
        declared = topic.declared_count if topic.declared_count is not None else topic.count
        existing_by_title[_title_key(topic.title)] = declared

    issues: List[Issue] = []
    derived_titles = set()
    for topic in derived.topics:
        key = _title_key(topic.title)
        derived_titles.add(key)
        if key not in existing_by_title:
            issues.append(
                Issue(
                    code="missing-topic",
                    message=f"{topic.title!r} ({topic.count} questions) is not in the index",
                    path=path,
                )
            )
        elif existing_by_title[key] != topic.count:
            issues.append(
                Issue(
                    code="stale-count",
                    message=(
                        f"{topic.title!r} has {topic.count} questions in {topic.document_slug} "
                        f"but the index says {existing_by_title[key]}"
                    ),
                    path=path,
                )
            )

    for topic in existing.topics:
        if _title_key(topic.title) not in derived_titles:
            issues.append(
                Issue(
                    code="unknown-topic",
                    message=f"{topic.title!r} does not match any document with questions",
                    path=path,
                    severity=WARNING,
                )
            )
    return issues


def validate(
    collection: ContentCollection, index_text: Optional[str] = None, index_path: str = ""
) -> ValidationReport:
    """Run every check; index checks only when an index is given."""
    report = ValidationReport()
    report.extend(check_navigation(collection))
    if index_text is not None:
        report.extend(check_declared_counts(index_text, index_path))
        report.extend(check_index_drift(collection, index_text, index_path))
    LOGGER.info(
        "Validation finished: %d errors, %d warnings", len(report.errors), len(report.warnings)
    )
    return report
