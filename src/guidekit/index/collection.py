"""Content collection: loads every page of a guide and resolves links between them."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence
from urllib.parse import unquote

from guidekit.config import AppConfig
from guidekit.ingestion.markdown_loader import is_question_index, load_document
from guidekit.models import Document
from guidekit.utils.files import MARKDOWN_SUFFIXES, iter_markdown_paths, natural_key

LOGGER = logging.getLogger(__name__)

_EXTERNAL = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
_LIQUID_LINK = re.compile(r"^\{%-?\s*link\s+(\S+?)\s*-?%\}$")
_LIQUID_BASEURL = re.compile(r"^\{\{-?\s*site\.baseurl\s*-?\}\}")


def find_markdown(paths: Sequence[Path], exclude: Sequence[str] = ()) -> list[Path]:
    """Find all Markdown files under the given paths."""
    return list(iter_markdown_paths(paths, exclude=exclude))


@dataclass(slots=True)
class LoadStats:
    loaded: int = 0
    skipped: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "loaded":
            self.loaded += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


def _sort_key(document: Document) -> tuple:
    return (
        document.order is None,
        document.order if document.order is not None else 0.0,
        natural_key(Path(document.slug)),
    )


class ContentCollection:
    """Ordered set of documents rooted at a content directory."""

    def __init__(self, root: Path, documents: Sequence[Document] = ()) -> None:
        self.root = Path(root)
        self.documents: List[Document] = sorted(documents, key=_sort_key)
        self._by_slug: Dict[str, Document] = {doc.slug: doc for doc in self.documents}
        self._by_permalink: Dict[str, Document] = {}
        for doc in self.documents:
            permalink = doc.front_matter.get("permalink")
            if isinstance(permalink, str) and permalink.strip("/"):
                self._by_permalink[permalink.strip("/")] = doc

    @classmethod
    def load(
        cls, root: Path, config: AppConfig | None = None
    ) -> tuple["ContentCollection", LoadStats]:
        """Load every Markdown page under ``root``.

        A page that cannot be read is logged and counted as failed; loading
        carries on with the remaining pages.
        """
        config = config or AppConfig(content_dir=root)
        root = Path(root)
        stats = LoadStats()
        index_path = config.resolve_index_path(root).resolve()

        documents: List[Document] = []
        for path in find_markdown([root], config.exclude):
            if path.resolve() == index_path:
                LOGGER.debug("Skipping generated index %s", path)
                stats.increment("skipped", path)
                continue
            try:
                LOGGER.debug("Loading: %s", path)
                document = load_document(
                    path,
                    root,
                    questions_heading=config.questions_heading,
                    require_front_matter=config.require_front_matter,
                )
            except (OSError, UnicodeDecodeError, ValueError) as exc:
                LOGGER.error("Failed to load %s: %s", path, exc)
                stats.increment("failed", path)
                continue
            if is_question_index(document.sections):
                LOGGER.info("Skipping question index %s", path)
                stats.increment("skipped", path)
                continue
            documents.append(document)
            stats.increment("loaded", path)

        if not documents:
            LOGGER.warning("No Markdown documents found under %s", root)
        return cls(root, documents), stats

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def get(self, slug: str) -> Document:
        try:
            return self._by_slug[slug]
        except KeyError:
            raise KeyError(f"Unknown document: {slug}") from None

    def find(self, slug: str) -> Optional[Document]:
        return self._by_slug.get(slug)

    def resolve_link(self, source: Document, target: str) -> Optional[Document]:
        """Map a link written in ``source`` to a document of this collection.

        Handles relative paths, ``#anchor`` suffixes, ``.html`` and
        extensionless permalinks, and the Jekyll ``{% link %}`` tag. External
        URLs resolve to ``None``.
        """
        target = target.strip()
        liquid = _LIQUID_LINK.match(target)
        if liquid:
            return self.find(liquid.group(1).lstrip("/"))
        target = _LIQUID_BASEURL.sub("", target)
        if _EXTERNAL.match(target):
            return None

        path = unquote(target.split("#", 1)[0].split("?", 1)[0])
        if not path:
            return source

        if path.startswith("/"):
            joined = path.lstrip("/")
        else:
            joined = posixpath.join(posixpath.dirname(source.slug), path)
        normalized = posixpath.normpath(joined) if joined else ""
        if normalized in ("", "."):
            normalized = ""
        if normalized.startswith(".."):
            return None

        for candidate in _candidates(normalized, path.endswith("/")):
            if candidate in self._by_slug:
                return self._by_slug[candidate]
        return self._by_permalink.get(normalized.strip("/"))


def _candidates(normalized: str, is_directory: bool) -> Iterator[str]:
    if is_directory or not normalized:
        prefix = f"{normalized}/" if normalized else ""
        for suffix in MARKDOWN_SUFFIXES:
            yield f"{prefix}index{suffix}"
        yield f"{prefix}README.md"
        return

    yield normalized
    stem, ext = posixpath.splitext(normalized)
    if ext.lower() in (".html", ".htm"):
        for suffix in MARKDOWN_SUFFIXES:
            yield stem + suffix
    elif ext.lower() not in MARKDOWN_SUFFIXES:
        for suffix in MARKDOWN_SUFFIXES:
            yield normalized + suffix
        yield f"{normalized}/index.md"
