"""Utility helpers for working with files."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Iterable, Iterator, Sequence

MARKDOWN_SUFFIXES = (".md", ".markdown")

# Jekyll never publishes these, so they are never part of the guide.
_ALWAYS_EXCLUDED = ("vendor", "node_modules")

_DIGITS = re.compile(r"(\d+)")


def _is_excluded(path: Path, root: Path, exclude: Sequence[str]) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    for part in parts:
        if part.startswith(("_", ".")) or part in _ALWAYS_EXCLUDED:
            return True
    relative = "/".join(parts)
    return any(relative == item.strip("/") or relative.startswith(item.strip("/") + "/") for item in exclude)


def iter_markdown_paths(
    inputs: Iterable[Path], *, exclude: Sequence[str] = ()
) -> Iterator[Path]:
    """Yield Markdown paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            children = sorted(
                (child for child in item.rglob("*") if child.suffix.lower() in MARKDOWN_SUFFIXES),
                key=natural_key,
            )
            for child in children:
                if child.is_file() and not _is_excluded(child, item, exclude):
                    yield child
        elif item.is_file() and item.suffix.lower() in MARKDOWN_SUFFIXES:
            yield item


def natural_key(path: Path) -> tuple:
    """Sort key comparing digit runs numerically, so 2-x.md precedes 10-x.md."""
    parts = []
    for piece in path.as_posix().lower().split("/"):
        parts.append(tuple(int(tok) if tok.isdigit() else tok for tok in _DIGITS.split(piece)))
    return tuple(parts)


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
