"""Shared content loading for the web routes."""

from __future__ import annotations

import os
from pathlib import Path

from fastapi import HTTPException

from guidekit.config import AppConfig, load_site_config
from guidekit.index.collection import ContentCollection, LoadStats

CONTENT_DIR_ENV = "GUIDEKIT_CONTENT_DIR"


def resolve_content_dir(content_dir: Path | None) -> Path:
    if content_dir is not None:
        return Path(content_dir).expanduser()
    env = os.environ.get(CONTENT_DIR_ENV)
    if env:
        return Path(env)
    return Path.cwd()


def load_collection(content_dir: Path | None) -> tuple[ContentCollection, LoadStats, AppConfig]:
    resolved = resolve_content_dir(content_dir)
    if not resolved.is_dir():
        raise HTTPException(status_code=404, detail=f"Content directory not found: {resolved}")
    config = load_site_config(resolved)
    collection, stats = ContentCollection.load(resolved, config)
    return collection, stats, config
