"""Application configuration defaults."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_INDEX_FILE = "QUESTIONS_INDEX.md"
DEFAULT_INDEX_TITLE = "Questions Index"
DEFAULT_QUESTIONS_HEADING = r"interview questions"
SITE_CONFIG_NAME = "_config.yml"


@dataclass(slots=True)
class AppConfig:
    content_dir: Path = Path(".")
    index_file: Path = Path(DEFAULT_INDEX_FILE)
    index_title: str = DEFAULT_INDEX_TITLE
    questions_heading: str = DEFAULT_QUESTIONS_HEADING
    link_suffix: str = ".md"
    layout: str = "default"
    require_front_matter: bool = False
    exclude: List[str] = field(default_factory=list)

    def resolve_index_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.index_file).is_absolute():
            return Path(self.index_file)
        if base_dir is None:
            base_dir = Path(self.content_dir)
        return base_dir / self.index_file


def load_site_config(content_dir: Path, config: AppConfig | None = None) -> AppConfig:
    """Apply the Jekyll site's ``_config.yml`` (title, exclude) on top of ``config``."""
    config = config or AppConfig(content_dir=content_dir)
    config = replace(config, content_dir=content_dir)

    site_file = Path(content_dir) / SITE_CONFIG_NAME
    if not site_file.is_file():
        return config

    with site_file.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        LOGGER.warning("Ignoring %s: expected a mapping", site_file)
        return config

    title = data.get("title")
    if title and config.index_title == DEFAULT_INDEX_TITLE:
        config.index_title = f"{title} - Questions Index"

    exclude = data.get("exclude") or []
    if isinstance(exclude, list):
        config.exclude = [*config.exclude, *(str(item) for item in exclude)]

    LOGGER.debug("Loaded site config from %s", site_file)
    return config
