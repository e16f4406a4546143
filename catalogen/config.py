"""
Configuration management for Catalogen.

Handles reading/writing the site's INI configuration file with
cross-platform path handling and type-safe accessors.

I remember where your data lives and where the pages go, so the
build doesn't have to guess. It would guess wrong.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "catalogen.ini"

DUPLICATE_SLUG_MODES = ("error", "warn")


def _find_base_path() -> Path:
    """Find the site base path.

    Resolution order:
    1. CATALOGEN_SITE_DIR environment variable
    2. The current working directory
    """
    env_path = os.environ.get("CATALOGEN_SITE_DIR")
    if env_path:
        return Path(env_path).resolve()

    return Path.cwd()


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class CatalogConfig:
    """Configuration manager for a catalog build.

    Reads configuration from ``catalogen.ini`` in the site directory and
    provides type-safe accessors with default value fallbacks.
    """

    # Default configuration values
    DEFAULTS = {
        "catalog": {
            "data_dir": "data/catalog",
            "extensions": ".json",
            "aggregate_marker": "total_tools",
            "fallback_id_prefix": "item",
            "default_category": "",
        },
        "routes": {
            "base_route": "/catalog",
            "output_dir": ".catalogen/data",
            "on_duplicate_slug": "error",
        },
        "similarity": {
            "limit": "3",
            "seed": "",
        },
        "build": {
            "parallel_workers": "4",
        },
        "components": {
            "item": "@theme/CatalogItemPage",
            "list": "@theme/CatalogListPage",
            "categories_index": "@theme/CatalogCategoriesListPage",
            "category_list": "@theme/CatalogListPage",
        },
    }

    def __init__(self, base_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            base_path: Site root. If None, auto-detected.
        """
        self.base_path = Path(base_path).resolve() if base_path else _find_base_path()
        self.config_path = self.base_path / CONFIG_FILE_NAME

        self._config = configparser.ConfigParser()
        self._load_defaults()
        self._load_user_config()

    def _load_defaults(self) -> None:
        """Load default configuration values."""
        for section, values in self.DEFAULTS.items():
            if not self._config.has_section(section):
                self._config.add_section(section)
            for key, value in values.items():
                self._config.set(section, key, value)

    def _load_user_config(self) -> None:
        """Load user configuration from catalogen.ini if it exists."""
        if self.config_path.exists():
            self._config.read(str(self.config_path))
            logger.debug("Loaded configuration from %s", self.config_path)

    def save(self) -> None:
        """Save current configuration to catalogen.ini."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            self._config.write(f)

    def _resolve(self, raw: str) -> Path:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = self.base_path / path
        return path

    # --- Type-safe property accessors ---

    @property
    def data_dir(self) -> Path:
        return self._resolve(self._config.get("catalog", "data_dir", fallback="data/catalog"))

    @property
    def output_dir(self) -> Path:
        return self._resolve(self._config.get("routes", "output_dir", fallback=".catalogen/data"))

    @property
    def extensions(self) -> List[str]:
        raw = self._config.get("catalog", "extensions", fallback=".json")
        return [e.lower() for e in _split_list(raw)]

    @property
    def aggregate_marker(self) -> str:
        return self._config.get("catalog", "aggregate_marker", fallback="total_tools")

    @property
    def fallback_id_prefix(self) -> str:
        return self._config.get("catalog", "fallback_id_prefix", fallback="item")

    @property
    def default_category(self) -> Optional[str]:
        value = self._config.get("catalog", "default_category", fallback="").strip()
        return value or None

    @property
    def base_route(self) -> str:
        raw = self._config.get("routes", "base_route", fallback="/catalog").strip()
        return "/" + raw.strip("/")

    @property
    def on_duplicate_slug(self) -> str:
        mode = self._config.get("routes", "on_duplicate_slug", fallback="error").strip().lower()
        if mode not in DUPLICATE_SLUG_MODES:
            raise ValueError(
                f"Invalid on_duplicate_slug '{mode}', expected one of {', '.join(DUPLICATE_SLUG_MODES)}"
            )
        return mode

    @property
    def similarity_limit(self) -> int:
        return self._config.getint("similarity", "limit", fallback=3)

    @property
    def seed(self) -> Optional[int]:
        raw = self._config.get("similarity", "seed", fallback="").strip()
        return int(raw) if raw else None

    @property
    def parallel_workers(self) -> int:
        return self._config.getint("build", "parallel_workers", fallback=4)

    # --- Renderer components ---

    def component_for(self, page_kind: str) -> str:
        return self._config.get("components", page_kind, fallback="")

    def set(self, section: str, key: str, value: str) -> None:
        if not self._config.has_section(section):
            self._config.add_section(section)
        self._config.set(section, key, value)

    def get_status(self) -> Dict[str, Any]:
        return {
            "base_path": str(self.base_path),
            "config_exists": self.config_path.exists(),
            "data_dir": str(self.data_dir),
            "data_dir_exists": self.data_dir.is_dir(),
            "output_dir": str(self.output_dir),
            "extensions": self.extensions,
            "base_route": self.base_route,
            "on_duplicate_slug": self.on_duplicate_slug,
            "similarity_limit": self.similarity_limit,
            "seed": self.seed,
            "parallel_workers": self.parallel_workers,
        }
