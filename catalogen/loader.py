"""
Catalog loader for Catalogen.

Reads every recognized file in the catalog data directory, parses it,
and normalizes its contents into ``CatalogRecord`` objects. A file may
hold a list of records, or a single aggregate object (marked by the
configured aggregate field) that stands for one record keyed by the
file name.

One broken file costs you the records in that file. Not the build.
"""

import json
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional

from catalogen.config import CatalogConfig
from catalogen.records import CatalogRecord, parse_category

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value).strip()
    return text or None


class CatalogLoader:
    """Loads and normalizes catalog records from a data directory."""

    def __init__(self, data_dir: Optional[Path] = None, config: Optional[CatalogConfig] = None):
        self.config = config or CatalogConfig()
        self.data_dir = Path(data_dir) if data_dir else self.config.data_dir
        self.extensions = set(self.config.extensions)
        self.aggregate_marker = self.config.aggregate_marker
        self.fallback_id_prefix = self.config.fallback_id_prefix

    def load(self, parallel: Optional[int] = None) -> List[CatalogRecord]:
        """Load every record in the data directory.

        Files are read concurrently but records come back in sorted file
        order, then source order within each file. Directory-level errors
        (missing directory, permissions) propagate to the caller.
        """
        files = self.list_files()
        if not files:
            logger.warning("No catalog files found in %s", self.data_dir)
            return []

        workers = parallel or self.config.parallel_workers
        per_file: Dict[Path, List[CatalogRecord]] = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.load_file, path): path for path in files}
            for future in as_completed(futures):
                per_file[futures[future]] = future.result()

        records: List[CatalogRecord] = []
        for path in files:
            records.extend(per_file[path])

        logger.info("Loaded %d records from %d files", len(records), len(files))
        return records

    def list_files(self) -> List[Path]:
        # iterdir() raises for a missing or unreadable directory; that is fatal
        return sorted(
            p for p in self.data_dir.iterdir()
            if p.is_file() and p.suffix.lower() in self.extensions
        )

    def load_file(self, path: Path) -> List[CatalogRecord]:
        """Parse a single file. Read and parse errors skip the file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.error("Skipping %s: %s", path.name, e)
            return []

        if isinstance(data, list):
            return self._records_from_list(data, path)

        if isinstance(data, dict) and data.get(self.aggregate_marker):
            return [self._record_from_aggregate(data, path)]

        logger.warning(
            "Skipping %s: expected a list of records or an object with '%s'",
            path.name, self.aggregate_marker,
        )
        return []

    def _records_from_list(self, items: List[Any], path: Path) -> List[CatalogRecord]:
        records: List[CatalogRecord] = []
        for position, item in enumerate(items):
            if not isinstance(item, dict):
                logger.warning("Skipping entry %d in %s: not an object", position, path.name)
                continue
            records.append(self._record_from_item(item))
        return records

    def _record_from_item(self, item: Dict[str, Any]) -> CatalogRecord:
        record_id = _optional_text(item.get("id")) or self._fallback_id()
        return CatalogRecord(
            id=record_id,
            slug=_optional_text(item.get("slug")),
            title=_text(item.get("title")),
            name=_text(item.get("name")),
            description=_text(item.get("description")),
            short_description=_text(
                item.get("short_description", item.get("shortDescription"))
            ),
            category=parse_category(item.get("category")),
            logo_key=_optional_text(item.get("logoKey")),
            payload=item,
        )

    def _record_from_aggregate(self, data: Dict[str, Any], path: Path) -> CatalogRecord:
        stem = path.stem
        category = parse_category(data.get("category"))
        if category is None:
            category = parse_category(self.config.default_category or stem)

        return CatalogRecord(
            id=f"aggregate-{stem}",
            slug=_optional_text(data.get("slug")),
            title=_text(data.get("title")),
            name=_text(data.get("name")) or stem,
            description=_text(data.get("description")),
            short_description=_text(
                data.get("short_description", data.get("shortDescription"))
            ),
            category=category,
            logo_key=_optional_text(data.get("logoKey")) or stem,
            payload=data,
        )

    def _fallback_id(self) -> str:
        return f"{self.fallback_id_prefix}-{uuid.uuid4().hex[:9]}"
