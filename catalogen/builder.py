"""
Build pipeline for Catalogen.

Runs the catalog through loader, category index, similarity and route
emission exactly once, then writes ``routes.json`` so the renderer can
find every page and its data.
"""

import json
import logging
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from catalogen.category_index import CategoryIndex, build_category_index
from catalogen.config import CatalogConfig
from catalogen.loader import CatalogLoader
from catalogen.records import CatalogRecord
from catalogen.routes import DataWriter, PageKind, RouteDescriptor, RouteEmitter
from catalogen.similarity import SimilarityResolver

logger = logging.getLogger(__name__)

MANIFEST_NAME = "routes.json"


class BuildResult:
    """Everything one build produced."""

    def __init__(
        self,
        records: List[CatalogRecord],
        category_index: CategoryIndex,
        routes: List[RouteDescriptor],
        manifest_path: Optional[Path] = None,
    ):
        self.records = records
        self.category_index = category_index
        self.routes = routes
        self.manifest_path = manifest_path

    @property
    def paths(self) -> List[str]:
        return [r.path for r in self.routes]

    def routes_of_kind(self, kind: PageKind) -> List[RouteDescriptor]:
        return [r for r in self.routes if r.page_kind == kind]

    def summary(self) -> Dict[str, Any]:
        return {
            "records": len(self.records),
            "categories": len(self.category_index),
            "routes": len(self.routes),
            "item_routes": len(self.routes_of_kind(PageKind.ITEM)),
            "manifest": str(self.manifest_path) if self.manifest_path else None,
        }


class CatalogBuilder:
    """Runs a full catalog build."""

    def __init__(
        self,
        config: Optional[CatalogConfig] = None,
        rng: Optional[random.Random] = None,
        data_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
    ):
        self.config = config or CatalogConfig()
        if rng is None and self.config.seed is not None:
            rng = random.Random(self.config.seed)
        self.rng = rng
        self.data_dir = Path(data_dir) if data_dir else self.config.data_dir
        self.output_dir = Path(output_dir) if output_dir else self.config.output_dir

    def load(self, parallel: Optional[int] = None) -> List[CatalogRecord]:
        return CatalogLoader(self.data_dir, config=self.config).load(parallel=parallel)

    def emitter(self) -> RouteEmitter:
        resolver = SimilarityResolver(limit=self.config.similarity_limit, rng=self.rng)
        return RouteEmitter(
            config=self.config,
            resolver=resolver,
            writer=DataWriter(self.output_dir),
        )

    def build(self, parallel: Optional[int] = None, dry_run: bool = False) -> BuildResult:
        """Load, index and emit the catalog.

        With ``dry_run`` routes are planned and validated but nothing is
        written; the returned descriptors carry artifact names instead of
        file paths.
        """
        logger.info("Building catalog from %s", self.data_dir)

        records = self.load(parallel=parallel)
        category_index = build_category_index(records)
        emitter = self.emitter()

        if dry_run:
            routes = [
                RouteDescriptor(
                    path=planned.path,
                    page_kind=planned.page_kind,
                    data_ref=planned.artifact,
                    component=self.config.component_for(planned.page_kind.value),
                    module_key=planned.module_key,
                )
                for planned in emitter.plan(records, category_index)
            ]
            return BuildResult(records, category_index, routes)

        routes = emitter.emit(records, category_index, parallel=parallel)
        result = BuildResult(records, category_index, routes)
        result.manifest_path = self._write_manifest(result)
        return result

    def _write_manifest(self, result: BuildResult) -> Path:
        manifest = {
            "built_at": datetime.now(timezone.utc).isoformat(),
            "base_route": self.config.base_route,
            "total_records": len(result.records),
            "total_categories": len(result.category_index),
            "routes": [r.to_dict() for r in result.routes],
        }
        path = self.output_dir / MANIFEST_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2, default=str)
        return path
