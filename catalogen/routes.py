"""
Route emitter for Catalogen.

Turns the loaded catalog into the route table handed to the site
renderer, and writes one JSON data artifact per route so pages can be
drawn without recomputing anything:

    /catalog/{slug}                       one per record with a slug
    /catalog                              the full listing
    /catalog/categories/                  the categories index
    /catalog/categories/{label}/          one per category

Every path is validated for uniqueness before a single byte is written.
Two routes on one path means one page silently eats the other, and I
don't do silent.
"""

import hashlib
import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from catalogen.category_index import CategoryIndex
from catalogen.config import CatalogConfig
from catalogen.records import CatalogRecord, normalize_label
from catalogen.similarity import SimilarityResolver

logger = logging.getLogger(__name__)

LIST_ARTIFACT = "catalog-list.json"
CATEGORIES_ARTIFACT = "categories-list.json"


class PageKind(str, Enum):
    ITEM = "item"
    LIST = "list"
    CATEGORIES_INDEX = "categories_index"
    CATEGORY_LIST = "category_list"


class RouteCollisionError(ValueError):
    """Two or more routes resolve to the same path."""


def _md5_hash(content: str) -> str:
    return hashlib.md5(content.encode("utf-8", errors="replace")).hexdigest()


def docu_hash(value: str) -> str:
    """Build a short, filesystem-safe artifact name for a route path."""
    if value == "/":
        return "index"
    readable = normalize_label(value)[:50]
    return f"{readable}-{_md5_hash(value)[:12]}"


def _route(base: str, *parts: str, trailing: bool = False) -> str:
    segments = [base.rstrip("/")] + [p.strip("/") for p in parts]
    path = "/".join(segments) or "/"
    if trailing and not path.endswith("/"):
        path += "/"
    return path


def _path_key(path: str) -> str:
    return path.rstrip("/") or "/"


@dataclass(frozen=True)
class RouteDescriptor:
    """A generated page address plus a handle to the data it renders."""

    path: str
    page_kind: PageKind
    data_ref: str
    component: str = ""
    exact: bool = True
    module_key: str = "content"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "page_kind": self.page_kind.value,
            "component": self.component,
            "exact": self.exact,
            "modules": {self.module_key: self.data_ref},
        }


@dataclass
class PlannedRoute:
    """A validated route whose artifact has not been written yet."""

    path: str
    page_kind: PageKind
    artifact: str
    module_key: str
    payload: Any = field(repr=False)
    label: Optional[str] = None


class DataWriter:
    """Writes route data artifacts into the build output directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def write(self, name: str, data: Any) -> str:
        path = self.output_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
        logger.debug("Wrote %s", path)
        return str(path)


class RouteEmitter:
    """Plans, validates and emits the catalog route table."""

    def __init__(
        self,
        config: Optional[CatalogConfig] = None,
        resolver: Optional[SimilarityResolver] = None,
        writer: Optional[DataWriter] = None,
    ):
        self.config = config or CatalogConfig()
        self.resolver = resolver or SimilarityResolver(limit=self.config.similarity_limit)
        self.writer = writer or DataWriter(self.config.output_dir)
        self.base_route = self.config.base_route

    def plan(self, records: Sequence[CatalogRecord], category_index: CategoryIndex) -> List[PlannedRoute]:
        """Compute every route and its payload without writing anything.

        Raises:
            RouteCollisionError: if two routes land on the same path.
        """
        planned = self._plan_items(records)
        planned.append(PlannedRoute(
            path=_route(self.base_route),
            page_kind=PageKind.LIST,
            artifact=LIST_ARTIFACT,
            module_key="items",
            payload=[r.to_entry() for r in records],
        ))
        planned.extend(self._plan_categories(category_index))

        self._check_unique(planned)
        return planned

    def emit(
        self,
        records: Sequence[CatalogRecord],
        category_index: CategoryIndex,
        parallel: Optional[int] = None,
    ) -> List[RouteDescriptor]:
        """Write every route's artifact and return descriptors in plan order."""
        planned = self.plan(records, category_index)
        workers = parallel or self.config.parallel_workers
        refs: Dict[str, str] = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.writer.write, route.artifact, route.payload): route
                for route in planned
            }
            for future in as_completed(futures):
                refs[futures[future].artifact] = future.result()

        logger.info("Emitted %d routes into %s", len(planned), self.writer.output_dir)

        return [
            RouteDescriptor(
                path=route.path,
                page_kind=route.page_kind,
                data_ref=refs[route.artifact],
                component=self.config.component_for(route.page_kind.value),
                module_key=route.module_key,
            )
            for route in planned
        ]

    # --- Planning helpers ---

    def _plan_items(self, records: Sequence[CatalogRecord]) -> List[PlannedRoute]:
        strict = self.config.on_duplicate_slug == "error"
        owners: Dict[str, CatalogRecord] = {}
        duplicates: List[str] = []
        planned: List[PlannedRoute] = []

        for record in records:
            slug = (record.slug or "").strip("/")
            if not slug:
                logger.debug("No item route for %s: missing slug", record.id)
                continue

            path = _route(self.base_route, slug)
            owner = owners.get(path)
            if owner is not None:
                message = f"slug '{slug}' used by both {owner.id} and {record.id}"
                if strict:
                    duplicates.append(message)
                else:
                    logger.warning("Duplicate %s; keeping %s", message, owner.id)
                continue
            owners[path] = record

            payload = record.metadata()
            payload["similar"] = [r.metadata() for r in self.resolver.resolve(record, records)]
            payload["data"] = record.payload

            planned.append(PlannedRoute(
                path=path,
                page_kind=PageKind.ITEM,
                artifact=f"{docu_hash(path)}.json",
                module_key="content",
                payload=payload,
            ))

        if duplicates:
            raise RouteCollisionError("Duplicate item slugs: " + "; ".join(duplicates))

        return planned

    def _plan_categories(self, category_index: CategoryIndex) -> List[PlannedRoute]:
        categories_path = _route(self.base_route, "categories", trailing=True)
        by_normalized: Dict[str, List[str]] = {}
        summary: List[Dict[str, Any]] = []
        planned: List[PlannedRoute] = []

        for label, members in category_index.items():
            if not members:
                continue
            normalized = normalize_label(label)
            if not normalized:
                raise RouteCollisionError(f"Category '{label}' has no path-safe characters")
            by_normalized.setdefault(normalized, []).append(label)

            path = _route(categories_path, normalized, trailing=True)
            entries = [r.to_entry() for r in members]
            summary.append({
                "name": label,
                "count": len(members),
                "permalink": path,
                "items": entries,
            })
            planned.append(PlannedRoute(
                path=path,
                page_kind=PageKind.CATEGORY_LIST,
                artifact=f"catalog-category-{normalized}.json",
                module_key="items",
                payload=entries,
                label=label,
            ))

        clashes = {n: labels for n, labels in by_normalized.items() if len(labels) > 1}
        if clashes:
            detail = "; ".join(
                f"{', '.join(repr(label) for label in labels)} -> '{n}'" for n, labels in clashes.items()
            )
            raise RouteCollisionError(f"Category labels collide after normalization: {detail}")

        index_route = PlannedRoute(
            path=categories_path,
            page_kind=PageKind.CATEGORIES_INDEX,
            artifact=CATEGORIES_ARTIFACT,
            module_key="categories",
            payload=summary,
        )
        return [index_route] + planned

    @staticmethod
    def _check_unique(planned: List[PlannedRoute]) -> None:
        seen: Dict[str, PlannedRoute] = {}
        artifacts: Dict[str, str] = {}
        clashes: List[str] = []
        for route in planned:
            if route.artifact in artifacts:
                clashes.append(f"{artifacts[route.artifact]} and {route.path} share artifact {route.artifact}")
            artifacts.setdefault(route.artifact, route.path)

            key = _path_key(route.path)
            other = seen.get(key)
            if other is not None:
                clashes.append(f"{other.path} ({other.page_kind.value}) vs {route.path} ({route.page_kind.value})")
                continue
            seen[key] = route

        if clashes:
            raise RouteCollisionError("Route paths collide: " + "; ".join(clashes))
