"""
Normalized catalog records.

Source files disagree on whether ``category`` is a string or a list, so
the loader folds both shapes into a tagged value: ``SingleCategory`` or
``MultipleCategory``. Everything downstream compares label sets, never
raw values.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def normalize_label(label: str) -> str:
    """Case-fold *label* into a slug-safe path segment.

    "Search" -> "search", "Dev Tools & CI" -> "dev-tools-ci".
    """
    ascii_label = (
        unicodedata.normalize("NFKD", label).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_SLUG_RE.sub("-", ascii_label.casefold()).strip("-")


@dataclass(frozen=True)
class SingleCategory:
    label: str

    @property
    def labels(self) -> Tuple[str, ...]:
        return (self.label,)

    def to_json(self) -> str:
        return self.label


@dataclass(frozen=True)
class MultipleCategory:
    labels: Tuple[str, ...]

    def to_json(self) -> list:
        return list(self.labels)


Category = Union[SingleCategory, MultipleCategory]


def _clean_label(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, tuple)):
        return None
    label = str(value).strip()
    return label or None


def parse_category(raw: Any) -> Optional[Category]:
    """Fold a raw ``category`` value into a tagged category.

    Strings become ``SingleCategory``; lists become ``MultipleCategory``
    with blanks dropped and duplicates removed in first-seen order.
    Empty values yield None.
    """
    if isinstance(raw, (list, tuple)):
        labels = []
        for value in raw:
            label = _clean_label(value)
            if label and label not in labels:
                labels.append(label)
        return MultipleCategory(tuple(labels)) if labels else None

    label = _clean_label(raw)
    return SingleCategory(label) if label else None


@dataclass(frozen=True)
class CatalogRecord:
    """A normalized integration entry."""

    id: str
    slug: Optional[str] = None
    title: str = ""
    name: str = ""
    description: str = ""
    short_description: str = ""
    category: Optional[Category] = None
    logo_key: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def labels(self) -> Tuple[str, ...]:
        return self.category.labels if self.category else ()

    def shares_category_with(self, other: "CatalogRecord") -> bool:
        return bool(set(self.labels) & set(other.labels))

    def metadata(self) -> Dict[str, Any]:
        """Renderer-facing metadata: source keys overlaid with normalized fields."""
        meta = dict(self.payload)
        meta.update({
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "name": self.name,
            "description": self.description,
            "short_description": self.short_description,
            "category": self.category.to_json() if self.category else None,
            "logoKey": self.logo_key,
        })
        return meta

    def to_entry(self) -> Dict[str, Any]:
        return {"metadata": self.metadata(), "data": self.payload}
