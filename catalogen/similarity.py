"""
Similarity resolver for the "related items" panel.

Picks up to ``limit`` other records for a target: same-category records
first (sampled when there are too many), then a random fill from the
rest of the catalog. Selection is random on purpose so the panel varies
between builds; pass a seeded ``random.Random`` to pin it.
"""

import random
from typing import List, Optional, Sequence

from catalogen.records import CatalogRecord

DEFAULT_LIMIT = 3


class SimilarityResolver:
    """Computes bounded, partly randomized related-record lists."""

    def __init__(self, limit: int = DEFAULT_LIMIT, rng: Optional[random.Random] = None):
        if limit < 0:
            raise ValueError(f"Similarity limit must be non-negative, got {limit}")
        self.limit = limit
        self.rng = rng or random.Random()

    def resolve(self, target: CatalogRecord, catalog: Sequence[CatalogRecord]) -> List[CatalogRecord]:
        """Return at most ``limit`` distinct records related to *target*.

        The target itself is never included. Records count as the same
        category when their label sets intersect.
        """
        candidates = self._candidates(target, catalog)

        same = [r for r in candidates if target.shares_category_with(r)]
        if len(same) > self.limit:
            return self.rng.sample(same, self.limit)

        selected = list(same)
        remaining = self.limit - len(selected)
        if remaining > 0:
            chosen = {r.id for r in selected}
            others = [r for r in candidates if r.id not in chosen]
            selected.extend(self.rng.sample(others, min(remaining, len(others))))

        return selected

    @staticmethod
    def _candidates(target: CatalogRecord, catalog: Sequence[CatalogRecord]) -> List[CatalogRecord]:
        seen = {target.id}
        candidates: List[CatalogRecord] = []
        for record in catalog:
            if record.id in seen:
                continue
            seen.add(record.id)
            candidates.append(record)
        return candidates
