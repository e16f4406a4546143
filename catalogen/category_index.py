"""
Category index builder.

Groups records by category label. A record with several labels is
indexed under each of them; a record with none is left out of every
bucket and only shows up in the full listing.
"""

import logging
from typing import Dict, Iterable, List

from catalogen.records import CatalogRecord

logger = logging.getLogger(__name__)

CategoryIndex = Dict[str, List[CatalogRecord]]


def build_category_index(records: Iterable[CatalogRecord]) -> CategoryIndex:
    """Map each category label to its records, in load order.

    Labels appear in the order they are first seen.
    """
    index: CategoryIndex = {}
    uncategorized = 0

    for record in records:
        if not record.labels:
            uncategorized += 1
            continue
        for label in record.labels:
            index.setdefault(label, []).append(record)

    if uncategorized:
        logger.debug("%d records have no category", uncategorized)

    return index
