from __future__ import annotations

import logging

from catalog.domain_filter import filter_domain
from catalog.order_overlay import merge
from catalog.paginator import Page, paginate
from catalog.state_store import StateStore

logger = logging.getLogger(__name__)


class ItemCatalog:
    """Builds one page of items: filter, overlay the saved order, slice."""

    def __init__(self, store: StateStore) -> None:
        self._store = store

    @property
    def store(self) -> StateStore:
        return self._store

    def list_items(self, *, query: str, offset: int, limit: int) -> Page:
        # Candidates are bounded to the window; the overlay only reorders
        # within the first offset + limit matches.
        candidates = filter_domain(query, offset + limit)
        saved_order = self._store.read().sorted_order
        merged = merge(candidates, saved_order)
        page = paginate(merged, offset, limit)
        logger.debug(
            "items_window query=%r offset=%s limit=%s candidates=%s returned=%s has_more=%s",
            query,
            offset,
            limit,
            len(candidates),
            len(page.items),
            page.has_more,
        )
        return page
