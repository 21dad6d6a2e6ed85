"""
Scroll cursor bookkeeping for a single partition reader.
"""

import json
from typing import Any, Dict, List, Optional

from ...models import Stats


class _ScrollState:
    """
    Owns the server-side scroll of one [`ScrollReader`][shardbridge.handlers.ScrollReader].

    Pulls one page per round trip, never ahead of consumption, and stops at the
    first empty page or once `limit` documents were delivered.
    """

    def __init__(
        self,
        *,
        client: Any,
        index: str,
        body: Dict[str, Any],
        keepalive: float,
        size: int,
        preference: Optional[str],
        limit: int,
    ):
        self._client = client
        """The store client (a `StoreClient` or a compatible substitute)"""
        self._index = index
        self._body = body
        self._keepalive = keepalive
        self._size = size
        self._preference = preference
        self._limit = limit
        """Maximum number of documents to deliver; negative means unbounded"""

        self.scroll_id: Optional[str] = None
        """The current server-side scroll id"""
        self.page: List[Dict[str, Any]] = []
        """The hits of the current page"""
        self.page_pos: int = 0
        """The position of the next undelivered hit in `page`"""
        self.delivered: int = 0
        """Documents handed out so far"""
        self.total: Optional[int] = None
        """Estimated number of matching documents, as reported by the first page"""
        self.exhausted: bool = False
        self.stats = Stats()

    @property
    def is_open(self) -> bool:
        return self.scroll_id is not None or self.exhausted

    def open(self) -> None:
        response = self._client.scroll_open(
            self._index,
            self._body,
            keepalive=self._keepalive,
            size=self._size,
            preference=self._preference,
        )
        self._load(response)
        if self.total is not None:
            self.stats.scroll_total = self.total

    def _advance(self) -> None:
        assert self.scroll_id is not None
        self._load(self._client.scroll_next(self.scroll_id, self._keepalive))

    def _load(self, response: Dict[str, Any]) -> None:
        self.scroll_id = response.get("_scroll_id", self.scroll_id)
        hits = response.get("hits", {})
        if self.total is None:
            total = hits.get("total")
            if isinstance(total, dict):
                total = total.get("value")
            self.total = int(total) if total is not None else None

        self.page = hits.get("hits", [])
        self.page_pos = 0
        self.stats.scroll_reads += 1
        if self.page:
            self.stats.bytes_received += len(json.dumps(self.page).encode("utf-8"))
        else:
            self.exhausted = True

    def _limit_reached(self) -> bool:
        return self._limit >= 0 and self.delivered >= self._limit

    def next_hit(self) -> Optional[Dict[str, Any]]:
        """Returns the next hit, pulling a new page when needed, or `None` at the end."""
        if self._limit_reached():
            self.exhausted = True
            return None
        while self.page_pos >= len(self.page):
            if self.exhausted:
                return None
            self._advance()
        hit = self.page[self.page_pos]
        self.page_pos += 1
        self.delivered += 1
        self.stats.docs_received += 1
        return hit

    def drain_page(self) -> List[Dict[str, Any]]:
        """Returns every hit left in the current page (pulling one if it is consumed)."""
        hits: List[Dict[str, Any]] = []
        hit = self.next_hit()
        while hit is not None:
            hits.append(hit)
            if self.page_pos >= len(self.page):
                break
            hit = self.next_hit()
        return hits

    def clear(self) -> None:
        """Releases the server-side scroll. Raises if the store call fails."""
        scroll_id, self.scroll_id = self.scroll_id, None
        if scroll_id is not None:
            self._client.scroll_clear(scroll_id)

    def progress(self) -> float:
        if self.exhausted:
            return 1.0
        expected = self.total
        if self._limit >= 0:
            expected = self._limit if expected is None else min(expected, self._limit)
        if not expected:
            return 0.0
        return min(1.0, self.delivered / expected)
