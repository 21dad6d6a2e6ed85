"""
In-memory stand-in for `StoreClient`, used by the unit tests.
"""

import itertools
import json
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from shardbridge.comm import CredentialProvider
from shardbridge.enum import HealthStatus
from shardbridge.errors import StoreTransportError
from shardbridge.handlers import ValueDecoder

BulkResponder = Callable[[List[Tuple[str, Dict[str, Any], Optional[Dict[str, Any]]]]], Dict[str, Any]]


def bulk_item(action: str, status: int, doc_id: Optional[str] = None, error_type: Optional[str] = None):
    body: Dict[str, Any] = {"status": status}
    if doc_id is not None:
        body["_id"] = doc_id
    if status >= 300:
        body["error"] = {"type": error_type or "mapper_parsing_exception", "reason": f"failed with {status}"}
    return {action: body}


def statuses(*codes: int, error_type: Optional[str] = None) -> BulkResponder:
    """Responder answering the next request with the given per-document statuses."""

    def responder(entries):
        items = [
            bulk_item(action, code, meta.get("_id"), error_type)
            for (action, meta, _), code in zip(entries, codes)
        ]
        return {"errors": any(code >= 300 for code in codes), "items": items}

    return responder


def transport_failure(status: int = 503) -> BulkResponder:
    def responder(entries):
        raise StoreTransportError("connection reset", status)

    return responder


class FakeStore:
    """
    A single-process store holding documents per `(index, shard)`.

    Node `node-<i>` publishes HTTP on `10.0.0.<i+1>:9200`.
    """

    def __init__(
        self,
        *,
        version: str = "2.11.0",
        cluster_name: str = "test-cluster",
        health: HealthStatus = HealthStatus.Green,
        nodes: int = 3,
    ):
        self.version = version
        self.cluster_name = cluster_name
        self.health_status = health
        self.node_count = nodes
        self.http: Dict[str, str] = {f"node-{i}": f"10.0.0.{i + 1}:9200" for i in range(nodes)}
        self.layout: Dict[str, List[List[Dict[str, Any]]]] = {}
        self.docs: Dict[Tuple[str, int], List[Dict[str, Any]]] = {}
        self.written: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.bulk_responders: List[BulkResponder] = []
        self.bulk_requests: List[List[Tuple[str, Dict[str, Any], Optional[Dict[str, Any]]]]] = []
        self.bulk_pipelines: List[Optional[str]] = []
        self.scroll_requests: List[Dict[str, Any]] = []
        self.cleared: List[str] = []
        self.refreshed: List[str] = []
        self.page_delay: float = 0.0
        self.fail_scroll_next: Optional[Exception] = None
        self.fail_clear: bool = False
        self.fail_refresh: bool = False
        self.closed: bool = False
        self._scrolls: Dict[str, Dict[str, Any]] = {}
        self._scroll_ids = itertools.count()

    # --- Fixture helpers ---

    def add_index(
        self,
        index: str,
        docs: List[Dict[str, Any]],
        *,
        shards: int = 2,
        replicas: int = 1,
        unassigned: Tuple[int, ...] = (),
    ) -> "FakeStore":
        """Spreads `docs` round-robin over `shards`; ids are `<index>-<n>` unless given."""
        groups = []
        for shard in range(shards):
            self.docs[(index, shard)] = []
            copies = []
            for copy in range(replicas + 1):
                node = f"node-{(shard + copy) % self.node_count}"
                copies.append(
                    {
                        "index": index,
                        "shard": shard,
                        "primary": copy == 0,
                        "node": node,
                        "state": "UNASSIGNED" if shard in unassigned else "STARTED",
                    }
                )
            groups.append(copies)
        self.layout[index] = groups
        for n, doc in enumerate(docs):
            doc = dict(doc)
            doc_id = str(doc.pop("_id", f"{index}-{n}"))
            self.docs[(index, n % shards)].append(
                {"_index": index, "_id": doc_id, "_score": None, "_source": doc}
            )
        return self

    # --- StoreClient surface ---

    def cluster_info(self) -> Dict[str, str]:
        return {"name": self.cluster_name, "uuid": "uuid-1", "version": self.version}

    def index_exists(self, index: str) -> bool:
        return index in self.layout or index in self.written

    def health(self, index: str) -> HealthStatus:
        return self.health_status

    def search_shards(self, index: str) -> Dict[str, Any]:
        nodes = {
            node_id: {"name": node_id, "transport_address": f"10.0.0.{i + 1}:9300"}
            for i, node_id in enumerate(self.http)
        }
        # the store does not guarantee any group order
        return {"nodes": nodes, "shards": list(reversed(self.layout.get(index, [])))}

    def http_nodes(self) -> Dict[str, str]:
        return dict(self.http)

    def _matching(self, index: str, preference: Optional[str]) -> List[Dict[str, Any]]:
        shard: Optional[int] = None
        if preference and preference.startswith("_shards:"):
            shard = int(preference[len("_shards:"):].split("|")[0])
        hits = []
        for (doc_index, doc_shard), docs in sorted(self.docs.items()):
            if doc_index == index and (shard is None or doc_shard == shard):
                hits.extend(docs)
        return hits

    def count(self, index: str, body: Dict[str, Any], preference: Optional[str] = None) -> int:
        return len(self._matching(index, preference))

    def scroll_open(self, index, body, *, keepalive, size, preference=None):
        self.scroll_requests.append(
            {"index": index, "body": body, "keepalive": keepalive, "size": size, "preference": preference}
        )
        hits = self._matching(index, preference)
        if "slice" in body:
            slice_id, slice_max = body["slice"]["id"], body["slice"]["max"]
            hits = [hit for n, hit in enumerate(hits) if n % slice_max == slice_id]
        scroll_id = f"scroll-{next(self._scroll_ids)}"
        self._scrolls[scroll_id] = {"hits": hits, "pos": 0, "size": size}
        return self._page(scroll_id, total=len(hits))

    def _page(self, scroll_id: str, total: Optional[int] = None) -> Dict[str, Any]:
        state = self._scrolls[scroll_id]
        page = state["hits"][state["pos"] : state["pos"] + state["size"]]
        state["pos"] += len(page)
        hits: Dict[str, Any] = {"hits": page}
        if total is not None:
            hits["total"] = {"value": total, "relation": "eq"}
        return {"_scroll_id": scroll_id, "hits": hits}

    def scroll_next(self, scroll_id: str, keepalive: float) -> Dict[str, Any]:
        if self.page_delay:
            time.sleep(self.page_delay)
        if self.fail_scroll_next is not None:
            raise self.fail_scroll_next
        return self._page(scroll_id)

    def scroll_clear(self, scroll_id: str) -> None:
        self.cleared.append(scroll_id)
        if self.fail_clear:
            raise StoreTransportError("scroll already expired", 404)

    def bulk(self, index: str, payload: str, pipeline: Optional[str] = None) -> Dict[str, Any]:
        lines = payload.splitlines()
        entries = []
        n = 0
        while n < len(lines):
            action_line = json.loads(lines[n])
            action, meta = next(iter(action_line.items()))
            n += 1
            source = None
            if action != "delete":
                source = json.loads(lines[n])
                n += 1
            entries.append((action, meta, source))
        self.bulk_requests.append(entries)
        self.bulk_pipelines.append(pipeline)

        if self.bulk_responders:
            return self.bulk_responders.pop(0)(entries)

        target = self.written.setdefault(index, {})
        items = []
        for action, meta, source in entries:
            doc_id = meta.get("_id", f"auto-{len(target)}")
            if action == "delete":
                target.pop(doc_id, None)
            else:
                target[doc_id] = source
            items.append(bulk_item(action, 201, doc_id))
        return {"errors": False, "items": items}

    def refresh(self, index: str) -> None:
        self.refreshed.append(index)
        if self.fail_refresh:
            raise StoreTransportError("refresh rejected", 500)

    def close(self) -> None:
        self.closed = True


class ExplodingDecoder(ValueDecoder):
    """Decoder failing on every hit with a non-SDK exception."""

    def decode(self, hit: Dict[str, Any]) -> Any:
        raise KeyError("no such field")


class IdOnlyDecoder(ValueDecoder):
    def decode(self, hit: Dict[str, Any]) -> Any:
        return hit["_id"]


class NotADecoder:
    pass


class TokenCredentials(CredentialProvider):
    """Custom provider built from the settings, as loaded by class path."""

    def __init__(self, settings):
        self.token = settings.get("test.token", "t0k3n")

    def http_auth(self):
        return ("token", self.token)
