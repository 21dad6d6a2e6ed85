"""
Partition Planning Module.

This module turns the shard layout of the read resource into an ordered list of
[`PartitionDescriptor`][shardbridge.models.PartitionDescriptor] objects, one per
shard (or per shard slice), each carrying the settings overlay its reader needs.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from ..cfg import PropertiesSettings, Settings, options as opts
from ..comm.credentials import CredentialProvider, resolve_credentials
from ..comm.store_client import StoreClient
from ..enum import ShardPreference
from ..errors import ClusterHealthError, ConfigurationError, NotFoundError
from ..helpers import _parse_query
from ..logging_config import get_logger
from ..models import PartitionDescriptor

# Set the hierarchical logger
logger = get_logger(__name__)

_STARTED = "STARTED"


def _split_address(address: str) -> Tuple[str, Optional[int]]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        return address, None
    return host.strip("[]"), int(port)


class PartitionPlanner:
    """
    Computes the read partitions of the configured resource.

    The planner is a pure function of the store state and the settings, apart
    from recording the discovered cluster name, uuid and version in the given
    settings (as internal keys) so that every partition overlay carries them.

    Shard copies are selected by `opensearch.read.shard.preference`:

    * `primary`: only the primary copy; the reader is pinned to its node.
    * `local` (default): every started copy is a candidate; the reader is
      pinned to the first one and asks the store to prefer local copies.
    * `any`: every started copy is a candidate and no node is pinned.

    When `opensearch.input.max.docs.per.partition` is set, a shard holding more
    matching documents than the bound is split into `ceil(count / max)` sliced
    partitions.

    Example:
        ```python
        planner = PartitionPlanner(settings)
        for descriptor in planner.plan():
            print(descriptor)
        ```
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[Any] = None,
        credentials: Optional[CredentialProvider] = None,
    ):
        """
        Args:
            settings: The host settings. Cluster discovery results are written
                into them.
            client: An already connected store client. When omitted the planner
                opens (and closes) its own for every `plan()` call.
            credentials: Identity supplied by the host.
        """
        self._settings: Settings = settings
        self._client: Optional[Any] = client
        self._credentials: Optional[CredentialProvider] = credentials

    def plan(self) -> List[PartitionDescriptor]:
        """
        Plans the read partitions.

        Returns:
            List[PartitionDescriptor]: Ordered by index then shard id (then slice).
                Empty if the resource is missing and
                `opensearch.index.read.missing.as.empty` is set.

        Raises:
            ConfigurationError: If no read resource is configured.
            NotFoundError: If the resource does not exist.
            ClusterHealthError: If the resource health is below the configured
                threshold and red status is not allowed.
            StoreTransportError: If the store cannot be reached.
        """
        resource = self._settings.resource_read
        if not resource:
            raise ConfigurationError(
                "No read resource configured ('opensearch.resource.read' or 'opensearch.resource')"
            )

        if self._client is not None:
            return self._plan(self._client, resource)

        client = StoreClient.connect(
            self._settings, resolve_credentials(self._settings, self._credentials)
        )
        try:
            return self._plan(client, resource)
        finally:
            client.close()

    def _plan(self, client: Any, resource: str) -> List[PartitionDescriptor]:
        settings = self._settings
        self._discover_cluster(client)

        if not client.index_exists(resource):
            if settings.index_read_missing_as_empty:
                logger.info(f"Resource '{resource}' not found; reading it as empty")
                return []
            raise NotFoundError(
                f"Resource '{resource}' not found; set 'opensearch.index.read.missing.as.empty' "
                "to read it as empty"
            )

        allow_red = settings.index_read_allow_red_status
        health = client.health(resource)
        threshold = settings.index_read_health_threshold
        if health < threshold:
            if not allow_red:
                raise ClusterHealthError(
                    f"Resource '{resource}' health is '{health.value}', below the required "
                    f"'{threshold.value}'"
                )
            logger.warning(
                f"Resource '{resource}' health is '{health.value}'; reading the available shards only"
            )

        layout = client.search_shards(resource)
        addresses = self._node_addresses(client, layout)
        policy = settings.shard_preference
        query = _parse_query(settings.query)
        max_docs = settings.max_docs_per_partition

        groups = sorted(
            (group for group in layout.get("shards", []) if group),
            key=lambda group: (group[0]["index"], int(group[0]["shard"])),
        )

        descriptors: List[PartitionDescriptor] = []
        for group in groups:
            index, shard_id = group[0]["index"], int(group[0]["shard"])
            candidates = [
                copy
                for copy in group
                if copy.get("state") == _STARTED
                and (policy != ShardPreference.Primary or copy.get("primary"))
            ]
            if not candidates:
                if not allow_red:
                    raise ClusterHealthError(
                        f"Shard '{index}[{shard_id}]' has no started copy matching policy '{policy.value}'"
                    )
                logger.warning(f"Skipping shard '{index}[{shard_id}]': no started copy available")
                continue

            hosts: List[str] = []
            for copy in candidates:
                address = addresses.get(copy.get("node", ""))
                if address is not None:
                    host = _split_address(address)[0]
                    if host not in hosts:
                        hosts.append(host)

            pinned: Optional[str] = None
            if policy != ShardPreference.Any and not settings.nodes_wan_only:
                pinned = addresses.get(candidates[0].get("node", ""))

            preference = self._preference_string(policy, shard_id, candidates[0])

            slices = 1
            if max_docs is not None:
                count = client.count(index, query, preference=f"_shards:{shard_id}")
                if count > max_docs:
                    slices = math.ceil(count / max_docs)
                    logger.debug(
                        f"Shard '{index}[{shard_id}]' holds {count} documents; "
                        f"splitting into {slices} slices"
                    )

            slice_ids: List[Optional[int]] = list(range(slices)) if slices > 1 else [None]
            for slice_id in slice_ids:
                overlay = self._overlay(pinned, preference, slice_id, slices)
                descriptors.append(
                    PartitionDescriptor(
                        resource=resource,
                        index=index,
                        shard_id=shard_id,
                        hosts=tuple(hosts),
                        settings_overlay=overlay.save(),
                        slice_id=slice_id,
                        slice_max=slices if slice_id is not None else None,
                    )
                )

        logger.info(
            f"Planned {len(descriptors)} partition(s) for '{resource}' "
            f"over {len(groups)} shard(s), policy '{policy.value}'"
        )
        return descriptors

    def _discover_cluster(self, client: Any):
        settings = self._settings
        if settings.internal_version is not None and settings.cluster_name is not None:
            return
        info = client.cluster_info()
        if not info.get("version"):
            raise ConfigurationError("Unable to discover the store version")
        settings.set_internal_cluster_info(info["name"], info["version"], info.get("uuid") or None)
        logger.debug(
            f"Discovered cluster '{info['name']}' ({info.get('uuid')}) version '{info['version']}'"
        )

    def _node_addresses(self, client: Any, layout: Dict[str, Any]) -> Dict[str, str]:
        """Maps node ids to a reachable `host:port` address."""
        if self._settings.nodes_wan_only:
            return {}
        addresses = dict(client.http_nodes())
        # fall back to the transport host for nodes without HTTP publish info
        for node_id, node in layout.get("nodes", {}).items():
            if node_id not in addresses and node.get("transport_address"):
                host = _split_address(node["transport_address"])[0]
                addresses[node_id] = f"{host}:{self._settings.port}"
        return addresses

    @staticmethod
    def _preference_string(
        policy: ShardPreference, shard_id: int, first: Dict[str, Any]
    ) -> str:
        if policy == ShardPreference.Primary:
            return f"_shards:{shard_id}|_only_nodes:{first.get('node')}"
        if policy == ShardPreference.Local:
            return f"_shards:{shard_id}|_local"
        return f"_shards:{shard_id}"

    def _overlay(
        self,
        pinned: Optional[str],
        preference: str,
        slice_id: Optional[int],
        slice_max: int,
    ) -> PropertiesSettings:
        settings = self._settings
        overlay = PropertiesSettings()
        overlay.set_internal_cluster_info(
            settings.cluster_name or "", settings.internal_version_or_raise(), settings.cluster_uuid
        )
        if pinned is not None:
            host, port = _split_address(pinned)
            overlay.set_nodes(host)
            if port is not None:
                overlay.set_port(port)
            overlay.set_property(opts.OPENSEARCH_NODES_WAN_ONLY, "false")
            overlay.set_property(opts.OPENSEARCH_NODES_DISCOVERY, "false")
        overlay.set_internal_shard_preference(preference)
        if slice_id is not None:
            overlay.set_internal_slice(slice_id, slice_max)
        return overlay
