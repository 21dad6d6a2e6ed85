"""
Connection Factory Module.

Translates resolved [`Settings`][shardbridge.cfg.Settings] and a
[`CredentialProvider`][shardbridge.comm.CredentialProvider] into an
`opensearchpy.OpenSearch` instance.

Node discovery maps onto the client's sniffing support; the client-only,
ingest-only and data-only switches restrict which sniffed nodes are used.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from opensearchpy import OpenSearch

from ..cfg import Settings
from ..errors import ConfigurationError
from ..logging_config import get_logger
from .credentials import CredentialProvider

# Set the hierarchical logger
logger = get_logger(__name__)

_OPAQUE_ID_HEADER = "X-Opaque-Id"


def _parse_node(node: str, default_port: int) -> Dict[str, Any]:
    """
    Parses `host`, `host:port` or `scheme://host:port` into a host dict.

    Raises:
        ConfigurationError: If the port part is not numeric.
    """
    address = node.strip()
    if "://" in address:
        address = address.split("://", 1)[1]
    address = address.rstrip("/")

    host, port = address, default_port
    # IPv6 literals are bracketed: [::1]:9200
    if address.startswith("["):
        closing = address.find("]")
        host = address[1:closing]
        rest = address[closing + 1 :]
        if rest.startswith(":"):
            port = _parse_port(rest[1:], node)
    elif address.count(":") == 1:
        host, raw_port = address.split(":")
        port = _parse_port(raw_port, node)
    return {"host": host, "port": port}


def _parse_port(raw: str, node: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid port in node address '{node}'")


def _is_coordinating_node(roles: Set[str]) -> bool:
    return not roles or roles <= {"coordinating_only"}


def _is_ingest_node(roles: Set[str]) -> bool:
    return "ingest" in roles


def _is_data_node(roles: Set[str]) -> bool:
    return any(r == "data" or r.startswith("data_") for r in roles)


def _node_roles_filter(
    settings: Settings,
) -> Optional[Callable[[Dict[str, Any], Dict[str, Any]], Optional[Dict[str, Any]]]]:
    """
    Returns a sniffing callback keeping only nodes with the requested roles,
    or `None` when every discovered node may be used.
    """
    if settings.nodes_client_only:
        wanted = _is_coordinating_node
    elif settings.nodes_ingest_only:
        wanted = _is_ingest_node
    elif settings.nodes_data_only:
        wanted = _is_data_node
    else:
        return None

    def host_info_callback(
        node_info: Dict[str, Any], host: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        roles = set(node_info.get("roles", []))
        return host if wanted(roles) else None

    return host_info_callback


def connection_kwargs(
    settings: Settings, credentials: CredentialProvider
) -> Dict[str, Any]:
    """
    Builds the keyword arguments passed to `OpenSearch(...)`.

    Kept separate from `build_client()` so the mapping can be inspected
    without opening any connection.
    """
    hosts: List[Dict[str, Any]] = [
        _parse_node(node, settings.port) for node in settings.nodes
    ]
    if not hosts:
        raise ConfigurationError("No store nodes configured")

    kwargs: Dict[str, Any] = {
        "hosts": hosts,
        "http_auth": credentials.http_auth(),
        "use_ssl": settings.network_ssl_enabled,
        "verify_certs": settings.network_ssl_enabled
        and not settings.network_ssl_accept_self_signed,
        "ssl_show_warn": False,
        "timeout": settings.http_timeout,
        "max_retries": settings.http_retries,
        "retry_on_timeout": True,
    }

    path_prefix = settings.nodes_path_prefix
    if path_prefix:
        kwargs["url_prefix"] = path_prefix.strip("/")

    opaque_id = settings.opaque_id
    if opaque_id:
        kwargs["headers"] = {_OPAQUE_ID_HEADER: opaque_id}

    if settings.nodes_discovery and not settings.nodes_wan_only:
        kwargs["sniff_on_start"] = True
        kwargs["sniff_on_connection_fail"] = True
        callback = _node_roles_filter(settings)
        if callback is not None:
            kwargs["host_info_callback"] = callback

    return kwargs


def build_client(settings: Settings, credentials: CredentialProvider) -> OpenSearch:
    """Opens an `OpenSearch` client for the given settings."""
    kwargs = connection_kwargs(settings, credentials)
    addresses = [f"{h['host']}:{h['port']}" for h in kwargs["hosts"]]
    logger.debug(
        f"Connecting to {addresses} "
        f"(ssl={kwargs['use_ssl']}, sniff={kwargs.get('sniff_on_start', False)}, "
        f"auth='{credentials.method.value}')"
    )
    return OpenSearch(**kwargs)
