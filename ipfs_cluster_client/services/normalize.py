# ipfs_cluster_client/services/normalize.py
"""
Converts decoded cluster responses into the client's result models.

The cluster encodes CIDs as IPLD links ({"/": "<cid>"}), returns peer status
keyed by peer ID with Go-style field names, and answers the add endpoint with
either a single object (streaming) or an array (non-streaming). Everything
here flattens those shapes before callers see them.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ipfs_cluster_client.api.models.responses import (
    AddResponse,
    ClusterInfo,
    IpfsPeerInfo,
    PinInfo,
    PinResponse,
    StatusResponse,
)
from ipfs_cluster_client.core.errors import MalformedResponse

logger = logging.getLogger(__name__)

LINK_KEY = "/"

# Go's time.Time{} as serialized by the cluster; means "unset"
GO_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_FRACTION_RE = re.compile(r"\.(\d+)")


def unwrap_cid(value: Any) -> Optional[str]:
    """
    Extracts the plain CID string from its link-object encoding.

    Args:
        value: {"/": "<cid>"}, a plain CID string, or None

    Returns:
        The CID string, or None when value is None

    Raises:
        MalformedResponse: If value is neither a link object nor a string
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        if LINK_KEY not in value:
            raise MalformedResponse(f"CID link object missing '{LINK_KEY}' key: {value!r}")
        return value[LINK_KEY]
    if isinstance(value, str):
        return value
    raise MalformedResponse(f"Unexpected CID representation: {type(value).__name__}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parses an RFC 3339 timestamp as emitted by Go into an aware datetime.

    Fractions beyond microseconds are truncated; a trailing 'Z' is UTC.
    Timestamps without an offset are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise MalformedResponse(f"Could not parse timestamp {value!r}: {e}") from e
    else:
        raise MalformedResponse(f"Unexpected timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_optional_timestamp(value: Any) -> Optional[datetime]:
    parsed = parse_timestamp(value)
    if parsed is not None and parsed <= GO_ZERO_TIME:
        return None
    return parsed


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise MalformedResponse(f"Expected a JSON object for {what}, got {type(payload).__name__}")
    return payload


def _require_cid(item: Mapping[str, Any], what: str) -> str:
    cid = unwrap_cid(item.get("cid"))
    if not cid:
        raise MalformedResponse(f"{what} response missing 'cid'")
    return cid


def as_item_sequence(payload: Any) -> List[Any]:
    """Treats a bare object as a one-element list; None becomes an empty list."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def to_add_response(item: Any) -> AddResponse:
    item = _require_mapping(item, "add")
    return AddResponse(
        name=item.get("name") or "",
        cid=_require_cid(item, "Add"),
        size=item.get("size"),
        allocations=item.get("allocations") or [],
    )


def normalize_add(payload: Any) -> AddResponse:
    """Single-file add: only the first returned item is the added file."""
    items = as_item_sequence(payload)
    if not items:
        raise MalformedResponse("Add response contained no items")
    return to_add_response(items[0])


def normalize_add_directory(payload: Any) -> List[AddResponse]:
    items = as_item_sequence(payload)
    if not items:
        logger.warning("Directory add response contained no items")
    return [to_add_response(item) for item in items]


def to_pin_info(raw: Any) -> PinInfo:
    raw = _require_mapping(raw, "peer status")
    timestamp = parse_timestamp(raw.get("timestamp"))
    if timestamp is None:
        raise MalformedResponse("Peer status missing 'timestamp'")
    return PinInfo(
        peer_name=raw.get("peername") or "",
        status=raw.get("status") or "",
        timestamp=timestamp,
        error=raw.get("error"),
    )


def to_peer_map(raw: Any) -> Dict[str, PinInfo]:
    """Rebuilds the wire peer map; a missing map yields an empty dict."""
    if not raw:
        return {}
    raw = _require_mapping(raw, "peer_map")
    return {peer_id: to_pin_info(info) for peer_id, info in raw.items()}


def normalize_status(payload: Any) -> StatusResponse:
    payload = _require_mapping(payload, "status")
    return StatusResponse(
        cid=_require_cid(payload, "Status"),
        name=payload.get("name"),
        peer_map=to_peer_map(payload.get("peer_map")),
    )


def normalize_pin(payload: Any) -> PinResponse:
    payload = _require_mapping(payload, "pin")
    metadata = payload.get("metadata") or {}
    return PinResponse(
        cid=_require_cid(payload, "Pin"),
        name=payload.get("name"),
        type=payload.get("type"),
        allocations=payload.get("allocations") or [],
        replication_factor_min=payload.get("replication_factor_min"),
        replication_factor_max=payload.get("replication_factor_max"),
        mode=payload.get("mode"),
        shard_size=payload.get("shard_size"),
        user_allocations=payload.get("user_allocations") or [],
        metadata={str(k): str(v) for k, v in metadata.items()},
        expire_at=_parse_optional_timestamp(payload.get("expire_at")),
        timestamp=_parse_optional_timestamp(payload.get("timestamp")),
        pin_update=unwrap_cid(payload.get("pin_update")),
        max_depth=payload.get("max_depth"),
        reference=unwrap_cid(payload.get("reference")),
    )


def normalize_pins(payload: Any) -> List[PinResponse]:
    return [normalize_pin(item) for item in as_item_sequence(payload)]


def normalize_cluster_info(payload: Any) -> ClusterInfo:
    payload = _require_mapping(payload, "id")
    if not payload.get("id"):
        raise MalformedResponse("Peer info response missing 'id'")

    ipfs = payload.get("ipfs")
    return ClusterInfo(
        id=payload["id"],
        addresses=payload.get("addresses") or [],
        version=payload.get("version"),
        commit=payload.get("commit"),
        peer_name=payload.get("peername"),
        rpc_protocol_version=payload.get("rpc_protocol_version"),
        cluster_peers=payload.get("cluster_peers") or [],
        cluster_peers_addresses=payload.get("cluster_peers_addresses") or [],
        ipfs=IpfsPeerInfo(
            id=ipfs.get("id"),
            addresses=ipfs.get("addresses") or [],
            error=ipfs.get("error"),
        ) if isinstance(ipfs, Mapping) else None,
        error=payload.get("error"),
    )


def normalize_version(payload: Any) -> str:
    payload = _require_mapping(payload, "version")
    version = payload.get("version")
    if not version:
        raise MalformedResponse("Version response missing 'version'")
    return version


def normalize_metric_names(payload: Any) -> List[str]:
    return [str(name) for name in as_item_sequence(payload)]
