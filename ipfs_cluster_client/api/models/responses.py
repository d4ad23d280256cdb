# ipfs_cluster_client/api/models/responses.py
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Dict, List


class TrackerStatus(str, Enum):
    """Pin states reported per peer by the cluster's pin tracker."""
    UNDEFINED = "undefined"
    CLUSTER_ERROR = "cluster_error"
    PIN_ERROR = "pin_error"
    UNPIN_ERROR = "unpin_error"
    ERROR = "error"
    PINNED = "pinned"
    PINNING = "pinning"
    UNPINNING = "unpinning"
    UNPINNED = "unpinned"
    REMOTE = "remote"
    PIN_QUEUED = "pin_queued"
    UNPIN_QUEUED = "unpin_queued"
    QUEUED = "queued"
    SHARDED = "sharded"
    UNEXPECTEDLY_UNPINNED = "unexpectedly_unpinned"


class AddResponse(BaseModel):
    """One added item. `cid` is always the plain identifier string."""
    name: str = Field(..., description="File or directory name as seen by the cluster.")
    cid: str = Field(..., description="Content identifier of the added item.")
    size: Optional[int] = Field(None, description="Size in bytes reported by the cluster.")
    allocations: List[str] = Field(default_factory=list, description="Peers the content was allocated to.")

    class Config:
        frozen = True


AddDirectoryResponse = List[AddResponse]


class PinInfo(BaseModel):
    """
    Status of a pin on a single cluster peer.

    `status` and `error` are kept exactly as the server sent them; compare
    `status` against TrackerStatus members (they are str-valued).
    """
    peer_name: str = Field(..., description="Human readable name of the peer.")
    status: str = Field(..., description="Tracker status, e.g. 'pinned'.")
    timestamp: datetime = Field(..., description="When the status was last updated.")
    error: Optional[str] = Field(None, description="Error message reported by the peer, if any.")

    class Config:
        frozen = True


class StatusResponse(BaseModel):
    """Per-peer status of a CID."""
    cid: str
    name: Optional[str] = None
    peer_map: Dict[str, PinInfo] = Field(default_factory=dict, description="Peer ID to status.")

    class Config:
        frozen = True


class PinResponse(BaseModel):
    """Normalized pin record as returned by pin, unpin and allocation calls."""
    cid: str = Field(..., description="Pinned content identifier.")
    name: Optional[str] = Field(None, description="Pin name.")
    type: Optional[int] = Field(None, description="Cluster pin type (data, meta, clusterdag, shard).")
    allocations: List[str] = Field(default_factory=list, description="Peers currently allocated to the pin.")
    replication_factor_min: Optional[int] = None
    replication_factor_max: Optional[int] = None
    mode: Optional[str] = None
    shard_size: Optional[int] = None
    user_allocations: List[str] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)
    expire_at: Optional[datetime] = Field(None, description="Expiry time, None when the pin never expires.")
    timestamp: Optional[datetime] = Field(None, description="When the pin was created.")
    pin_update: Optional[str] = Field(None, description="CID the pin was updated from.")
    max_depth: Optional[int] = None
    reference: Optional[str] = Field(None, description="CID of the referenced meta pin, for shards.")

    class Config:
        frozen = True


class IpfsPeerInfo(BaseModel):
    """The IPFS daemon attached to a cluster peer."""
    id: Optional[str] = None
    addresses: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    class Config:
        frozen = True


class ClusterInfo(BaseModel):
    """Identity of the contacted cluster peer (GET /id)."""
    id: str
    addresses: List[str] = Field(default_factory=list)
    version: Optional[str] = None
    commit: Optional[str] = None
    peer_name: Optional[str] = None
    rpc_protocol_version: Optional[str] = None
    cluster_peers: List[str] = Field(default_factory=list)
    cluster_peers_addresses: List[str] = Field(default_factory=list)
    ipfs: Optional[IpfsPeerInfo] = None
    error: Optional[str] = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "12D3KooWEwNf6ryVYLjMBSDp5JUfKxmF7WAzJJAYgGvEPDRCzzmo",
                "addresses": ["/ip4/127.0.0.1/tcp/9096/p2p/12D3KooWEwNf6ryVYLjMBSDp5JUfKxmF7WAzJJAYgGvEPDRCzzmo"],
                "version": "1.0.8",
                "commit": "",
                "peer_name": "cluster0",
                "rpc_protocol_version": "/ipfscluster/1.0/rpc",
                "cluster_peers": ["12D3KooWEwNf6ryVYLjMBSDp5JUfKxmF7WAzJJAYgGvEPDRCzzmo"],
                "cluster_peers_addresses": [],
                "ipfs": {"id": "12D3KooWKAwaGeSLQ5K4axxJ7nmGrRPjM4WtE8VhKpY1m7szTA8M", "addresses": []},
                "error": None
            }
        }
