# ipfs_cluster_client/api/models/options.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, Dict, List

from ipfs_cluster_client.services.cancellation import CancellationToken

# Values the cluster documents for enumerated options. Only enforced when
# client-side validation is switched on.
ADD_FORMATS = ("unixfs", "car")
PIN_MODES = ("recursive", "direct")
CID_VERSIONS = (0, 1)


class RequestOptions(BaseModel):
    """Per-call options shared by every client method."""
    signal: Optional[CancellationToken] = Field(
        None,
        description="Cancellation token for this call only."
    )
    timeout: Optional[float] = Field(
        None,
        description="Timeout in seconds. Falls back to the client default.",
        gt=0
    )

    class Config:
        arbitrary_types_allowed = True
        extra = "ignore"  # Unknown option names never reach the wire
        frozen = True


class PinOptions(RequestOptions):
    """Options controlling a pin operation."""
    replication_factor_min: Optional[int] = Field(None, description="Minimum number of peers holding the pin (-1 = everywhere).")
    replication_factor_max: Optional[int] = Field(None, description="Maximum number of peers holding the pin (-1 = everywhere).")
    name: Optional[str] = Field(None, description="Human readable pin name.")
    mode: Optional[str] = Field(None, description="Pin mode: 'recursive' or 'direct'.")
    shard_size: Optional[int] = Field(None, description="Maximum shard size in bytes for sharded DAGs.")
    user_allocations: Optional[List[str]] = Field(None, description="Peer IDs that should hold the pin.")
    metadata: Optional[Dict[str, str]] = Field(None, description="Free-form key/value metadata attached to the pin.")
    expire_at: Optional[datetime] = Field(None, description="Time after which the pin is removed.")
    pin_update: Optional[str] = Field(None, description="CID of an existing pin whose allocations are reused.")


class AddParams(PinOptions):
    """Options for content-addition requests (POST /add)."""
    cid_version: Optional[int] = Field(None, description="CID version of the resulting DAG (0 or 1).")
    hash_function: Optional[str] = Field(None, description="Multihash function name, e.g. 'sha2-256'.")
    chunker: Optional[str] = Field(None, description="Chunking algorithm, e.g. 'size-262144'.")
    raw_leaves: Optional[bool] = Field(None, description="Use raw blocks for leaf nodes.")
    format: Optional[str] = Field(None, description="Upload format: 'unixfs' or 'car'.")
    wrap_with_directory: Optional[bool] = Field(None, description="Wrap added files in a directory object.")
    stream_channels: Optional[bool] = Field(None, description="Stream one JSON object per added item.")
    no_pin: Optional[bool] = Field(None, description="Add the content without pinning it.")
    local: Optional[bool] = Field(None, description="Only add to the local peer's IPFS daemon.")


class StatusOptions(RequestOptions):
    """Options for status and recover calls."""
    local: Optional[bool] = Field(None, description="Only report the status tracked by the contacted peer.")


class PinlsOptions(RequestOptions):
    """Options for listing pins (GET /allocations)."""
    filter: Optional[str] = Field(
        None,
        description="Pin type filter, e.g. 'pin', 'meta-pin', 'clusterdag-pin', 'shard-pin' or 'all'."
    )
