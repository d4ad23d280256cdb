# ipfs_cluster_client/__init__.py
"""
Client for the IPFS Cluster REST API.

Key components:
- services.cluster_api: ClusterClient, the public facade
- services.params: option models to query parameters
- services.multipart: file uploads as multipart bodies
- services.normalize: wire responses to result models
- services.dispatcher: HTTP calls, cancellation and error classification

Defaults (URL, credentials, timeouts) are loaded from environment variables
via ipfs_cluster_client.core.config.
"""
from ipfs_cluster_client.api.models.options import (
    AddParams,
    PinlsOptions,
    PinOptions,
    RequestOptions,
    StatusOptions,
)
from ipfs_cluster_client.api.models.responses import (
    AddDirectoryResponse,
    AddResponse,
    ClusterInfo,
    PinInfo,
    PinResponse,
    StatusResponse,
    TrackerStatus,
)
from ipfs_cluster_client.core.endpoint import ClusterEndpoint
from ipfs_cluster_client.core.errors import (
    ApiError,
    CancelledError,
    ClusterClientError,
    InvalidOption,
    MalformedResponse,
    TransportError,
)
from ipfs_cluster_client.services.cancellation import CancellationToken
from ipfs_cluster_client.services.cluster_api import ClusterClient
from ipfs_cluster_client.services.multipart import FileWithName, MultipartBody

__version__ = "0.1.0"
