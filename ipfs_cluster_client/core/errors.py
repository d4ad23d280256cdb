# ipfs_cluster_client/core/errors.py
"""
Error taxonomy for the cluster client.

Every failure raised by the package derives from ClusterClientError:
- TransportError: the request never produced a response (DNS, TLS, refused, timeout)
- ApiError: the cluster answered with a non-2xx status
- CancelledError: the caller cancelled the request through its token
- InvalidOption: client-side option validation failed
- MalformedResponse: a 2xx response could not be decoded or normalized
"""
from typing import Any, Optional


class ClusterClientError(Exception):
    """Base exception for cluster client operations."""
    pass


class TransportError(ClusterClientError):
    """Raised when no response was received from the cluster."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ApiError(ClusterClientError):
    """Raised when the cluster responds with an error status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        status_text: Optional[str] = None,
        body: Any = None
    ):
        self.status_code = status_code
        self.message = message
        self.status_text = status_text
        self.body = body
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status_text:
            return f"{self.status_code} {self.status_text}: {self.message}"
        return f"{self.status_code}: {self.message}"


class CancelledError(ClusterClientError):
    """Raised when a request is aborted through its cancellation token."""
    pass


class InvalidOption(ClusterClientError, ValueError):
    """Raised when an option fails client-side validation."""

    def __init__(self, option: str, value: Any, reason: str):
        self.option = option
        self.value = value
        super().__init__(f"Invalid value {value!r} for option '{option}': {reason}")


class MalformedResponse(ClusterClientError, ValueError):
    """Raised when a successful response does not have the expected shape."""
    pass
