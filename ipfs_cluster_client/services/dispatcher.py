# ipfs_cluster_client/services/dispatcher.py
"""
Issues requests against the cluster REST API and classifies failures.

The dispatcher is the only place that talks to the transport and the only
place that wires a CancellationToken into a request.
"""
import json
import logging
import threading
from typing import Any, Dict, Optional, Protocol

import requests
from requests.exceptions import RequestException

from ipfs_cluster_client.core.endpoint import ClusterEndpoint
from ipfs_cluster_client.core.errors import (
    ApiError,
    CancelledError,
    MalformedResponse,
    TransportError,
)
from ipfs_cluster_client.core.version import user_agent
from ipfs_cluster_client.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        params: Dict[str, str],
        data: Optional[bytes],
        timeout: float
    ) -> requests.Response:
        ...


class RequestsTransport:
    """HTTP transport backed by a requests session."""

    def __init__(self, session: Optional[requests.Session] = None):
        self._session = session or requests.Session()

    def send(self, method, url, *, headers, params, data, timeout):
        return self._session.request(
            method, url, headers=headers, params=params, data=data, timeout=timeout
        )

    def close(self) -> None:
        self._session.close()


def decode_payload(text: str) -> Any:
    """
    Decodes a response body.

    Returns:
        None for an empty body, the JSON value for a single document, or a list
        of values for newline-delimited JSON (streaming responses)

    Raises:
        MalformedResponse: If the body is neither JSON nor NDJSON
    """
    text = (text or "").strip()
    if not text:
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    try:
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Could not decode response body as JSON: {e}") from e


def _error_message(body: Any, text: str, reason: Optional[str]) -> str:
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if text and text.strip():
        return text.strip()
    return reason or "Unknown error"


def build_api_error(response: requests.Response) -> ApiError:
    """Builds an ApiError from a non-2xx response, decoding its body when possible."""
    text = response.text or ""
    try:
        body = json.loads(text) if text.strip() else None
    except json.JSONDecodeError:
        body = text

    return ApiError(
        status_code=response.status_code,
        message=_error_message(body, text, response.reason),
        status_text=response.reason,
        body=body,
    )


class RequestDispatcher:
    """
    Sends requests for one cluster endpoint.

    Holds only immutable configuration and the transport, so one instance can
    serve concurrent calls.
    """

    def __init__(
        self,
        endpoint: ClusterEndpoint,
        transport: Optional[Transport] = None,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self.endpoint = endpoint
        self.transport = transport or RequestsTransport()
        self.timeout = timeout

    def close(self) -> None:
        """Releases the transport's connections, if it holds any."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def build_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        merged = {"User-Agent": user_agent(), "Accept": "application/json"}
        merged.update(headers or {})
        return self.endpoint.construct_headers(merged)

    def _send(self, method, url, headers, params, body, timeout):
        try:
            return self.transport.send(
                method, url, headers=headers, params=params, data=body, timeout=timeout
            )
        except RequestException as e:
            logger.error(f"Error calling cluster API ({method} {url}): {e}")
            raise TransportError(f"Request to {url} failed: {e}", cause=e) from e

    def _send_cancellable(self, signal: CancellationToken, method, url, headers, params, body, timeout):
        """Runs the transport call on a worker thread so cancellation can interrupt the wait."""
        signal.raise_if_cancelled()

        finished = threading.Event()
        lock = threading.Lock()
        outcome: Dict[str, Any] = {"abandoned": False}

        def run() -> None:
            try:
                response = self._send(method, url, headers, params, body, timeout)
            except BaseException as e:
                outcome["error"] = e
            else:
                with lock:
                    abandoned = outcome["abandoned"]
                    if not abandoned:
                        outcome["response"] = response
                # The caller already raised CancelledError; nobody will read this
                if abandoned:
                    logger.debug(f"Closing late response for cancelled {method} {url}")
                    response.close()
            finally:
                finished.set()

        unregister = signal.add_callback(finished.set)
        worker = threading.Thread(target=run, name=f"cluster-{method.lower()}", daemon=True)
        try:
            worker.start()
            finished.wait()
        finally:
            unregister()

        if signal.cancelled:
            logger.info(f"Cancelled {method} {url}")
            with lock:
                outcome["abandoned"] = True
                response = outcome.pop("response", None)
            if response is not None:
                response.close()
            raise CancelledError(signal.reason)

        if "error" in outcome:
            raise outcome["error"]
        return outcome["response"]

    def request(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        body: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        signal: Optional[CancellationToken] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Issues one request against the cluster and returns the decoded payload.

        Args:
            path: Path relative to the endpoint's base URL
            method: HTTP method
            params: Query parameters, already encoded as strings
            body: Raw request body (e.g. a multipart body)
            headers: Extra headers; Authorization is added from the endpoint
            signal: Cancellation token for this call
            timeout: Timeout in seconds, defaults to the dispatcher's timeout

        Returns:
            The decoded JSON payload (see decode_payload)

        Raises:
            TransportError: If no response was received
            ApiError: If the cluster answered with a non-2xx status
            CancelledError: If the signal fired before the call completed
            MalformedResponse: If a 2xx body could not be decoded
        """
        url = self.endpoint.url_for(path)
        headers = self.build_headers(headers)
        params = params or {}
        timeout = timeout or self.timeout

        logger.debug(f"{method} {url} params={params}")

        if signal is None:
            response = self._send(method, url, headers, params, body, timeout)
        else:
            response = self._send_cancellable(signal, method, url, headers, params, body, timeout)

        if not 200 <= response.status_code < 300:
            error = build_api_error(response)
            logger.error(f"Cluster API returned {error.status_code} for {method} {url}: {error.message}")
            raise error

        return decode_payload(response.text)
