# ipfs_cluster_client/services/cluster_api.py
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

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
    PinResponse,
    StatusResponse,
)
from ipfs_cluster_client.core.config import Settings, settings as default_settings
from ipfs_cluster_client.core.endpoint import ClusterEndpoint
from ipfs_cluster_client.services import normalize
from ipfs_cluster_client.services.dispatcher import RequestDispatcher, Transport
from ipfs_cluster_client.services.multipart import (
    FileWithName,
    MultipartBody,
    build_car_body,
    build_directory_body,
    build_file_body,
)
from ipfs_cluster_client.services.params import (
    coerce_options,
    encode_add_params,
    encode_pin_params,
    encode_pinls_params,
    encode_status_params,
)

logger = logging.getLogger(__name__)

OptionsArg = Union[None, RequestOptions, Mapping[str, Any]]


def pin_path(cid: str) -> str:
    """
    Path for pin/unpin.

    A value starting with '/' is an already-rooted path such as /ipfs/<cid>
    and is appended to 'pins' as is; anything else is escaped as one segment.
    """
    if cid.startswith("/"):
        return f"pins{quote(cid, safe='/')}"
    return f"pins/{quote(cid, safe='')}"


class ClusterClient:
    """
    Client for an IPFS Cluster REST API.

    The endpoint (base URL and credentials) is fixed at construction. Methods
    hold no per-call state on the instance, so one client can be shared by
    concurrent callers. Nothing is retried or cached.
    """

    def __init__(
        self,
        host: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        timeout: Optional[float] = None,
        upload_timeout: Optional[float] = None,
        validate_options: Optional[bool] = None
    ):
        self.endpoint = ClusterEndpoint(base_url=host, username=username, password=password)
        self.upload_timeout = upload_timeout or default_settings.CLUSTER_UPLOAD_TIMEOUT
        self.validate_options = (
            default_settings.CLUSTER_VALIDATE_OPTIONS if validate_options is None else validate_options
        )
        self._dispatcher = RequestDispatcher(
            self.endpoint,
            transport=transport,
            timeout=timeout or default_settings.CLUSTER_REQUEST_TIMEOUT,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "ClusterClient":
        """Builds a client from Settings (the module-level settings by default)."""
        settings = settings or default_settings
        kwargs.setdefault("timeout", settings.CLUSTER_REQUEST_TIMEOUT)
        kwargs.setdefault("upload_timeout", settings.CLUSTER_UPLOAD_TIMEOUT)
        kwargs.setdefault("validate_options", settings.CLUSTER_VALIDATE_OPTIONS)
        return cls(
            str(settings.CLUSTER_API_URL),
            settings.CLUSTER_API_USERNAME,
            settings.CLUSTER_API_PASSWORD,
            **kwargs,
        )

    @property
    def host_url(self) -> str:
        return self.endpoint.base_url

    def close(self) -> None:
        """Closes the underlying HTTP session. The client must not be used afterwards."""
        self._dispatcher.close()

    def __enter__(self) -> "ClusterClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _request(self, path: str, options: RequestOptions, **kwargs) -> Any:
        return self._dispatcher.request(
            path,
            signal=options.signal,
            timeout=kwargs.pop("timeout", None) or options.timeout,
            **kwargs,
        )

    def version(self, options: OptionsArg = None) -> str:
        """Returns the cluster peer's version string."""
        options = coerce_options(options, RequestOptions)
        return normalize.normalize_version(self._request("version", options))

    def info(self, options: OptionsArg = None) -> ClusterInfo:
        """Returns identity and peer information of the contacted cluster peer."""
        options = coerce_options(options, RequestOptions)
        return normalize.normalize_cluster_info(self._request("id", options))

    def _post_add(self, form: MultipartBody, options: AddParams, params: Dict[str, str]) -> Any:
        return self._request(
            "add",
            options,
            method="POST",
            params=params,
            body=form.body,
            headers=form.headers(),
            timeout=options.timeout or self.upload_timeout,
        )

    def add_from_form_data(self, form: MultipartBody, options: OptionsArg = None) -> AddResponse:
        """
        Adds content from an already built multipart body.

        Only the first item the cluster reports is returned, whether it
        answered with a single object or an array.

        Raises:
            InvalidOption: If validation is enabled and an option is invalid
            TransportError, ApiError, CancelledError: See RequestDispatcher.request
        """
        options = coerce_options(options, AddParams)
        params = encode_add_params(options, validate=self.validate_options)

        result = normalize.normalize_add(self._post_add(form, options, params))
        logger.info(f"Successfully added '{result.name}' to cluster with CID: {result.cid}")
        return result

    def add_file(self, file: FileWithName, options: OptionsArg = None) -> AddResponse:
        """Adds a single file."""
        return self.add_from_form_data(build_file_body(file), options)

    def add_data(self, data: bytes, options: OptionsArg = None, name: str = "blob") -> AddResponse:
        """Adds raw bytes as a single file called `name`."""
        return self.add_file(FileWithName(name=name, contents=data), options)

    def add_directory(self, files: Sequence[FileWithName], options: OptionsArg = None) -> AddDirectoryResponse:
        """
        Adds a directory tree in one request.

        Each file's name is its path relative to the directory root. The
        request always asks for a wrapping directory and a non-streamed
        answer; every item the cluster reports is returned, in order.
        """
        options = coerce_options(options, AddParams)
        form = build_directory_body(files)
        params = encode_add_params(options, validate=self.validate_options)
        params["stream-channels"] = "false"
        params["wrap-with-directory"] = "true"

        results = normalize.normalize_add_directory(self._post_add(form, options, params))
        logger.info(f"Successfully added directory of {form.part_count} files ({len(results)} items returned)")
        return results

    def add_car(self, car: FileWithName, options: OptionsArg = None) -> AddResponse:
        """Adds a CAR archive; the upload format is forced to 'car'."""
        options = coerce_options(options, AddParams).model_copy(update={"format": "car"})
        return self.add_from_form_data(build_car_body(car), options)

    def pin(self, cid: str, options: OptionsArg = None) -> PinResponse:
        """Pins a CID, or an already-rooted path such as /ipfs/<cid>."""
        options = coerce_options(options, PinOptions)
        params = encode_pin_params(options, validate=self.validate_options)

        result = normalize.normalize_pin(
            self._request(pin_path(cid), options, method="POST", params=params)
        )
        logger.info(f"Successfully pinned {result.cid}")
        return result

    def unpin(self, cid: str, options: OptionsArg = None) -> PinResponse:
        """Unpins a CID, or an already-rooted path such as /ipfs/<cid>."""
        options = coerce_options(options, RequestOptions)

        result = normalize.normalize_pin(self._request(pin_path(cid), options, method="DELETE"))
        logger.info(f"Successfully unpinned {result.cid}")
        return result

    def pinls(self, options: OptionsArg = None) -> List[PinResponse]:
        """Lists pins tracked by the cluster (GET /allocations)."""
        options = coerce_options(options, PinlsOptions)
        return normalize.normalize_pins(
            self._request("allocations", options, params=encode_pinls_params(options))
        )

    def status(self, cid: str, options: OptionsArg = None) -> StatusResponse:
        """Returns the per-peer status of a CID."""
        options = coerce_options(options, StatusOptions)
        path = f"pins/{quote(cid, safe='')}"
        return normalize.normalize_status(
            self._request(path, options, params=encode_status_params(options))
        )

    def allocation(self, cid: str, options: OptionsArg = None) -> PinResponse:
        """Returns the pin record and allocations for a CID."""
        options = coerce_options(options, RequestOptions)
        path = f"allocations/{quote(cid, safe='')}"
        return normalize.normalize_pin(self._request(path, options))

    def recover(self, cid: str, options: OptionsArg = None) -> StatusResponse:
        """Re-triggers pin/unpin operations for a CID in error state."""
        options = coerce_options(options, StatusOptions)
        path = f"pins/{quote(cid, safe='')}/recover"

        result = normalize.normalize_status(
            self._request(path, options, method="POST", params=encode_status_params(options))
        )
        logger.info(f"Recover triggered for {result.cid}")
        return result

    def metric_names(self, options: OptionsArg = None) -> List[str]:
        """Returns the names of the metrics the cluster monitors."""
        options = coerce_options(options, RequestOptions)
        return normalize.normalize_metric_names(self._request("monitor/metrics", options))
