# ipfs_cluster_client/services/params.py
"""
Query parameter encoding for the cluster REST API.

Each encoder is an allow-list: only the fields named in the tables below are
written, under their wire names, and only when they are set. Everything is
encoded as a string (booleans as "true"/"false").
"""
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from ipfs_cluster_client.api.models.options import (
    ADD_FORMATS,
    CID_VERSIONS,
    PIN_MODES,
    AddParams,
    PinlsOptions,
    PinOptions,
    RequestOptions,
    StatusOptions,
)
from ipfs_cluster_client.core.errors import InvalidOption

OptionsT = TypeVar("OptionsT", bound=RequestOptions)

METADATA_PREFIX = "meta-"

# option field -> query parameter name
PIN_PARAM_NAMES = {
    "replication_factor_min": "replication-min",
    "replication_factor_max": "replication-max",
    "name": "name",
    "mode": "mode",
    "shard_size": "shard-size",
    "user_allocations": "user-allocations",
    "expire_at": "expire-at",
    "pin_update": "pin-update",
}

ADD_PARAM_NAMES = {
    **PIN_PARAM_NAMES,
    "cid_version": "cid-version",
    "hash_function": "hash",
    "chunker": "chunker",
    "raw_leaves": "raw-leaves",
    "format": "format",
    "wrap_with_directory": "wrap-with-directory",
    "stream_channels": "stream-channels",
    "no_pin": "no-pin",
    "local": "local",
}

STATUS_PARAM_NAMES = {"local": "local"}

PINLS_PARAM_NAMES = {"filter": "filter"}


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def encode_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC with a 'Z' suffix. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


def encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return encode_bool(value)
    if isinstance(value, datetime):
        return encode_timestamp(value)
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def coerce_options(options: Union[None, OptionsT, Mapping[str, Any]], model: Type[OptionsT]) -> OptionsT:
    """Turns None, an options model or a plain mapping into `model`, dropping unknown fields."""
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    if isinstance(options, RequestOptions):
        # A narrower or sibling options model: keep only the fields this model knows
        return model.model_validate(options.model_dump(exclude_none=True))
    return model.model_validate(dict(options))


def _encode(options: RequestOptions, names: Mapping[str, str]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for field_name, param_name in names.items():
        value = getattr(options, field_name, None)
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        params[param_name] = encode_value(value)
    return params


def _encode_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    if not metadata:
        return {}
    return {f"{METADATA_PREFIX}{key}": encode_value(value) for key, value in metadata.items()}


def validate_pin_options(options: PinOptions) -> None:
    """
    Client-side checks for pin options.

    Raises:
        InvalidOption: On the first option outside its documented range.
    """
    if options.mode is not None and options.mode not in PIN_MODES:
        raise InvalidOption("mode", options.mode, f"expected one of {', '.join(PIN_MODES)}")

    if options.shard_size is not None and options.shard_size < 0:
        raise InvalidOption("shard_size", options.shard_size, "must not be negative")

    rmin, rmax = options.replication_factor_min, options.replication_factor_max
    if rmin is not None and rmax is not None and rmax > 0 and rmin > rmax:
        raise InvalidOption(
            "replication_factor_min", rmin, f"greater than replication_factor_max ({rmax})"
        )


def validate_add_params(options: AddParams) -> None:
    """
    Client-side checks for add options, including the pin options they carry.

    Raises:
        InvalidOption: On the first option outside its documented range.
    """
    validate_pin_options(options)

    if options.format is not None and options.format not in ADD_FORMATS:
        raise InvalidOption("format", options.format, f"expected one of {', '.join(ADD_FORMATS)}")

    if options.cid_version is not None and options.cid_version not in CID_VERSIONS:
        raise InvalidOption("cid_version", options.cid_version, "expected 0 or 1")


def encode_pin_params(
    options: Union[None, PinOptions, Mapping[str, Any]] = None,
    validate: bool = False
) -> Dict[str, str]:
    """
    Encodes pin options into query parameters for POST /pins/{cid}.

    Args:
        options: PinOptions, a plain mapping of the same fields, or None
        validate: Raise InvalidOption for values outside documented enumerations

    Returns:
        Wire parameters; empty when nothing is set
    """
    options = coerce_options(options, PinOptions)
    if validate:
        validate_pin_options(options)

    params = _encode(options, PIN_PARAM_NAMES)
    params.update(_encode_metadata(options.metadata))
    return params


def encode_add_params(
    options: Union[None, AddParams, Mapping[str, Any]] = None,
    validate: bool = False
) -> Dict[str, str]:
    """
    Encodes add options into query parameters for POST /add.

    Args:
        options: AddParams, a plain mapping of the same fields, or None
        validate: Raise InvalidOption for values outside documented enumerations

    Returns:
        Wire parameters; empty when nothing is set
    """
    options = coerce_options(options, AddParams)
    if validate:
        validate_add_params(options)

    params = _encode(options, ADD_PARAM_NAMES)
    params.update(_encode_metadata(options.metadata))
    return params


def encode_status_params(options: Union[None, StatusOptions, Mapping[str, Any]] = None) -> Dict[str, str]:
    return _encode(coerce_options(options, StatusOptions), STATUS_PARAM_NAMES)


def encode_pinls_params(options: Union[None, PinlsOptions, Mapping[str, Any]] = None) -> Dict[str, str]:
    return _encode(coerce_options(options, PinlsOptions), PINLS_PARAM_NAMES)
