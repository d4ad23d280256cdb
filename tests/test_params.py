# tests/test_params.py
"""
Tests for query parameter encoding of add, pin, status and pinls options.
"""
import pytest
from datetime import datetime, timezone, timedelta

from ipfs_cluster_client.api.models.options import AddParams, PinOptions, StatusOptions, PinlsOptions
from ipfs_cluster_client.core.errors import InvalidOption
from ipfs_cluster_client.services.cancellation import CancellationToken
from ipfs_cluster_client.services.params import (
    encode_add_params,
    encode_pin_params,
    encode_status_params,
    encode_pinls_params,
    encode_timestamp,
)


class TestEncodeAddParams:
    """Test add option encoding."""

    def test_none_yields_empty_params(self):
        """No options means no query parameters at all."""
        assert encode_add_params(None) == {}

    def test_empty_model_yields_empty_params(self):
        """An AddParams with nothing set encodes to an empty dict."""
        assert encode_add_params(AddParams()) == {}

    def test_all_add_fields_use_wire_names(self):
        """Every add option is written under its wire name."""
        params = encode_add_params(AddParams(
            cid_version=1,
            hash_function="sha2-256",
            chunker="size-262144",
            raw_leaves=True,
            format="unixfs",
            wrap_with_directory=False,
            stream_channels=True,
            no_pin=False,
            local=True,
        ))

        assert params == {
            "cid-version": "1",
            "hash": "sha2-256",
            "chunker": "size-262144",
            "raw-leaves": "true",
            "format": "unixfs",
            "wrap-with-directory": "false",
            "stream-channels": "true",
            "no-pin": "false",
            "local": "true",
        }

    def test_booleans_are_strings(self):
        """Booleans are encoded as 'true'/'false', never native bools."""
        params = encode_add_params(AddParams(raw_leaves=False, local=True))
        for value in params.values():
            assert isinstance(value, str)
        assert params["raw-leaves"] == "false"
        assert params["local"] == "true"

    def test_add_params_include_pin_options(self):
        """Pin options carried by an add request are encoded too."""
        params = encode_add_params(AddParams(
            replication_factor_min=1,
            replication_factor_max=3,
            name="backup",
            user_allocations=["peerA", "peerB"],
            metadata={"owner": "alice"},
        ))

        assert params["replication-min"] == "1"
        assert params["replication-max"] == "3"
        assert params["name"] == "backup"
        assert params["user-allocations"] == "peerA,peerB"
        assert params["meta-owner"] == "alice"

    def test_unknown_mapping_keys_are_dropped(self):
        """Plain mappings are allow-listed: unknown keys never reach the wire."""
        params = encode_add_params({"cid_version": 1, "internal_flag": "secret", "raw-leaves": True})
        assert params == {"cid-version": "1"}

    def test_signal_and_timeout_never_encoded(self):
        """Per-call options are not query parameters."""
        params = encode_add_params(AddParams(signal=CancellationToken(), timeout=5))
        assert params == {}

    def test_out_of_range_values_pass_through_without_validation(self):
        """Without validation, the server decides on unknown enum values."""
        params = encode_add_params(AddParams(format="tar", cid_version=7))
        assert params["format"] == "tar"
        assert params["cid-version"] == "7"

    def test_zero_values_are_sent(self):
        """Zero is a value, not an absence."""
        params = encode_add_params(AddParams(cid_version=0, replication_factor_min=0))
        assert params["cid-version"] == "0"
        assert params["replication-min"] == "0"

    def test_empty_allocations_are_omitted(self):
        """An empty allocation list is treated as unset."""
        assert encode_add_params(AddParams(user_allocations=[], metadata={})) == {}


class TestEncodePinParams:
    """Test pin option encoding."""

    def test_none_yields_empty_params(self):
        assert encode_pin_params() == {}

    def test_metadata_is_one_param_per_key(self):
        """Metadata entries become meta-<key> parameters."""
        params = encode_pin_params(PinOptions(metadata={"a": "b", "team": "infra"}))
        assert params == {"meta-a": "b", "meta-team": "infra"}

    def test_expire_at_is_rfc3339_utc(self):
        """expire_at is sent in UTC with a Z suffix."""
        tz = timezone(timedelta(hours=2))
        params = encode_pin_params(PinOptions(expire_at=datetime(2024, 6, 1, 14, 0, 0, tzinfo=tz)))
        assert params["expire-at"] == "2024-06-01T12:00:00Z"

    def test_naive_expire_at_taken_as_utc(self):
        assert encode_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"

    def test_pin_fields(self):
        """Pin-only fields are encoded; add-only fields are ignored."""
        params = encode_pin_params({
            "mode": "direct",
            "shard_size": 1048576,
            "pin_update": "bafyold",
            "cid_version": 1,
        })
        assert params == {"mode": "direct", "shard-size": "1048576", "pin-update": "bafyold"}

    def test_add_params_model_accepted(self):
        """An AddParams instance only contributes its pin fields."""
        params = encode_pin_params(AddParams(name="n", raw_leaves=True))
        assert params == {"name": "n"}


class TestValidation:
    """Test optional client-side validation."""

    def test_invalid_format_raises(self):
        with pytest.raises(InvalidOption) as exc_info:
            encode_add_params(AddParams(format="tar"), validate=True)
        assert exc_info.value.option == "format"
        assert exc_info.value.value == "tar"

    def test_invalid_cid_version_raises(self):
        with pytest.raises(InvalidOption, match="cid_version"):
            encode_add_params(AddParams(cid_version=2), validate=True)

    def test_invalid_mode_raises(self):
        with pytest.raises(InvalidOption, match="mode"):
            encode_pin_params(PinOptions(mode="sideways"), validate=True)

    def test_replication_min_above_max_raises(self):
        with pytest.raises(InvalidOption, match="replication_factor_min"):
            encode_pin_params(PinOptions(replication_factor_min=5, replication_factor_max=2), validate=True)

    def test_replication_max_everywhere_is_valid(self):
        """-1 means 'pin everywhere' and imposes no upper bound."""
        params = encode_pin_params(
            PinOptions(replication_factor_min=3, replication_factor_max=-1), validate=True
        )
        assert params["replication-max"] == "-1"

    def test_invalid_option_is_a_value_error(self):
        with pytest.raises(ValueError):
            encode_add_params(AddParams(format="zip"), validate=True)

    def test_valid_options_pass(self):
        params = encode_add_params(AddParams(format="car", cid_version=1, mode="recursive"), validate=True)
        assert params == {"format": "car", "cid-version": "1", "mode": "recursive"}


class TestOtherEncoders:
    """Test status and pinls encoders."""

    def test_status_local(self):
        assert encode_status_params(StatusOptions(local=True)) == {"local": "true"}

    def test_status_empty(self):
        assert encode_status_params(None) == {}

    def test_pinls_filter(self):
        assert encode_pinls_params(PinlsOptions(filter="all")) == {"filter": "all"}

    def test_pinls_empty(self):
        assert encode_pinls_params() == {}
