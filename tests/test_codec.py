import pytest

from node_reconciler.codec import (
    decode_configdb_facts,
    decode_configdb_nodes,
    decode_provisioning_hosts,
    embedded_error,
    parse_json,
)
from node_reconciler.core.errors import DecodeError, RemoteError


def test_configdb_nodes_missing_name_is_a_decode_error():
    with pytest.raises(DecodeError, match=r"nodes\[1\].name"):
        decode_configdb_nodes([{"name": "a"}, {"deactivated": None}])


def test_configdb_facts_require_value_key():
    with pytest.raises(DecodeError, match="value is missing"):
        decode_configdb_facts([{"name": "os"}])


def test_configdb_facts_allow_null_and_structured_values():
    facts = decode_configdb_facts(
        [{"name": "a", "value": None}, {"name": "b", "value": {"x": 1}}]
    )

    assert [f.value for f in facts] == [None, {"x": 1}]


def test_provisioning_hosts_need_nested_host_object():
    with pytest.raises(DecodeError, match=r"hosts\[0\].host must be an object"):
        decode_provisioning_hosts([{"name": "flat"}])


def test_non_array_payload_is_rejected():
    with pytest.raises(DecodeError):
        decode_provisioning_hosts({"results": []})


def test_parse_json_wraps_garbage_as_remote_error():
    with pytest.raises(RemoteError):
        parse_json(b"<html>502</html>", "http://x")


def test_embedded_error_matches_prefix_only():
    assert embedded_error({"message": "ERF51-1234: boom"}, "ERF51") == "ERF51-1234: boom"
    assert embedded_error({"message": "created"}, "ERF51") is None
    assert embedded_error({"message": "see ERF51"}, "ERF51") is None
    assert embedded_error([{"message": "ERF51"}], "ERF51") is None
    assert embedded_error({"host": {}}, "ERF51") is None
