"""
Response codec.

Both services answer with loosely shaped json. These helpers turn raw bodies
into typed records and raise DecodeError naming the missing field.
"""

from __future__ import annotations

import json
from typing import Any

from node_reconciler.core.errors import DecodeError, RemoteError
from node_reconciler.core.types import Fact


def _require_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, list):
        raise DecodeError(f"{name} must be an array")
    return value


def _require_dict(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"{name} must be an object")
    return value


def _require_str(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise DecodeError(f"{name} must be a non empty string")
    return value


def parse_json(body: bytes, source: str) -> Any:
    """Parse a response body, raising RemoteError when it is not json."""
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise RemoteError(f"{source} returned a body that is not json") from exc


def decode_configdb_nodes(payload: Any) -> set[str]:
    """
    Decode GET /v3/nodes.

    Shape: [{"name": "web1", ...}, ...]
    """
    names: set[str] = set()
    for i, raw in enumerate(_require_list(payload, "nodes")):
        obj = _require_dict(raw, f"nodes[{i}]")
        names.add(_require_str(obj.get("name"), f"nodes[{i}].name"))
    return names


def decode_configdb_facts(payload: Any) -> list[Fact]:
    """
    Decode GET /v3/nodes/{host}/facts.

    Shape: [{"name": "os", "value": "linux", ...}, ...]
    value may be any json value, but the key has to be present.
    """
    facts: list[Fact] = []
    for i, raw in enumerate(_require_list(payload, "facts")):
        obj = _require_dict(raw, f"facts[{i}]")
        name = _require_str(obj.get("name"), f"facts[{i}].name")
        if "value" not in obj:
            raise DecodeError(f"facts[{i}].value is missing")
        facts.append(Fact(name=name, value=obj["value"]))
    return facts


def decode_provisioning_hosts(payload: Any) -> set[str]:
    """
    Decode GET /api/hosts.

    Shape: [{"host": {"name": "web1", ...}}, ...]
    """
    names: set[str] = set()
    for i, raw in enumerate(_require_list(payload, "hosts")):
        obj = _require_dict(raw, f"hosts[{i}]")
        host = _require_dict(obj.get("host"), f"hosts[{i}].host")
        names.add(_require_str(host.get("name"), f"hosts[{i}].host.name"))
    return names


def embedded_error(payload: Any, prefix: str) -> str | None:
    """
    Return the embedded error message when the body carries one.

    The provisioning service answers 200 with {"message": "ERF51-..."} for some
    failures. Anything else, including non object bodies, is not an error.
    """
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if isinstance(message, str) and message.startswith(prefix):
        return message
    return None
