import base64
import json
import logging

import pytest

from node_reconciler.clients.provisioning import ProvisioningClient
from node_reconciler.core.errors import ApplicationError, RemoteError
from node_reconciler.core.types import CallOutcome, FactDocument
from node_reconciler.transport import HttpResponse

BASE = "https://foreman.test"


def make_client(http, **kwargs) -> ProvisioningClient:
    return ProvisioningClient(base_url=BASE, username="admin", password="secret", http=http, **kwargs)


def expected_auth() -> str:
    return "Basic " + base64.b64encode(b"admin:secret").decode()


def test_list_hosts_reads_nested_name_with_page_size(http):
    http.add(
        "GET",
        f"{BASE}/api/hosts?per_page=10000",
        [{"host": {"name": "b", "id": 1}}, {"host": {"name": "c", "id": 2}}],
    )

    hosts = make_client(http).list_hosts()

    assert hosts == {"b", "c"}
    assert http.calls[0]["headers"]["Authorization"] == expected_auth()


def test_list_hosts_custom_page_size(http):
    http.add("GET", f"{BASE}/api/hosts?per_page=50", [])

    assert make_client(http).list_hosts(per_page=50) == set()


def test_list_hosts_non_2xx_is_remote_error(http):
    http.add("GET", f"{BASE}/api/hosts?per_page=10000", {"error": "denied"}, status=401)

    with pytest.raises(RemoteError):
        make_client(http).list_hosts()


def test_upload_facts_posts_document_with_json_headers(http):
    http.add("POST", f"{BASE}/api/hosts/facts", {"name": "h1", "id": 7})
    doc = FactDocument(name="h1", certname="h1", facts={"os": "linux"})

    result = make_client(http).upload_facts(doc)

    assert result.ok
    assert result.body == {"name": "h1", "id": 7}
    call = http.calls_to("POST")[0]
    assert json.loads(call["body"]) == {"name": "h1", "certname": "h1", "facts": {"os": "linux"}}
    assert call["headers"]["Accept"] == "application/json,version=2"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["Authorization"] == expected_auth()


def test_upload_facts_embedded_error_is_failure_not_crash(http, caplog):
    http.add("POST", f"{BASE}/api/hosts/facts", {"message": "ERF51-4242: import failed"})
    doc = FactDocument(name="h1", certname="h1")

    with caplog.at_level(logging.WARNING):
        result = make_client(http).upload_facts(doc)

    assert not result.ok
    assert result.outcome is CallOutcome.application_error
    assert "Could not push h1" in caplog.text
    assert "ERF51-4242" in caplog.text


def test_upload_facts_transport_failure_is_failure_not_crash(http):
    http.routes[("POST", f"{BASE}/api/hosts/facts")] = RemoteError("connection refused")

    result = make_client(http).upload_facts(FactDocument(name="h1", certname="h1"))

    assert result.outcome is CallOutcome.transport_error
    assert "connection refused" in result.message


def test_upload_facts_respects_custom_error_prefix(http):
    http.add("POST", f"{BASE}/api/hosts/facts", {"message": "ERF51-1: old code"})

    result = make_client(http, error_prefix="ERF99").upload_facts(
        FactDocument(name="h1", certname="h1")
    )

    assert result.ok


def test_delete_host_does_not_validate_answer(http):
    http.routes[("DELETE", f"{BASE}/api/hosts/d")] = HttpResponse(status=500, body=b"oops")

    status = make_client(http).delete_host("d")

    assert status == 500


def test_unmanage_host_posts_managed_false(http):
    http.add("POST", f"{BASE}/api/hosts/d", {"name": "d", "managed": False})

    result = make_client(http).unmanage_host("d")

    assert result.ok
    call = http.calls_to("POST")[0]
    assert json.loads(call["body"]) == {"host": {}, "managed": False}
    assert call["headers"]["Accept"] == "application/json,version=2"


def test_unmanage_host_embedded_error_raises_when_asked(http):
    http.add("POST", f"{BASE}/api/hosts/d", {"message": "ERF51-0001: no such host"})

    result = make_client(http).unmanage_host("d")

    assert result.outcome is CallOutcome.application_error
    with pytest.raises(ApplicationError, match="ERF51-0001"):
        result.raise_for_outcome()
