"""
Provisioning service client.

Authenticated access to a Foreman style api:
GET    {base}/api/hosts?per_page=N
POST   {base}/api/hosts/facts
DELETE {base}/api/hosts/{host}
POST   {base}/api/hosts/{host}

Embedded errors
The service sometimes answers 200 with {"message": "ERF51-..."}.
Writes check for that prefix and report it as an application error even though
the transport call succeeded.

Both writes return CallResult rather than raising, so the driver owns the
decision of whether a failed host stops the run.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from node_reconciler.codec import decode_provisioning_hosts, embedded_error, parse_json
from node_reconciler.core.errors import RemoteError
from node_reconciler.core.types import CallOutcome, CallResult, FactDocument
from node_reconciler.transport import HttpClient, UrllibHttpClient, basic_auth_header

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 10000
DEFAULT_ERROR_PREFIX = "ERF51"

JSON_HEADERS = {
    "Accept": "application/json,version=2",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class ProvisioningClient:
    """
    Client for the provisioning service.

    username and password are sent as Basic auth on every call.
    error_prefix is the server error code prefix treated as failure on 2xx.
    """

    base_url: str
    username: str
    password: str = field(repr=False)
    error_prefix: str = DEFAULT_ERROR_PREFIX
    http: HttpClient = field(default_factory=UrllibHttpClient)

    def list_hosts(self, per_page: int = DEFAULT_PER_PAGE) -> set[str]:
        """Return the names of every host, fetched as a single page."""
        url = f"{self.base_url}/api/hosts?per_page={per_page}"
        resp = self.http.request("GET", url, headers=self._headers())
        if not resp.ok:
            raise RemoteError(f"GET {url} returned http {resp.status}")
        hosts = decode_provisioning_hosts(parse_json(resp.body, url))
        logger.debug("provisioning service lists %d hosts", len(hosts))
        return hosts

    def upload_facts(self, document: FactDocument) -> CallResult:
        """
        Push one fact document.

        Never raises for remote failures. A failed push is logged with the
        host name and returned as a CallResult whose ok is False.
        """
        result = self._post_json(
            document.name,
            f"{self.base_url}/api/hosts/facts",
            document.to_payload(),
        )
        if not result.ok:
            logger.warning("Could not push %s: %s", document.name, result.message)
        return result

    def delete_host(self, host: str) -> int:
        """
        Delete a host.

        The answer is not validated. The status is returned for logging only.
        """
        url = self._host_url(host)
        resp = self.http.request("DELETE", url, headers=self._headers())
        logger.info("deleted %s (http %d)", host, resp.status)
        return resp.status

    def unmanage_host(self, host: str) -> CallResult:
        """
        Mark a host unmanaged so the service stops lifecycle actions on it.

        This keeps the provisioning service from destroying the backing VM.
        """
        result = self._post_json(host, self._host_url(host), {"host": {}, "managed": False})
        if result.ok:
            logger.info("marked %s unmanaged", host)
        return result

    def _post_json(self, host: str, url: str, payload: dict[str, Any]) -> CallResult:
        body = json.dumps(payload).encode("utf-8")
        try:
            resp = self.http.request("POST", url, headers=self._headers(JSON_HEADERS), body=body)
            if not resp.ok:
                raise RemoteError(f"POST {url} returned http {resp.status}")
            decoded = parse_json(resp.body, url)
        except RemoteError as exc:
            return CallResult(host=host, outcome=CallOutcome.transport_error, message=str(exc))

        message = embedded_error(decoded, self.error_prefix)
        if message is not None:
            return CallResult(
                host=host,
                outcome=CallOutcome.application_error,
                body=decoded,
                message=message,
            )
        return CallResult(host=host, outcome=CallOutcome.ok, body=decoded)

    def _host_url(self, host: str) -> str:
        return f"{self.base_url}/api/hosts/{quote(host, safe='')}"

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Authorization": basic_auth_header(self.username, self.password)}
        if extra:
            headers.update(extra)
        return headers
