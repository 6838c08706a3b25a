"""
Http transport.

This is a minimal http client with no third party deps, shared by both service
clients.

Design
Clients depend on the HttpClient protocol, not on urllib. Tests pass an in
memory fake and never open a socket.

Status handling
UrllibHttpClient returns non 2xx answers as HttpResponse instead of raising,
because some calls deliberately ignore the status. Only failures to get any
answer at all become RemoteError.
"""

from __future__ import annotations

import base64
import logging
import ssl
from dataclasses import dataclass
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from node_reconciler.core.errors import RemoteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpClient(Protocol):
    """Simple http client interface for testability."""

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send one request and return the status and raw body."""


@dataclass
class UrllibHttpClient(HttpClient):
    """
    Default http client using urllib.

    ssl_context applies to https urls only. Build it with tls.build_ssl_context.
    """

    timeout_seconds: int = 30
    ssl_context: ssl.SSLContext | None = None

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        req = Request(url, data=body, headers=headers, method=method)
        logger.debug("%s %s", method, url)
        try:
            with urlopen(req, timeout=self.timeout_seconds, context=self.ssl_context) as resp:
                return HttpResponse(status=resp.status, body=resp.read())
        except HTTPError as exc:
            body_bytes = exc.read() if exc.fp is not None else b""
            exc.close()
            return HttpResponse(status=exc.code, body=body_bytes)
        except (URLError, OSError) as exc:
            raise RemoteError(f"{method} {url} failed: {exc}") from exc


def basic_auth_header(user: str, password: str) -> str:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"
