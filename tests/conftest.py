from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from node_reconciler.transport import HttpResponse


@dataclass
class FakeHttp:
    """
    In memory http client.

    routes maps (method, url) to a response, or to a list of responses served
    in order. Unrouted requests answer 404. Every request is recorded in calls.
    """

    routes: dict[tuple[str, str], Any] = field(default_factory=dict)
    calls: list[dict[str, Any]] = field(default_factory=list)

    @staticmethod
    def json_response(payload: Any, status: int = 200) -> HttpResponse:
        return HttpResponse(status=status, body=json.dumps(payload).encode())

    def add(self, method: str, url: str, payload: Any, status: int = 200) -> None:
        self.routes[(method, url)] = self.json_response(payload, status)

    def request(self, method, url, headers, body=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "body": body})
        resp = self.routes.get((method, url), HttpResponse(status=404))
        if isinstance(resp, list):
            resp = resp.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method]


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()
