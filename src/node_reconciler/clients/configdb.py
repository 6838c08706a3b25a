"""
Configuration database client.

Read only access to a PuppetDB style v3 api:
GET {base}/v3/nodes
GET {base}/v3/nodes/{host}/facts
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from node_reconciler.codec import decode_configdb_facts, decode_configdb_nodes, parse_json
from node_reconciler.core.errors import NotFoundWarning, RemoteError
from node_reconciler.core.types import Fact
from node_reconciler.transport import HttpClient, UrllibHttpClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigDbClient:
    """
    Client for the configuration database.

    base_url has no trailing slash, for example http://puppet.example.com:8080.
    """

    base_url: str
    http: HttpClient = field(default_factory=UrllibHttpClient)

    def list_hosts(self) -> set[str]:
        """Return the names of every node the database knows."""
        payload = self._get_json(f"{self.base_url}/v3/nodes")
        hosts = decode_configdb_nodes(payload)
        logger.debug("configuration database lists %d hosts", len(hosts))
        return hosts

    def get_facts(self, host: str) -> list[Fact]:
        """
        Return the facts for one host.

        An empty answer means the host is unknown. That is not fatal: we warn
        and hand back an empty list so the caller can still push a document.
        """
        payload = self._get_json(f"{self.base_url}/v3/nodes/{quote(host, safe='')}/facts")
        facts = decode_configdb_facts(payload)
        if not facts:
            warnings.warn(
                f"{host} not found in configuration database",
                NotFoundWarning,
                stacklevel=2,
            )
        return facts

    def _get_json(self, url: str) -> Any:
        resp = self.http.request("GET", url, headers={"Accept": "application/json"})
        if not resp.ok:
            raise RemoteError(f"GET {url} returned http {resp.status}")
        return parse_json(resp.body, url)
