"""
Reconcile driver.

Purpose
Either:
- Push the facts of one named host
- Or run a full sync pass:
  list both inventories, push facts for every database host, then delete and
  unmanage every provisioning host the database no longer knows.

This is the composition layer of the system.
Clients stay dumb; every policy decision about failures lives here.

Failure policy
A failed fact fetch or upload is recorded and the loop moves on to the next host.
An unmanage answered with an embedded error code aborts the remaining cleanup
unless abort_on_unmanage_error is turned off. Any other unmanage failure, such
as the 404 for a host the delete already removed, is recorded and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from node_reconciler.clients.configdb import ConfigDbClient
from node_reconciler.clients.provisioning import DEFAULT_PER_PAGE, ProvisioningClient
from node_reconciler.core.errors import RemoteError
from node_reconciler.core.types import CallOutcome, CallResult, SyncReport
from node_reconciler.transform import squash_facts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileConfig:
    """
    Driver configuration.

    per_page
    Page size for the provisioning host listing. Large enough to be one page.

    abort_on_unmanage_error
    Raise on the first unmanage answered with an embedded error code.
    """

    per_page: int = DEFAULT_PER_PAGE
    abort_on_unmanage_error: bool = True


def hosts_delta(configdb_hosts: Iterable[str], provisioning_hosts: Iterable[str]) -> set[str]:
    """Hosts known to the provisioning service but not the configuration database."""
    return set(provisioning_hosts) - set(configdb_hosts)


class ReconcileDriver:
    """Runs single host pushes and full sync passes against two clients."""

    def __init__(
        self,
        configdb: ConfigDbClient,
        provisioning: ProvisioningClient,
        config: ReconcileConfig | None = None,
    ) -> None:
        self._config = config or ReconcileConfig()
        self._configdb = configdb
        self._provisioning = provisioning

    def push_host(self, host: str) -> CallResult:
        """Fetch, reshape and upload the facts of one host."""
        facts = self._configdb.get_facts(host)
        document = squash_facts(host, facts)
        return self._provisioning.upload_facts(document)

    def upload_all_facts(self, hosts: Iterable[str], report: SyncReport) -> None:
        for host in sorted(hosts):
            try:
                result = self.push_host(host)
            except RemoteError as exc:
                logger.warning("Could not fetch facts for %s: %s", host, exc)
                result = CallResult(
                    host=host,
                    outcome=CallOutcome.transport_error,
                    message=str(exc),
                )
            if result.ok:
                report.uploaded.append(host)
            else:
                report.failed_uploads.append(result)

    def delete_all(self, hosts: Iterable[str], report: SyncReport) -> None:
        """
        Delete each host, then mark it unmanaged.

        The unmanage call is issued even after a delete, for the same host.
        """
        for host in sorted(hosts):
            self._provisioning.delete_host(host)
            report.deleted.append(host)

            result = self._provisioning.unmanage_host(host)
            if result.ok:
                report.unmanaged.append(host)
                continue

            logger.error("Could not unmanage %s: %s", host, result.message)
            if (
                self._config.abort_on_unmanage_error
                and result.outcome is CallOutcome.application_error
            ):
                result.raise_for_outcome()
            report.unmanage_failures.append(result)

    def full_sync(self) -> SyncReport:
        report = SyncReport()
        report.configdb_hosts = self._configdb.list_hosts()
        report.provisioning_hosts = self._provisioning.list_hosts(self._config.per_page)

        self.upload_all_facts(report.configdb_hosts, report)

        report.delta = hosts_delta(report.configdb_hosts, report.provisioning_hosts)
        self.delete_all(report.delta, report)

        logger.info("full sync finished: %s", report.summary())
        return report
