"""
Core types.

This file defines the shared data structures used by clients and the driver.

Important design choice
Raw json never leaves the codec and client modules.
Everything past that seam works with these records, so a missing field fails
once, at decode time, with a clear message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from node_reconciler.core.errors import ApplicationError, RemoteError


@dataclass(frozen=True)
class Fact:
    """
    One fact as reported by the configuration database.

    value is whatever json value the database stored, usually a string.
    """

    name: str
    value: Any


@dataclass
class FactDocument:
    """
    Fact upload body in the shape the provisioning service expects.

    name and certname are both the host name.
    facts maps fact name to value.
    """

    name: str
    certname: str
    facts: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "certname": self.certname,
            "facts": dict(self.facts),
        }


class CallOutcome(str, Enum):
    """
    Outcome of one provisioning write.

    ok
      Transport succeeded and no embedded error was found.

    application_error
      Service answered but the body carried a known error code.

    transport_error
      Service could not be reached, answered non 2xx, or answered garbage.
    """

    ok = "ok"
    application_error = "application_error"
    transport_error = "transport_error"


@dataclass(frozen=True)
class CallResult:
    """
    Result of upload_facts or unmanage_host.

    body is the decoded response when one was available.
    message explains a failure for logs and reports.
    """

    host: str
    outcome: CallOutcome
    body: Any = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is CallOutcome.ok

    def raise_for_outcome(self) -> None:
        """Convert a failed result into the matching exception."""
        if self.outcome is CallOutcome.application_error:
            raise ApplicationError(f"{self.host}: {self.message}")
        if self.outcome is CallOutcome.transport_error:
            raise RemoteError(f"{self.host}: {self.message}")


@dataclass
class SyncReport:
    """
    What one full sync pass did.

    failed_uploads and unmanage_failures keep the CallResult so operators
    can see the server message.
    """

    configdb_hosts: set[str] = field(default_factory=set)
    provisioning_hosts: set[str] = field(default_factory=set)
    uploaded: List[str] = field(default_factory=list)
    failed_uploads: List[CallResult] = field(default_factory=list)
    delta: set[str] = field(default_factory=set)
    deleted: List[str] = field(default_factory=list)
    unmanaged: List[str] = field(default_factory=list)
    unmanage_failures: List[CallResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_uploads and not self.unmanage_failures

    def summary(self) -> str:
        return (
            f"uploaded {len(self.uploaded)}/{len(self.configdb_hosts)} hosts, "
            f"{len(self.failed_uploads)} upload failures, "
            f"removed {len(self.deleted)} stale hosts, "
            f"{len(self.unmanage_failures)} unmanage failures"
        )
