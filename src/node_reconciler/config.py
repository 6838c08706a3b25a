"""
Configuration.

Everything the reconciler needs arrives through environment variables and ends
up in one frozen ReconcilerConfig. Nothing reads os.environ after from_env.

Variables
RECONCILER_CONFIGDB_URL
RECONCILER_PROVISIONING_URL
RECONCILER_PROVISIONING_USER
RECONCILER_PROVISIONING_PASSWORD   required
RECONCILER_CERT_DIR
HOSTNAME                           names the client certificate files
RECONCILER_VERIFY_TLS
RECONCILER_PER_PAGE
RECONCILER_ERROR_PREFIX
RECONCILER_ABORT_ON_UNMANAGE_ERROR
RECONCILER_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from node_reconciler.clients.provisioning import DEFAULT_ERROR_PREFIX, DEFAULT_PER_PAGE
from node_reconciler.core.errors import ConfigError
from node_reconciler.reconcile.driver import ReconcileConfig
from node_reconciler.tls import DEFAULT_CERT_DIR, TlsConfig

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_log_level(raw: str, name: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{name} is not a logging level, got {raw!r}")
    return level


def _parse_positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive")
    return value


@dataclass(frozen=True)
class ReconcilerConfig:
    """
    Full runtime configuration.

    Client certificates are used when configdb_url is https.
    verify_tls defaults to False, which is insecure. See tls.py.
    """

    provisioning_password: str = field(repr=False)
    configdb_url: str = "http://puppet.example.com:8080"
    provisioning_url: str = "https://foreman.example.com"
    provisioning_user: str = "admin"
    cert_dir: Path = DEFAULT_CERT_DIR
    hostname: str = ""
    verify_tls: bool = False
    per_page: int = DEFAULT_PER_PAGE
    error_prefix: str = DEFAULT_ERROR_PREFIX
    abort_on_unmanage_error: bool = True
    log_level: str = "INFO"

    @property
    def use_client_certs(self) -> bool:
        return self.configdb_url.lower().startswith("https:")

    @property
    def uses_https(self) -> bool:
        return any(
            url.lower().startswith("https:") for url in (self.configdb_url, self.provisioning_url)
        )

    def tls(self) -> TlsConfig:
        return TlsConfig(
            cert_dir=self.cert_dir,
            hostname=self.hostname,
            use_client_certs=self.use_client_certs,
            verify=self.verify_tls,
        )

    def reconcile(self) -> ReconcileConfig:
        return ReconcileConfig(
            per_page=self.per_page,
            abort_on_unmanage_error=self.abort_on_unmanage_error,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReconcilerConfig":
        env = os.environ if environ is None else environ

        password = env.get("RECONCILER_PROVISIONING_PASSWORD", "")
        if not password:
            raise ConfigError("RECONCILER_PROVISIONING_PASSWORD is not set")

        error_prefix = env.get("RECONCILER_ERROR_PREFIX", DEFAULT_ERROR_PREFIX)
        if not error_prefix:
            raise ConfigError("RECONCILER_ERROR_PREFIX must not be empty")

        defaults = cls(provisioning_password=password)
        return cls(
            provisioning_password=password,
            configdb_url=env.get("RECONCILER_CONFIGDB_URL", defaults.configdb_url).rstrip("/"),
            provisioning_url=env.get(
                "RECONCILER_PROVISIONING_URL", defaults.provisioning_url
            ).rstrip("/"),
            provisioning_user=env.get("RECONCILER_PROVISIONING_USER", defaults.provisioning_user),
            cert_dir=Path(env.get("RECONCILER_CERT_DIR", str(defaults.cert_dir))),
            hostname=env.get("HOSTNAME") or socket.getfqdn(),
            verify_tls=_parse_bool(env.get("RECONCILER_VERIFY_TLS", "false"), "RECONCILER_VERIFY_TLS"),
            per_page=_parse_positive_int(
                env.get("RECONCILER_PER_PAGE", str(DEFAULT_PER_PAGE)), "RECONCILER_PER_PAGE"
            ),
            error_prefix=error_prefix,
            abort_on_unmanage_error=_parse_bool(
                env.get("RECONCILER_ABORT_ON_UNMANAGE_ERROR", "true"),
                "RECONCILER_ABORT_ON_UNMANAGE_ERROR",
            ),
            log_level=_parse_log_level(env.get("RECONCILER_LOG_LEVEL", "INFO"), "RECONCILER_LOG_LEVEL"),
        )
