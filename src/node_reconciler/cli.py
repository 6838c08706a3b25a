"""
Command line entry point.

node-reconciler HOST   push the facts of one host and print the service answer
node-reconciler        full sync: push every host, remove stale ones

Settings come from the environment, see config.py.
Logs and warnings go to stderr. Only the single host result goes to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from node_reconciler.clients.configdb import ConfigDbClient
from node_reconciler.clients.provisioning import ProvisioningClient
from node_reconciler.config import ReconcilerConfig
from node_reconciler.core.errors import ConfigError, ReconcilerError
from node_reconciler.reconcile.driver import ReconcileDriver
from node_reconciler.tls import build_ssl_context
from node_reconciler.transport import HttpClient, UrllibHttpClient

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Send log records and python warnings to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    for name in ("node_reconciler", "py.warnings"):
        log = logging.getLogger(name)
        log.handlers[:] = [handler]
        log.setLevel(level)
    logging.captureWarnings(True)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="node-reconciler",
        description="Push configuration database facts to the provisioning service.",
    )
    parser.add_argument(
        "host",
        nargs="?",
        default=None,
        help="Push facts for this host only. Without it, run a full sync.",
    )
    return parser.parse_args(argv)


def build_driver(cfg: ReconcilerConfig, http: HttpClient | None = None) -> ReconcileDriver:
    """Wire both clients around one shared transport."""
    if http is None:
        ssl_context = build_ssl_context(cfg.tls()) if cfg.uses_https else None
        http = UrllibHttpClient(ssl_context=ssl_context)

    configdb = ConfigDbClient(base_url=cfg.configdb_url, http=http)
    provisioning = ProvisioningClient(
        base_url=cfg.provisioning_url,
        username=cfg.provisioning_user,
        password=cfg.provisioning_password,
        error_prefix=cfg.error_prefix,
        http=http,
    )
    return ReconcileDriver(configdb, provisioning, cfg.reconcile())


def run(driver: ReconcileDriver, host: str | None) -> int:
    if host is not None:
        result = driver.push_host(host)
        if result.ok:
            print(json.dumps(result.body, indent=2))
        return 0

    driver.full_sync()
    return 0


def main(argv: Optional[List[str]] = None, http: HttpClient | None = None) -> int:
    args = parse_args(argv)

    try:
        cfg = ReconcilerConfig.from_env()
    except ConfigError as exc:
        setup_logging()
        logger.error("configuration error: %s", exc)
        return 2

    setup_logging(cfg.log_level)

    try:
        return run(build_driver(cfg, http), args.host)
    except ReconcilerError as exc:
        logger.error("%s", exc)
        return 1
