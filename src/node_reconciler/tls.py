"""
TLS material.

The configuration database wants client certificates when it is served over
https. We reuse the puppet agent certificates of the machine running the sync:

{cert_dir}/ssl/certs/ca.pem
{cert_dir}/ssl/certs/{hostname}.pem
{cert_dir}/ssl/private_keys/{hostname}.pem

Peer verification
Verification is OFF unless verify is set. This matches how the sync has always
been deployed against self signed services, and it is insecure: anyone on the
path can impersonate either service. build_ssl_context logs a warning every
time it hands out an unverified context.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from pathlib import Path

from node_reconciler.core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CERT_DIR = Path("/var/lib/puppet")


@dataclass(frozen=True)
class TlsConfig:
    """
    TLS settings shared by both services.

    use_client_certs
    Attach the certificate files above to every request.

    verify
    Verify peer certificate and host name. Default False, see module docstring.
    """

    cert_dir: Path = DEFAULT_CERT_DIR
    hostname: str = ""
    use_client_certs: bool = False
    verify: bool = False

    @property
    def ca_path(self) -> Path:
        return self.cert_dir / "ssl" / "certs" / "ca.pem"

    @property
    def cert_path(self) -> Path:
        return self.cert_dir / "ssl" / "certs" / f"{self.hostname}.pem"

    @property
    def key_path(self) -> Path:
        return self.cert_dir / "ssl" / "private_keys" / f"{self.hostname}.pem"


def build_ssl_context(tls: TlsConfig) -> ssl.SSLContext:
    """
    Build the context used for every https request.

    The CA bundle is loaded only when verify and use_client_certs are both set,
    otherwise verification uses the system store or is off.
    Client certificate files are loaded only when use_client_certs is set.
    Unreadable certificate files raise ConfigError.
    """
    cafile = str(tls.ca_path) if tls.verify and tls.use_client_certs else None
    try:
        ctx = ssl.create_default_context(cafile=cafile)
    except OSError as exc:
        raise ConfigError(f"cannot load CA bundle {cafile}: {exc}") from exc

    if not tls.verify:
        logger.warning("TLS peer and host verification is disabled")
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE

    if tls.use_client_certs:
        try:
            ctx.load_cert_chain(certfile=str(tls.cert_path), keyfile=str(tls.key_path))
        except OSError as exc:
            raise ConfigError(f"cannot load client certificate {tls.cert_path}: {exc}") from exc

    return ctx
