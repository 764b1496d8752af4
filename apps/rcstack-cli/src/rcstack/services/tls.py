"""Self-signed TLS key/certificate generation for the NGINX proxy."""

from __future__ import annotations

import ipaddress
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from rcstack_common import ArtifactState, StackConfig
from rcstack_common.constants import (
    CERT_COUNTRY,
    CERT_KEY_SIZE,
    CERT_ORGANIZATION,
    CERT_VALIDITY_DAYS,
)

from rcstack.errors import CryptoError, FilesystemError

log = logging.getLogger(__name__)

# Four dot-separated numeric groups; octet ranges are not checked.
_DOTTED_QUAD = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")


@dataclass
class CertificateInfo:
    """Summary of a certificate on disk."""

    subject: str
    issuer: str
    subject_alt_names: list[str]
    not_valid_before: datetime
    not_valid_after: datetime

    @property
    def days_remaining(self) -> int:
        return (self.not_valid_after - datetime.now(timezone.utc)).days

    @property
    def self_signed(self) -> bool:
        return self.subject == self.issuer


def looks_like_ipv4(host: str) -> bool:
    return bool(_DOTTED_QUAD.match(host))


def detect_tls_state(cert_path: Path, key_path: Path) -> ArtifactState:
    """CURRENT only when both halves of the pair exist."""
    cert, key = cert_path.is_file(), key_path.is_file()
    if cert and key:
        return ArtifactState.CURRENT
    if cert or key:
        return ArtifactState.STALE
    return ArtifactState.ABSENT


def build_subject_alt_names(host: str) -> list[x509.GeneralName]:
    """DNS entry for the host, plus an IP entry when it is a dotted quad."""
    names: list[x509.GeneralName] = [x509.DNSName(host)]
    if looks_like_ipv4(host):
        try:
            names.append(x509.IPAddress(ipaddress.IPv4Address(host)))
        except ipaddress.AddressValueError:
            log.warning("%s looks like an IPv4 address but is not valid; adding DNS entry only", host)
    return names


def generate_self_signed(
    host: str,
    *,
    days: int = CERT_VALIDITY_DAYS,
    key_size: int = CERT_KEY_SIZE,
) -> tuple[bytes, bytes]:
    """Return (key_pem, cert_pem) for a new self-signed certificate bound to host."""
    try:
        key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        name = x509.Name(
            [
                x509.NameAttribute(NameOID.COMMON_NAME, host),
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, CERT_ORGANIZATION),
                x509.NameAttribute(NameOID.COUNTRY_NAME, CERT_COUNTRY),
            ]
        )
        now = datetime.now(timezone.utc)
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=days))
            .add_extension(x509.SubjectAlternativeName(build_subject_alt_names(host)), critical=False)
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
            .sign(key, hashes.SHA256())
        )
    except (UnsupportedAlgorithm, ValueError) as exc:
        raise CryptoError(f"Could not generate TLS certificate for '{host}': {exc}") from exc

    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return key_pem, cert.public_bytes(serialization.Encoding.PEM)


def ensure_tls_material(cfg: StackConfig, *, force: bool = False) -> bool:
    """Generate the key/cert pair unless both files already exist.

    An existing pair is never replaced without ``force``, so a certificate
    swapped in by the operator survives re-runs. Returns True if generated.
    """
    state = detect_tls_state(cfg.cert_path, cfg.key_path)
    if state is ArtifactState.CURRENT and not force:
        log.debug("TLS pair present at %s; skipping", cfg.certs_dir)
        return False
    if state is ArtifactState.STALE:
        log.warning("Only one half of the TLS pair exists in %s; regenerating both", cfg.certs_dir)

    key_pem, cert_pem = generate_self_signed(cfg.nginx_host)
    try:
        cfg.certs_dir.mkdir(parents=True, exist_ok=True)
        cfg.key_path.write_bytes(key_pem)
        cfg.key_path.chmod(0o600)
        cfg.cert_path.write_bytes(cert_pem)
    except OSError as exc:
        raise FilesystemError(f"Could not write TLS material to {cfg.certs_dir}: {exc}") from exc
    return True


def read_certificate_info(cert_path: Path) -> CertificateInfo:
    """Load a PEM certificate and summarise it."""
    try:
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
    except (OSError, ValueError) as exc:
        raise CryptoError(f"Could not read certificate {cert_path}: {exc}") from exc

    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
        alt_names = [f"DNS:{n}" for n in san.get_values_for_type(x509.DNSName)]
        alt_names += [f"IP:{ip}" for ip in san.get_values_for_type(x509.IPAddress)]
    except x509.ExtensionNotFound:
        alt_names = []

    return CertificateInfo(
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        subject_alt_names=alt_names,
        not_valid_before=cert.not_valid_before_utc,
        not_valid_after=cert.not_valid_after_utc,
    )
