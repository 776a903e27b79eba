"""TLS certificate fingerprint pinning for the figo Connect API."""

import ssl
from typing import FrozenSet, Iterable, Optional

import certifi
from cryptography import x509
from cryptography.hazmat.primitives import hashes

from figo.config.logging import get_logger

logger = get_logger(__name__)


class CertificateFingerprintError(ssl.SSLCertVerificationError):
    """Raised during the handshake when the leaf certificate is not pinned."""

    def __init__(self, fingerprint: Optional[str]):
        self.fingerprint = fingerprint
        super().__init__(1, f"Certificate fingerprint not trusted: {fingerprint}")


def normalize_fingerprint(fingerprint: str) -> str:
    """Return ``fingerprint`` as upper-case hex pairs joined by colons."""
    digits = fingerprint.replace(":", "").strip().upper()
    return ":".join(digits[i:i + 2] for i in range(0, len(digits), 2))


def certificate_fingerprint(der_certificate: bytes) -> str:
    """Compute the SHA-1 fingerprint of a DER encoded certificate."""
    certificate = x509.load_der_x509_certificate(der_certificate)
    digest = certificate.fingerprint(hashes.SHA1())
    return ":".join(f"{byte:02X}" for byte in digest)


def verify_fingerprint(
    der_certificate: Optional[bytes],
    allowed_fingerprints: Iterable[str],
) -> str:
    """Check a peer certificate against the allow-list.

    Returns:
        The matching fingerprint

    Raises:
        CertificateFingerprintError: If no certificate was presented or its
            fingerprint is not in the allow-list
    """
    if not der_certificate:
        raise CertificateFingerprintError(None)

    fingerprint = certificate_fingerprint(der_certificate)
    if fingerprint not in {normalize_fingerprint(f) for f in allowed_fingerprints}:
        logger.error(f"Rejected server certificate with fingerprint {fingerprint}")
        raise CertificateFingerprintError(fingerprint)

    logger.debug(f"Server certificate fingerprint verified: {fingerprint}")
    return fingerprint


class PinnedSSLObject(ssl.SSLObject):
    """SSL object that verifies the peer fingerprint once the handshake completes."""

    allowed_fingerprints: FrozenSet[str] = frozenset()

    def do_handshake(self) -> None:
        # Raises SSLWantReadError until the handshake has finished
        super().do_handshake()
        verify_fingerprint(self.getpeercert(binary_form=True), self.allowed_fingerprints)


def create_pinned_ssl_context(
    fingerprints: Iterable[str],
    ca_file: Optional[str] = None,
) -> ssl.SSLContext:
    """Create an SSL context with chain validation and fingerprint pinning.

    Args:
        fingerprints: Allowed SHA-1 fingerprints of the server leaf certificate
        ca_file: Optional CA bundle (defaults to the certifi bundle)

    Returns:
        SSL context usable as ``verify`` argument of an httpx client
    """
    context = ssl.create_default_context(cafile=ca_file or certifi.where())

    allowed = frozenset(normalize_fingerprint(f) for f in fingerprints)
    context.sslobject_class = type(
        "PinnedSSLObject",
        (PinnedSSLObject,),
        {"allowed_fingerprints": allowed},
    )

    logger.debug(f"Pinned SSL context created with {len(allowed)} fingerprints")
    return context
