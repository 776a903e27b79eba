import pytest
import ssl

from figo.client.tls import (
    CertificateFingerprintError,
    PinnedSSLObject,
    certificate_fingerprint,
    create_pinned_ssl_context,
    normalize_fingerprint,
    verify_fingerprint,
)


def _handshake(client_context, certificates):
    """Run a TLS handshake between the client context and a local server over memory BIOs."""
    server_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    server_context.load_cert_chain(certificates["cert_file"], certificates["key_file"])

    client_in, client_out = ssl.MemoryBIO(), ssl.MemoryBIO()
    server_in, server_out = ssl.MemoryBIO(), ssl.MemoryBIO()
    client = client_context.wrap_bio(client_in, client_out, server_hostname="localhost")
    server = server_context.wrap_bio(server_in, server_out, server_side=True)

    client_done = server_done = False
    for _ in range(10):
        if not client_done:
            try:
                client.do_handshake()
                client_done = True
            except ssl.SSLWantReadError:
                pass
        server_in.write(client_out.read())

        if not server_done:
            try:
                server.do_handshake()
                server_done = True
            except ssl.SSLWantReadError:
                pass
        client_in.write(server_out.read())

        if client_done:
            return client

    raise AssertionError("Handshake did not complete")


class TestFingerprints:

    def test_certificate_fingerprint(self, certificates):
        """Test SHA-1 fingerprints are upper-case hex pairs joined by colons."""
        fingerprint = certificate_fingerprint(certificates["server_der"])

        assert fingerprint == certificates["server_fingerprint"]
        assert len(fingerprint.split(":")) == 20

    def test_normalize_fingerprint(self):
        """Test fingerprints are compared independent of case and separators."""
        assert normalize_fingerprint("a6fe08f4") == "A6:FE:08:F4"
        assert normalize_fingerprint("a6:fe:08:f4") == "A6:FE:08:F4"

    def test_verify_fingerprint_accepts_pinned_certificate(self, certificates):
        """Test a pinned certificate passes verification."""
        allowed = [certificates["server_fingerprint"].lower()]

        assert verify_fingerprint(certificates["server_der"], allowed) == certificates["server_fingerprint"]

    def test_verify_fingerprint_rejects_unknown_certificate(self, certificates):
        """Test any other certificate is rejected."""
        with pytest.raises(CertificateFingerprintError) as exc_info:
            verify_fingerprint(certificates["server_der"], ["00" * 20])

        assert exc_info.value.fingerprint == certificates["server_fingerprint"]
        assert isinstance(exc_info.value, ssl.SSLError)

    def test_verify_fingerprint_requires_certificate(self):
        """Test a missing peer certificate is rejected."""
        with pytest.raises(CertificateFingerprintError):
            verify_fingerprint(None, ["00" * 20])


class TestPinnedSSLContext:

    def test_context_validates_chain(self):
        """Test pinning comes on top of normal chain validation."""
        context = create_pinned_ssl_context(["00" * 20])

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True
        assert issubclass(context.sslobject_class, PinnedSSLObject)

    def test_handshake_with_pinned_certificate(self, certificates):
        """Test the handshake succeeds when the leaf certificate is pinned."""
        context = create_pinned_ssl_context(
            [certificates["server_fingerprint"]],
            ca_file=certificates["ca_file"],
        )

        client = _handshake(context, certificates)

        assert certificate_fingerprint(client.getpeercert(binary_form=True)) == certificates["server_fingerprint"]

    def test_handshake_with_unpinned_certificate_fails(self, certificates):
        """Test a valid chain with an unknown fingerprint aborts the handshake."""
        context = create_pinned_ssl_context(
            ["00" * 20],
            ca_file=certificates["ca_file"],
        )

        with pytest.raises(CertificateFingerprintError) as exc_info:
            _handshake(context, certificates)

        assert exc_info.value.fingerprint == certificates["server_fingerprint"]

    def test_contexts_keep_separate_allow_lists(self):
        """Test each context carries its own allow-list."""
        first = create_pinned_ssl_context(["11" * 20])
        second = create_pinned_ssl_context(["22" * 20])

        assert first.sslobject_class.allowed_fingerprints != second.sslobject_class.allowed_fingerprints
