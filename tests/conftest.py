"""
Test configuration and fixtures for the probing engine tests.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from siteprobe.config import EngineConfig


def make_certificate(
    not_before: datetime,
    not_after: datetime,
    issuer_cn: Optional[str] = "Test CA",
    issuer_o: Optional[str] = None,
    subject_cn: str = "localhost",
):
    """Build a self-signed EC certificate, returning (certificate, private_key)."""
    key = ec.generate_private_key(ec.SECP256R1())

    issuer_attrs: List[x509.NameAttribute] = [x509.NameAttribute(NameOID.COUNTRY_NAME, "US")]
    if issuer_o:
        issuer_attrs.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, issuer_o))
    if issuer_cn:
        issuer_attrs.append(x509.NameAttribute(NameOID.COMMON_NAME, issuer_cn))

    cert = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, subject_cn)]))
        .issuer_name(x509.Name(issuer_attrs))
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    return cert, key


@pytest.fixture
def certificate_factory():
    return make_certificate


@pytest.fixture
def now():
    """Fixed reference time for certificate arithmetic."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def engine_config():
    """Engine configuration with a short timeout."""
    return EngineConfig(worker_id="test-worker", timeout_ms=500)


@pytest.fixture
def https_server(tmp_path):
    """
    Factory for a local HTTPS server presenting the given certificate.

    Usage::

        async with https_server(cert, key, status=200) as url:
            ...
    """

    @asynccontextmanager
    async def _serve(cert, key, status: int = 200):
        cert_file = tmp_path / "cert.pem"
        key_file = tmp_path / "key.pem"
        cert_file.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
        key_file.write_bytes(
            key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(str(cert_file), str(key_file))

        async def handle(reader, writer):
            try:
                await reader.readuntil(b"\r\n\r\n")
                writer.write(
                    f"HTTP/1.1 {status} Status\r\n"
                    "Content-Type: text/plain\r\n"
                    "X-Probe-Test: yes\r\n"
                    "Content-Length: 2\r\n"
                    "Connection: close\r\n"
                    "\r\n"
                    "ok".encode()
                )
                await writer.drain()
            except (asyncio.IncompleteReadError, ConnectionError, ssl.SSLError):
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0, ssl=context)
        port = server.sockets[0].getsockname()[1]
        async with server:
            yield f"https://127.0.0.1:{port}/"

    return _serve


@pytest.fixture
def silent_server():
    """
    Factory for a local HTTP server that accepts connections and never answers.

    Usage::

        async with silent_server() as url:
            ...
    """

    @asynccontextmanager
    async def _serve():
        async def handle(reader, writer):
            try:
                # Returns once the client gives up and closes the connection
                await reader.read()
            except ConnectionError:
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        async with server:
            yield f"http://127.0.0.1:{port}/slow"

    return _serve
