"""
TLS Inspector Module

Derives certificate details from an established TLS session. No I/O of its
own: the HTTP probe hands over the SSL object of its connection.

Trust validation is deliberately not performed. A broken or expired
certificate is reported, never used to refuse the probe.
"""

from typing import Any, Optional
from datetime import datetime, timezone
import logging

from cryptography import x509
from cryptography.x509.oid import NameOID

from .schemas import TlsInfo

logger = logging.getLogger(__name__)

UNKNOWN_ISSUER = "Unknown"


def _first_attribute(name: x509.Name, oid: x509.ObjectIdentifier) -> Optional[str]:
    attributes = name.get_attributes_for_oid(oid)
    if not attributes:
        return None
    value = attributes[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value or None


def resolve_issuer(cert: x509.Certificate) -> str:
    """Issuer CN, else issuer O, else ``"Unknown"``."""
    return (
        _first_attribute(cert.issuer, NameOID.COMMON_NAME)
        or _first_attribute(cert.issuer, NameOID.ORGANIZATION_NAME)
        or UNKNOWN_ISSUER
    )


def _validity(cert: x509.Certificate):
    return cert.not_valid_before_utc, cert.not_valid_after_utc


def tls_info_from_certificate(cert: x509.Certificate, now: Optional[datetime] = None) -> TlsInfo:
    """
    Build ``TlsInfo`` from a parsed certificate.

    Args:
        cert: Peer certificate
        now: Reference time (defaults to the current UTC time)
    """
    now = now or datetime.now(timezone.utc)
    not_before, not_after = _validity(cert)

    # timedelta.days floors, so an expired cert yields a negative count
    days_until_expiry = (not_after - now).days

    return TlsInfo(
        valid_from=not_before,
        valid_to=not_after,
        issuer=resolve_issuer(cert),
        subject=_first_attribute(cert.subject, NameOID.COMMON_NAME),
        days_until_expiry=days_until_expiry,
    )


def extract_tls_info(ssl_object: Any, now: Optional[datetime] = None) -> Optional[TlsInfo]:
    """
    Extract certificate details from a TLS connection.

    Args:
        ssl_object: ``ssl.SSLObject``/``ssl.SSLSocket`` of the connection, or None
        now: Reference time (defaults to the current UTC time)

    Returns:
        TlsInfo, or None when the connection is not TLS or has no peer certificate
    """
    if ssl_object is None:
        return None

    # binary_form works without chain validation, unlike getpeercert()
    cert_der = ssl_object.getpeercert(binary_form=True)
    if not cert_der:
        return None

    try:
        cert = x509.load_der_x509_certificate(cert_der)
    except ValueError as e:
        logger.warning(f"Certificate parsing error: {e}")
        return None

    return tls_info_from_certificate(cert, now)
