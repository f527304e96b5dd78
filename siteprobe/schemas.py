"""
Site Probing Schemas

Pydantic models for probe results. Models serialise with camelCase aliases
(``model_dump(by_alias=True)``) so stored payloads use ``isUp``,
``responseTimeMs`` and so on.
"""

from typing import Dict, Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProbeModel(BaseModel):
    """Base model: snake_case attributes, camelCase wire names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PingResult(ProbeModel):
    """ICMP reachability result. ``status`` is synthetic: 200 if alive else 0."""
    is_up: bool
    status: int = 0
    response_time_ms: float = Field(default=0.0, ge=0)
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "PingResult":
        return cls(is_up=False, status=0, response_time_ms=0.0, error=error)


class TlsInfo(ProbeModel):
    """Peer certificate details captured during an HTTPS check"""
    valid_from: datetime
    valid_to: datetime
    issuer: str = "Unknown"
    subject: Optional[str] = None
    # Negative once the certificate has expired; never clamped
    days_until_expiry: int

    @property
    def is_expired(self) -> bool:
        return self.days_until_expiry < 0


class HttpCheckResult(ProbeModel):
    """HTTP GET/HEAD result. ``is_up`` iff a response arrived with status < 400."""
    is_up: bool
    status_code: int = 0
    response_time_ms: float = Field(default=0.0, ge=0)
    headers: Optional[Dict[str, str]] = None
    tls_info: Optional[TlsInfo] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "HttpCheckResult":
        return cls(is_up=False, status_code=0, response_time_ms=0.0, error=error)


class SiteMonitorResult(ProbeModel):
    """Composite result of one monitoring pass over a single URL"""
    url: str
    checked_at: datetime
    worker_id: str
    # Mirrors get_check.is_up
    is_up: bool
    ping_check: PingResult
    get_check: HttpCheckResult
    head_check: HttpCheckResult


class BatchStats(ProbeModel):
    """Statistics from a batch monitoring pass"""
    total_targets: int
    up_count: int
    down_count: int
    ping_up_count: int
    https_count: int
    tls_count: int
    expiring_soon_count: int
    expired_count: int
    avg_response_time_ms: Optional[float] = None
    duration_seconds: float
