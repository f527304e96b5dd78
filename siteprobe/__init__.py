"""
Site Probing Engine

Stateless, on-demand site health probing:
- ICMP reachability (ping)
- HTTP GET and HEAD checks
- TLS certificate inspection (validity window, issuer, days until expiry)
- Concurrent single-target and batch orchestration
"""

__version__ = "1.0.0"

from .config import EngineConfig, EngineSettings
from .errors import InvalidTargetError, ProbeError, ProbeTimeoutError
from .http_probe import HttpProbe
from .orchestrator import SiteMonitorOrchestrator, summarize
from .ping_probe import PingProbe
from .schemas import (
    BatchStats,
    HttpCheckResult,
    PingResult,
    SiteMonitorResult,
    TlsInfo,
)
from .tls_inspector import extract_tls_info, tls_info_from_certificate

__all__ = [
    'EngineConfig',
    'EngineSettings',
    'InvalidTargetError',
    'ProbeError',
    'ProbeTimeoutError',
    'HttpProbe',
    'PingProbe',
    'SiteMonitorOrchestrator',
    'summarize',
    'extract_tls_info',
    'tls_info_from_certificate',
    'BatchStats',
    'HttpCheckResult',
    'PingResult',
    'SiteMonitorResult',
    'TlsInfo',
]
