"""
Site Monitor Orchestrator

Coordinates the monitoring pass for one or many URLs:
1. Ping, GET and HEAD probes run concurrently for each URL
2. A failing probe degrades only its own sub-result
3. Batches fan out across URLs and keep input order
4. Batch statistics are logged once per pass
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple
import logging

import httpx

from .config import EngineConfig
from .errors import describe_error
from .http_probe import HttpProbe
from .ping_probe import PingProbe
from .schemas import (
    BatchStats,
    HttpCheckResult,
    PingResult,
    SiteMonitorResult,
    utc_now,
)
from .targets import is_https, validate_url

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_WARNING_DAYS = 14


class SiteMonitorOrchestrator:
    """
    Stateless, on-demand probing engine.

    Results are tagged with the configured worker id and returned to the
    caller, which owns storage, scheduling cadence and alerting.

    Usage::

        engine = SiteMonitorOrchestrator(EngineConfig(worker_id="eu-west-1"))
        result = await engine.monitor_url("https://example.com")
        results = await engine.monitor_urls(["https://a.example", "https://b.example"])
    """

    def __init__(
        self,
        config: EngineConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize orchestrator.

        Args:
            config: Engine configuration
            transport: Custom httpx transport passed to the HTTP probe
        """
        self.config = config

        # Initialize components
        self.ping_probe = PingProbe(
            timeout=config.timeout_seconds,
            privileged=config.ping_privileged
        )
        self.http_probe = HttpProbe(
            timeout=config.timeout_seconds,
            user_agent=config.user_agent,
            transport=transport
        )

    @property
    def worker_id(self) -> str:
        return self.config.worker_id

    async def monitor_url(self, url: str) -> SiteMonitorResult:
        """
        Run all probes for one URL.

        Raises:
            InvalidTargetError: If *url* is malformed; nothing is probed
        """
        url = validate_url(url)
        return await self._monitor_valid_url(url)

    async def monitor_urls(self, urls: Sequence[str]) -> List[SiteMonitorResult]:
        """
        Monitor multiple URLs concurrently.

        Output index *i* corresponds to input index *i*.

        Raises:
            InvalidTargetError: If any URL is malformed; nothing is probed
        """
        results, _ = await self.monitor_urls_with_stats(urls)
        return results

    async def monitor_urls_with_stats(
        self,
        urls: Sequence[str],
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS
    ) -> Tuple[List[SiteMonitorResult], BatchStats]:
        """Same as :meth:`monitor_urls`, also returning batch statistics."""
        targets = [validate_url(url) for url in urls]

        start_time = time.monotonic()
        logger.info(f"Starting monitoring pass for {len(targets)} targets (worker={self.worker_id})")

        if self.config.max_concurrency:
            semaphore = asyncio.Semaphore(self.config.max_concurrency)

            async def run(url: str) -> SiteMonitorResult:
                async with semaphore:
                    return await self._monitor_valid_url(url)
        else:
            run = self._monitor_valid_url

        # gather keeps input order regardless of completion order
        results = list(await asyncio.gather(*(run(url) for url in targets)))

        stats = summarize(results, time.monotonic() - start_time, expiry_warning_days)
        logger.info(
            f"Monitoring pass complete: {stats.up_count}/{stats.total_targets} up "
            f"in {stats.duration_seconds:.2f}s",
            extra={"batch_stats": stats.model_dump(by_alias=True)},
        )
        return results, stats

    async def _monitor_valid_url(self, url: str) -> SiteMonitorResult:
        checked_at = utc_now()

        ping_check, get_check, head_check = await asyncio.gather(
            self._guard(self.ping_probe.probe(url), PingResult.failure, url, "PING"),
            self._guard(self.http_probe.probe(url, "GET"), HttpCheckResult.failure, url, "GET"),
            self._guard(self.http_probe.probe(url, "HEAD"), HttpCheckResult.failure, url, "HEAD"),
        )

        return SiteMonitorResult(
            url=url,
            checked_at=checked_at,
            worker_id=self.worker_id,
            is_up=get_check.is_up,
            ping_check=ping_check,
            get_check=get_check,
            head_check=head_check,
        )

    async def _guard(
        self,
        probe: Awaitable,
        failure: Callable[[str], object],
        url: str,
        label: str
    ):
        """Await *probe*, converting any exception into a failure-shaped result."""
        try:
            return await probe
        except Exception as e:
            logger.debug(f"{label} probe failed for {url}: {describe_error(e)}")
            return failure(describe_error(e))


def summarize(
    results: Sequence[SiteMonitorResult],
    duration_seconds: float = 0.0,
    expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS
) -> BatchStats:
    """Calculate statistics from a batch of results"""
    total = len(results)
    up = sum(1 for r in results if r.is_up)

    tls_infos = [r.get_check.tls_info for r in results if r.get_check.tls_info is not None]
    expired = sum(1 for t in tls_infos if t.days_until_expiry < 0)
    expiring = sum(1 for t in tls_infos if 0 <= t.days_until_expiry <= expiry_warning_days)

    response_times = [r.get_check.response_time_ms for r in results if r.get_check.is_up]
    avg_response_time = sum(response_times) / len(response_times) if response_times else None

    return BatchStats(
        total_targets=total,
        up_count=up,
        down_count=total - up,
        ping_up_count=sum(1 for r in results if r.ping_check.is_up),
        https_count=sum(1 for r in results if is_https(r.url)),
        tls_count=len(tls_infos),
        expiring_soon_count=expiring,
        expired_count=expired,
        avg_response_time_ms=avg_response_time,
        duration_seconds=round(duration_seconds, 3),
    )
