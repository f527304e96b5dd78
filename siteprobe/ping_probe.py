"""
Ping Probe Module

ICMP echo reachability check. An unanswered ping is an expected, common
signal, so every failure is returned as a failure-shaped ``PingResult``.
"""

import logging

from icmplib import async_ping

from .errors import describe_error, run_with_timeout
from .schemas import PingResult
from .targets import extract_hostname

logger = logging.getLogger(__name__)

NO_REPLY_ERROR = "Host not responding to ping"


class PingProbe:
    """
    ICMP reachability probe using icmplib.

    A single echo request is sent to the URL's host; scheme, port and path
    are irrelevant to ICMP.
    """

    def __init__(self, timeout: float = 30.0, privileged: bool = False):
        """
        Initialize ping probe.

        Args:
            timeout: Echo reply timeout in seconds
            privileged: Use raw sockets (root) instead of unprivileged datagram sockets
        """
        self.timeout = timeout
        self.privileged = privileged

    async def probe(self, url: str) -> PingResult:
        """
        Ping the host of *url*.

        Raises:
            InvalidTargetError: If *url* is malformed
        """
        hostname = extract_hostname(url)

        try:
            # Name resolution is bounded by the same budget as the echo wait
            host = await run_with_timeout(
                async_ping(
                    hostname,
                    count=1,
                    timeout=self.timeout,
                    privileged=self.privileged,
                ),
                self.timeout,
                "Ping timed out",
            )
        except Exception as e:
            logger.debug(f"Ping error for {hostname}: {e}")
            return PingResult.failure(f"Ping failed: {describe_error(e)}")

        if not host.is_alive:
            logger.debug(f"No ping reply from {hostname}")
            return PingResult.failure(NO_REPLY_ERROR)

        rtt = host.avg_rtt
        response_time = float(rtt) if isinstance(rtt, (int, float)) and rtt >= 0 else 0.0
        return PingResult(is_up=True, status=200, response_time_ms=response_time)
