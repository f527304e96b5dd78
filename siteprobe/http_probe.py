"""
HTTP Probe Module

HTTP GET/HEAD health checks using httpx.
Captures status code, response headers, response time and, for HTTPS, the
peer certificate of the connection.
"""

import time
from typing import Optional
import logging

import httpx

from .errors import ProbeTimeoutError, run_with_timeout
from .schemas import HttpCheckResult, TlsInfo
from .targets import validate_url
from .tls_inspector import extract_tls_info

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "HEAD")


class HttpProbe:
    """
    HTTP probing using an httpx async client.

    Each probe opens its own connection and closes it when done, so probes
    never share pooled connections. Certificate verification is disabled:
    an invalid certificate must not hide the site, it is reported through
    ``tls_info`` instead. Redirects are not followed; a 3xx response is a
    healthy answer.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize HTTP probe.

        Args:
            timeout: Budget in seconds for the whole request/response cycle
            user_agent: User-Agent header sent with each request
            transport: Custom httpx transport (mainly for testing)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def probe(self, url: str, method: str = "GET") -> HttpCheckResult:
        """
        Send a single *method* request to *url*.

        Args:
            url: Target URL
            method: "GET" or "HEAD"

        Returns:
            HttpCheckResult for any received response, including 4xx/5xx

        Raises:
            InvalidTargetError: If *url* is malformed
            ValueError: If *method* is not supported
            ProbeTimeoutError: If no response completes within the timeout
            httpx.HTTPError: On connection-level failures
        """
        url = validate_url(url)
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported method {method!r}, expected one of {SUPPORTED_METHODS}")

        # httpx timeouts are per phase; the outer deadline covers the whole cycle
        return await run_with_timeout(
            self._request(url, method),
            self.timeout,
            f"Request timed out after {int(self.timeout * 1000)} ms",
        )

    def _build_client(self) -> httpx.AsyncClient:
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            verify=False,
            follow_redirects=False,
            trust_env=False,
            headers=headers,
            transport=self.transport,
        )

    async def _request(self, url: str, method: str) -> HttpCheckResult:
        start = time.monotonic()
        try:
            async with self._build_client() as client:
                async with client.stream(method, url) as response:
                    response_time = (time.monotonic() - start) * 1000
                    tls_info = self._peer_tls_info(response)
                    # The body is never read; leaving the stream closes the connection
                    status_code = response.status_code

                    logger.debug(f"{method} {url} -> {status_code} in {response_time:.1f} ms")

                    return HttpCheckResult(
                        is_up=status_code < 400,
                        status_code=status_code,
                        response_time_ms=response_time,
                        headers=dict(response.headers),
                        tls_info=tls_info,
                    )
        except httpx.TimeoutException as e:
            raise ProbeTimeoutError(f"Request timed out: {e}") from e

    def _peer_tls_info(self, response: httpx.Response) -> Optional[TlsInfo]:
        """Certificate details of the response's connection, if it is TLS."""
        stream = response.extensions.get("network_stream")
        if stream is None:
            return None

        try:
            ssl_object = stream.get_extra_info("ssl_object")
        except Exception as e:
            logger.debug(f"Could not read TLS session from stream: {e}")
            return None

        return extract_tls_info(ssl_object)
