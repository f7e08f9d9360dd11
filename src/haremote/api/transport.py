"""HTTP transport used to talk to the hub.

The command layer only depends on Transport.send(): hand over a request,
get back a status and body, or an exception when no response arrived.
"""

from __future__ import annotations

import asyncio
import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Request timeout in seconds when none is configured
DEFAULT_TIMEOUT = 10.0

USER_AGENT = "haremote/1.0"


@dataclass(frozen=True)
class HttpRequest:
    """An outgoing hub request.

    Attributes:
        method: HTTP method ("GET" or "POST").
        url: Fully composed request URL.
        headers: Request headers, including authorization.
        body: Encoded JSON body for POST requests.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class HttpResponse:
    """A hub response, successful or not.

    Attributes:
        status: HTTP status code.
        body: Raw response body.
    """

    status: int
    body: bytes = b""

    def text(self) -> str:
        """Return the body decoded as UTF-8.

        Raises:
            UnicodeDecodeError: If the body is not valid UTF-8.
        """
        return self.body.decode("utf-8")


class Transport(ABC):
    """Abstract request sender.

    Implementations return an HttpResponse for any status code the server
    answered with, and raise when the request could not complete.
    """

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request and wait for the response.

        Args:
            request: The request to send.

        Returns:
            Status code and body.

        Raises:
            OSError: On network failures (urllib.error.URLError, TimeoutError, ...).
            http.client.HTTPException: On malformed server responses.
        """


class UrllibTransport(Transport):
    """Transport backed by urllib.request, run in the loop's executor.

    Example:
        transport = UrllibTransport(timeout=5.0)
        response = await transport.send(HttpRequest("GET", "http://hub:8123/api/states"))
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the transport.

        Args:
            timeout: Socket timeout in seconds for each request.
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Return the request timeout in seconds."""
        return self._timeout

    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send the request without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._send_blocking, request)

    def _send_blocking(self, request: HttpRequest) -> HttpResponse:
        """Perform the request (blocking).

        Args:
            request: The request to send.

        Returns:
            Status code and body. HTTP error statuses are returned, not raised.
        """
        headers = {"User-Agent": USER_AGENT, **request.headers}
        req = urllib.request.Request(
            request.url,
            data=request.body,
            headers=headers,
            method=request.method,
        )
        logger.debug("%s %s", request.method, request.url)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                return HttpResponse(status=response.status, body=response.read())
        except urllib.error.HTTPError as e:
            # Server answered with an error status; the caller decides what it means
            body = e.read() if e.fp is not None else b""
            return HttpResponse(status=e.code, body=body)
