"""HTTP transport for the pricing catalog."""

from __future__ import annotations

import http.client
import logging
import socket
import ssl
import urllib.error
import urllib.request
from typing import Protocol

import certifi

from pricewright.config import DEFAULT_TIMEOUT
from pricewright.errors import FetchFailed, FetchTimeout

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can turn a URL into the full response body."""

    def fetch(self, url: str) -> bytes: ...


def _ssl_context() -> ssl.SSLContext:
    """Create an SSL context using the certifi CA bundle (macOS workaround)."""
    return ssl.create_default_context(cafile=certifi.where())


def urlopen_safe(req: urllib.request.Request, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """urlopen with certifi SSL — use this instead of raw urllib.request.urlopen."""
    ctx = _ssl_context()
    with urllib.request.urlopen(req, timeout=timeout, context=ctx) as resp:
        return resp.read()


class HTTPTransport:
    """Blocking urllib transport with a bounded timeout.

    Every failure is mapped onto FetchFailed; timeouts get the FetchTimeout
    subclass. A truncated body (IncompleteRead) is just another FetchFailed.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self._timeout = timeout

    def fetch(self, url: str) -> bytes:
        logger.info("Fetching %s", url)
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            body = urlopen_safe(req, timeout=self._timeout)
        except (socket.timeout, TimeoutError) as exc:
            raise FetchTimeout(f"Timed out after {self._timeout:g}s fetching {url}") from exc
        except urllib.error.HTTPError as exc:
            raise FetchFailed(f"HTTP {exc.code} fetching {url}: {exc.reason}") from exc
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise FetchTimeout(f"Timed out after {self._timeout:g}s fetching {url}") from exc
            raise FetchFailed(f"Could not fetch {url}: {exc.reason}") from exc
        except (http.client.HTTPException, OSError) as exc:
            raise FetchFailed(f"Could not fetch {url}: {exc}") from exc
        logger.info("Fetched %d bytes from %s", len(body), url)
        return body
