# src/http/remote_client.py — v1
"""GET-only HTTP client with manual, bounded redirect handling.

Transport-level redirect following is disabled: 301/302 responses are
inspected here and followed hop by hop until ``max_redirects`` is
exceeded. Every failure (transport error, timeout, unexpected status,
missing Location, exhausted redirect budget) yields None.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urljoin

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 5
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "Mozilla/5.0"

_REDIRECT_STATUSES = frozenset({301, 302})


class RemoteClient:
    """Async GET client returning bodies or None, never raising.

    Args:
        max_redirects: Redirect hops allowed before giving up.
        connect_timeout_s: Connection timeout in seconds.
        read_timeout_s: Read timeout in seconds.
        user_agent: Value of the User-Agent header.
        client: Pre-built httpx client (tests inject a MockTransport).
    """

    def __init__(
        self,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        connect_timeout_s: float = DEFAULT_TIMEOUT_S,
        read_timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._max_redirects = max_redirects
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(read_timeout_s, connect=connect_timeout_s),
            follow_redirects=False,
        )
        self._headers = {"User-Agent": user_agent}

    @property
    def max_redirects(self) -> int:
        return self._max_redirects

    async def fetch(self, url: str, redirect_count: int = 0) -> bytes | None:
        """GET ``url`` and return the body of the final 200 response.

        Args:
            url: Absolute URL to request.
            redirect_count: Hops already taken before this call.

        Returns:
            Response body, or None on any failure.
        """
        current = url
        hops = redirect_count
        while True:
            if hops > self._max_redirects:
                logger.error("Too many redirects for %s", url)
                return None

            try:
                logger.debug("GET %s (hop %d)", current, hops)
                response = await self._client.get(
                    current, headers=self._headers, follow_redirects=False
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning("HTTP request failed for %s: %s", current, e)
                return None

            if response.status_code == 200:
                return response.content

            if response.status_code in _REDIRECT_STATUSES:
                location = response.headers.get("Location")
                if not location:
                    logger.warning(
                        "Redirect without Location header from %s", current
                    )
                    return None
                current = urljoin(current, location)
                hops += 1
                continue

            logger.info("HTTP %d for %s", response.status_code, current)
            return None

    async def fetch_text(self, url: str) -> str | None:
        """GET ``url`` and decode the body as UTF-8."""
        body = await self.fetch(url)
        if body is None:
            return None
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Undecodable response from %s: %s", url, e)
            return None

    async def fetch_json(self, url: str) -> Any | None:
        """GET ``url`` and parse the body as JSON."""
        text = await self.fetch_text(url)
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Malformed JSON from %s: %s", url, e)
            return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RemoteClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
