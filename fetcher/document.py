"""
fetcher/document.py
HTTP fetch + HTML parse boundary. Every network failure leaves this module
as one of the classified errors in ``scrapers.errors``.
"""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from constants import DEFAULT_REQUEST_TIMEOUT, HEADERS
from scrapers.errors import FetchTimeout, NetworkUnreachable, ParseFailure, http_status_error

console = Console()


class Document:
    """Parsed HTML page remembering the URL it was served from."""

    def __init__(self, soup: BeautifulSoup, url: str):
        self.soup = soup
        self.url = url

    @classmethod
    def parse(cls, html: str, url: str) -> "Document":
        try:
            soup = BeautifulSoup(html, "html.parser")
        except Exception as exc:
            raise ParseFailure(f"Could not parse document: {exc}", url) from exc
        return cls(soup, url)

    def select(self, selector: str) -> list:
        return self.soup.select(selector)

    def select_one(self, selector: str):
        return self.soup.select_one(selector)

    def text(self) -> str:
        return self.soup.get_text(" ", strip=True)


class DocumentFetcher:
    def __init__(
        self,
        *,
        rate_limiter=None,
        limited_host: Optional[str] = None,
        user_agents=None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        headers: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.rate_limiter = rate_limiter
        self.limited_host = limited_host.lower() if limited_host else None
        self.user_agents = user_agents
        self.headers = dict(headers or {})
        self.client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
        )

    def _is_limited(self, url: str) -> bool:
        if self.rate_limiter is None:
            return False
        if self.limited_host is None:
            return True
        return (urlsplit(url).hostname or "").lower() == self.limited_host

    def _build_headers(self, headers: Optional[Mapping[str, str]]) -> dict:
        merged = dict(HEADERS)
        if self.user_agents is not None:
            merged["User-Agent"] = self.user_agents.next()
        merged.update(self.headers)
        merged.update(headers or {})
        return merged

    def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Document:
        request_headers = self._build_headers(headers)
        limited = self._is_limited(url)
        if limited:
            waited = self.rate_limiter.acquire()
            if waited:
                console.log(f"🚦 Waited {waited:.2f}s for a slot on {self.limited_host or 'source'}")
        try:
            resp = self.client.get(url, headers=request_headers)
        except httpx.TimeoutException as exc:
            raise FetchTimeout(f"Timed out: {exc}", url) from exc
        except httpx.TransportError as exc:
            raise NetworkUnreachable(f"Network error: {exc}", url) from exc
        finally:
            if limited:
                self.rate_limiter.release()

        if resp.is_error:
            raise http_status_error(resp.status_code, url)
        try:
            html = resp.text
        except (UnicodeDecodeError, LookupError) as exc:
            raise ParseFailure(f"Undecodable body: {exc}", url) from exc
        return Document.parse(html, str(resp.url))

    def close(self) -> None:
        self.client.close()
