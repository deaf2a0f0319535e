"""
Link normalization and link extraction for same-site discovery.
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlsplit, urlunsplit

import requests
from bs4 import BeautifulSoup, SoupStrainer
from bs4.builder import ParserRejectedMarkup
from requests.utils import requote_uri

from a11yscan.errors import LinkFetchError

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)

DEFAULT_USER_AGENT = "A11yScannerBot/1.0 (Purpose: Website Accessibility Testing)"

PAGE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}


def host_of(url: str) -> str:
    """Return host[:port] of a URL, without any userinfo."""
    return urlparse(url).netloc.rpartition("@")[2]


def normalize_link(reference: str, href: str, base_host: str) -> Optional[str]:
    """
    Resolve href against the page it was found on and canonicalize it.

    - Joins relative hrefs against the reference URL
    - Rejects anything whose host differs from base_host
    - Drops query strings and fragments (scheme, host and path only)
    - Keeps ;params in the path and normalizes its percent-encoding
    - Uses "/" for an empty path

    Returns None for external or malformed links.
    """
    if href is None:
        return None

    try:
        parsed = urlsplit(urljoin(reference, href.strip()))
        host = parsed.netloc.rpartition("@")[2]
    except ValueError:
        return None

    if not host or host != base_host:
        return None

    return requote_uri(urlunsplit((parsed.scheme, host, parsed.path or "/", "", "")))


def extract_hrefs(html: str | bytes) -> List[str]:
    """Extract href values from <a> tags in document order."""
    soup = BeautifulSoup(html, "lxml", parse_only=LINK_STRAINER)
    # find_all traverses the tree iteratively
    return [a["href"] for a in soup.find_all("a", href=True)]


class LinkFetcher:
    """Fetches a page over HTTP and returns the raw hrefs it contains."""

    def __init__(
        self,
        session: requests.Session,
        timeout_s: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.session = session
        self.timeout_s = timeout_s
        self.headers = dict(PAGE_HEADERS, **{"User-Agent": user_agent})

    def __call__(self, page_url: str) -> List[str]:
        """
        Return all hrefs on page_url.

        Raises LinkFetchError for HTTP error statuses and
        requests.RequestException for transport failures.
        """
        resp = self.session.get(
            page_url, headers=self.headers, timeout=self.timeout_s, allow_redirects=True
        )
        if resp.status_code >= 400:
            raise LinkFetchError(f"HTTP error {resp.status_code}")

        # Only parse HTML content (a missing header is treated as HTML)
        content_type = (resp.headers.get("content-type") or "").lower()
        if content_type and "html" not in content_type:
            return []

        try:
            return extract_hrefs(resp.content)
        except ParserRejectedMarkup as exc:
            raise LinkFetchError(f"Unparseable HTML: {exc}") from exc
