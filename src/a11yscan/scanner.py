"""
Crawl-and-scan orchestration: breadth-first discovery plus windowed audits.
"""
from __future__ import annotations

import sys
import threading
import time
from typing import Callable, List, Optional, Sequence

import requests

from a11yscan.audit import AccessibilityAuditor, PageSpeedClient
from a11yscan.config import Settings
from a11yscan.errors import LinkFetchError
from a11yscan.frontier import Frontier
from a11yscan.links import LinkFetcher, host_of, normalize_link
from a11yscan.models import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PARTIAL,
    PageResult,
    ScanConfig,
    ScanReport,
    ScanRequest,
    page_errors,
    utc_now,
)

AuditFn = Callable[[str], PageResult]
HrefSource = Callable[[str], Sequence[str]]


class CancelToken:
    """Cooperative cancellation flag with an optional deadline."""

    def __init__(self, deadline_s: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + deadline_s if deadline_s is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline


def classify_status(cancelled: bool, page_results: Sequence[PageResult]) -> str:
    """Cancellation beats emptiness, emptiness beats partial success."""
    if cancelled:
        return STATUS_CANCELLED
    if not page_results:
        return STATUS_FAILED
    if page_errors(page_results):
        return STATUS_PARTIAL
    return STATUS_COMPLETED


def print_scan_line(tag: str, url: str, new_links: int) -> None:
    """Print single page line."""
    sys.stderr.write(f"\n  → {tag} {url} (+{new_links} links)")
    sys.stderr.flush()


class AccessibilityScanner:
    """
    Runs one crawl-and-scan over a single host.

    URLs are processed strictly in discovery (FIFO) order. The first
    `offset` processed URLs are only mined for links; the next `limit`
    are audited. Each call to run() owns a fresh Frontier.
    """

    def __init__(
        self,
        base_url: str,
        max_pages: int,
        offset: int,
        limit: int,
        audit: AuditFn,
        fetch_hrefs: HrefSource,
        delay_s: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        verbose: bool = False,
    ) -> None:
        self.base_url = base_url
        self.base_host = host_of(base_url)
        self.max_pages = max_pages
        self.offset = offset
        self.limit = limit
        self.audit = audit
        self.fetch_hrefs = fetch_hrefs
        self.delay_s = delay_s
        self.sleep = sleep
        self.verbose = verbose

    def run(self, token: Optional[CancelToken] = None) -> ScanReport:
        token = token or CancelToken()
        scan_time = utc_now()
        frontier = Frontier(self.max_pages)
        # Seed with the canonical form so links back to the start page match it
        frontier.seed(normalize_link(self.base_url, self.base_url, self.base_host) or self.base_url)

        results: List[PageResult] = []
        cancelled = False
        rank = 0

        if self.verbose:
            sys.stderr.write(f"Starting scan of: {self.base_url}\n")
            sys.stderr.write(
                f"Max pages: {self.max_pages} | Offset: {self.offset} | Limit: {self.limit}\n"
            )

        while True:
            if token.cancelled:
                cancelled = True
                break
            if not frontier or len(results) >= self.limit:
                break

            url = frontier.dequeue_next()
            current_rank = rank
            rank += 1

            if current_rank < self.offset:
                # Discovery-only page: no audit, no delay
                new_links = 0 if frontier.is_full else self._discover(frontier, url)
                if self.verbose:
                    print_scan_line("SKIP", url, new_links)
                continue

            result = self.audit(url)
            results.append(result)
            self.sleep(self.delay_s)

            # A page that failed to audit is not used as a link source
            new_links = 0
            if result.ok and not frontier.is_full:
                new_links = self._discover(frontier, url)
            if self.verbose:
                print_scan_line("AUDIT" if result.ok else "ERR", url, new_links)

        if self.verbose:
            sys.stderr.write("\n\n")

        return ScanReport(
            base_url=self.base_url,
            scan_time=scan_time,
            status=classify_status(cancelled, results),
            scan_config=ScanConfig(max_pages=self.max_pages, offset=self.offset, limit=self.limit),
            page_results=tuple(results),
            urls_discovered=frontier.discovered,
        )

    def _discover(self, frontier: Frontier, page_url: str) -> int:
        """Offer every in-scope link on page_url; return how many were accepted."""
        try:
            hrefs = self.fetch_hrefs(page_url)
        except (LinkFetchError, requests.RequestException) as e:
            if self.verbose:
                sys.stderr.write(f"\n  ✗ LINKS {page_url}: {e}")
            return 0

        accepted = 0
        for href in hrefs:
            target = normalize_link(page_url, href, self.base_host)
            if target and frontier.offer(target):
                accepted += 1
        return accepted


def crawl_and_scan(
    request: ScanRequest,
    settings: Settings,
    token: Optional[CancelToken] = None,
    session: Optional[requests.Session] = None,
    verbose: bool = False,
) -> ScanReport:
    """
    Validate request and run a full scan against the live site and API.

    Args:
        request: Scan parameters; rejected with ScanRequestError before any work.
        settings: API key, timeouts and pacing.
        token: Cancellation token; defaults to one expiring after
               settings.scan_timeout_s.
        session: HTTP session shared by link fetching and audits.
        verbose: Whether to print progress information.
    """
    request.validate()
    if token is None:
        token = CancelToken(deadline_s=settings.scan_timeout_s)

    owns_session = session is None
    session = session or requests.Session()
    try:
        client = PageSpeedClient(settings.api_key, session, timeout_s=settings.request_timeout_s)
        scanner = AccessibilityScanner(
            base_url=request.url,
            max_pages=request.max_pages,
            offset=request.offset,
            limit=request.limit,
            audit=AccessibilityAuditor(client),
            fetch_hrefs=LinkFetcher(
                session, timeout_s=settings.request_timeout_s, user_agent=settings.user_agent
            ),
            delay_s=settings.scan_delay_s,
            verbose=verbose,
        )
        return scanner.run(token)
    finally:
        if owns_session:
            session.close()
