"""
Scan request, page result and report data structures.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from a11yscan.errors import ScanRequestError

STATUS_COMPLETED = "completed"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"
STATUS_CANCELLED = "cancelled"

DEFAULT_MAX_PAGES = 50
DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 5
MAX_PAGES_RANGE = (1, 1000)
LIMIT_RANGE = (1, 100)

# Impact recorded for rule-level findings that point at no element
UNKNOWN_IMPACT = "unknown"


def utc_now() -> datetime:
    """Return current UTC time without microseconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True, slots=True)
class Issue:
    """One failing accessibility check, usually tied to one DOM node."""
    audit_id: str
    title: str
    description: str
    impact: str
    selector: str = ""
    snippet: str = ""


@dataclass(frozen=True, slots=True)
class PageResult:
    """Audit outcome for a single page: a score and issues, or an error."""
    url: str
    accessibility_score: float = 0.0
    issues: Tuple[Issue, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.error

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "url": self.url,
            "accessibility_score": self.accessibility_score,
            "issues": [asdict(issue) for issue in self.issues],
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Discovery cap and audit window used for a run."""
    max_pages: int
    offset: int
    limit: int


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Final, immutable result of one crawl-and-scan run."""
    base_url: str
    scan_time: datetime
    status: str
    scan_config: ScanConfig
    page_results: Tuple[PageResult, ...] = ()
    urls_discovered: Tuple[str, ...] = ()

    @property
    def total_pages(self) -> int:
        return len(self.page_results)

    @property
    def urls_visited(self) -> Tuple[str, ...]:
        return tuple(page.url for page in self.page_results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "scan_time": self.scan_time.isoformat(),
            "status": self.status,
            "total_pages": self.total_pages,
            "scan_config": asdict(self.scan_config),
            "urls_discovered": list(self.urls_discovered),
            "urls_visited": list(self.urls_visited),
            "page_results": [page.to_dict() for page in self.page_results],
        }


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """Parameters submitted to start a scan."""
    url: str
    max_pages: int = DEFAULT_MAX_PAGES
    offset: int = DEFAULT_OFFSET
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScanRequest":
        """Build a request from a decoded JSON body, applying defaults for absent fields."""
        url = data.get("url")
        if url is None or url == "":
            raise ScanRequestError("Missing URL", "URL is required")
        if not isinstance(url, str):
            raise ScanRequestError("Invalid URL", "URL must be valid")

        values: Dict[str, int] = {}
        for name, default in (
            ("max_pages", DEFAULT_MAX_PAGES),
            ("offset", DEFAULT_OFFSET),
            ("limit", DEFAULT_LIMIT),
        ):
            raw = data.get(name)
            if raw is None:
                values[name] = default
            elif isinstance(raw, bool) or not isinstance(raw, int):
                raise ScanRequestError(f"Invalid {name}", f"{name} must be an integer")
            else:
                values[name] = raw

        return cls(url=url, **values)

    def validate(self) -> "ScanRequest":
        """Raise ScanRequestError unless every field is acceptable; return self."""
        if not self.url:
            raise ScanRequestError("Missing URL", "URL is required")

        try:
            parsed = urlparse(self.url)
        except ValueError:
            raise ScanRequestError("Invalid URL", "URL must be valid") from None
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ScanRequestError("Invalid URL", "URL must be valid")

        low, high = MAX_PAGES_RANGE
        if not low <= self.max_pages <= high:
            raise ScanRequestError(
                "Invalid max_pages", f"max_pages must be between {low} and {high}"
            )
        low, high = LIMIT_RANGE
        if not low <= self.limit <= high:
            raise ScanRequestError("Invalid limit", f"limit must be between {low} and {high}")
        if self.offset < 0:
            raise ScanRequestError("Invalid offset", "offset cannot be negative")
        return self


def page_errors(page_results: Iterable[PageResult]) -> List[str]:
    """Return the error strings of failed pages, in order."""
    return [page.error for page in page_results if page.error]
