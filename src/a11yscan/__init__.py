"""
Accessibility scanner that discovers same-site pages by BFS link following
and audits a window of them with the PageSpeed Insights Lighthouse API.
"""
from a11yscan.models import Issue, PageResult, ScanReport, ScanRequest
from a11yscan.scanner import AccessibilityScanner, CancelToken, classify_status, crawl_and_scan

__version__ = "1.0.0"
__all__ = [
    "AccessibilityScanner",
    "CancelToken",
    "Issue",
    "PageResult",
    "ScanReport",
    "ScanRequest",
    "classify_status",
    "crawl_and_scan",
]
