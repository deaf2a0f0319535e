"""
Command-line interface for the accessibility scanner.
"""
from __future__ import annotations

import argparse
import json
import signal
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from a11yscan.config import load_settings
from a11yscan.errors import ConfigurationError, ScanRequestError
from a11yscan.models import (
    DEFAULT_LIMIT,
    DEFAULT_MAX_PAGES,
    DEFAULT_OFFSET,
    STATUS_CANCELLED,
    STATUS_FAILED,
    ScanReport,
    ScanRequest,
    page_errors,
)
from a11yscan.scanner import CancelToken, crawl_and_scan

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_REQUEST = 2
EXIT_CONFIG = 3
EXIT_CANCELLED = 130


def print_summary(report: ScanReport) -> None:
    """Print scan summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("SCAN SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Status:                 {report.status}\n")
    sys.stderr.write(f"URLs discovered:        {len(report.urls_discovered)}\n")
    sys.stderr.write(f"Pages audited:          {report.total_pages}\n")
    issue_count = sum(len(page.issues) for page in report.page_results)
    sys.stderr.write(f"Issues found:           {issue_count}\n\n")

    errors = page_errors(report.page_results)
    if errors:
        sys.stderr.write(f"Audit errors: {len(errors)}\n")
        for error in errors:
            sys.stderr.write(f"  {error[:120]}\n")
    else:
        sys.stderr.write("No audit errors.\n")

    sys.stderr.write("\n")


def generate_output_path(base_url: str) -> Path:
    """Generate output path: scans/{hostname}_{datetime}.json"""
    parsed = urlparse(base_url)
    hostname = parsed.hostname or "unknown"
    # Sanitize hostname for filename (replace dots with underscores)
    hostname_safe = hostname.replace(".", "_")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    scans_dir = Path("scans")
    scans_dir.mkdir(exist_ok=True)

    return scans_dir / f"{hostname_safe}_{timestamp}.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Discover pages of a website and audit a window of them for accessibility issues."
    )
    parser.add_argument("url", help="Website URL to scan (e.g. https://example.com)")
    parser.add_argument(
        "--max-pages", type=int, default=DEFAULT_MAX_PAGES,
        help=f"Maximum pages to discover (default: {DEFAULT_MAX_PAGES}, max: 1000)",
    )
    parser.add_argument(
        "--offset", type=int, default=DEFAULT_OFFSET,
        help="Skip auditing the first N pages (default: 0)",
    )
    parser.add_argument(
        "--limit", type=int, default=DEFAULT_LIMIT,
        help=f"Maximum pages to audit (default: {DEFAULT_LIMIT}, max: 100)",
    )
    parser.add_argument("--env-file", default=".env", help="Optional .env file with the API key")
    parser.add_argument("--out", help="Output file path, or '-' for stdout (default: auto-generated in scans/)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scanner CLI."""
    args = build_parser().parse_args(argv)

    request = ScanRequest(
        url=args.url, max_pages=args.max_pages, offset=args.offset, limit=args.limit
    )
    try:
        request.validate()
    except ScanRequestError as e:
        sys.stderr.write(f"{e.error}: {e.message}\n")
        return EXIT_BAD_REQUEST

    try:
        settings = load_settings(args.env_file)
    except ConfigurationError as e:
        sys.stderr.write(f"Configuration error: {e}\n")
        return EXIT_CONFIG

    # Ctrl-C stops the scan after the current page instead of killing it
    token = CancelToken(deadline_s=settings.scan_timeout_s)
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        report = crawl_and_scan(request, settings, token=token, verbose=args.verbose)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if args.verbose:
        print_summary(report)

    json_text = json.dumps(report.to_dict(), ensure_ascii=False, indent=2 if args.pretty else None)

    if args.out == "-":
        print(json_text)
    else:
        # Auto-generate path if not specified
        output_path = Path(args.out) if args.out else generate_output_path(request.url)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_text, encoding="utf-8")
        if args.verbose:
            sys.stderr.write(f"Results written to: {output_path}\n")

    if report.status == STATUS_CANCELLED:
        return EXIT_CANCELLED
    if report.status == STATUS_FAILED:
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
