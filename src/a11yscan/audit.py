"""
Accessibility audits through the PageSpeed Insights (Lighthouse) API.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

import requests

from a11yscan.errors import AuditError
from a11yscan.models import UNKNOWN_IMPACT, Issue, PageResult

PAGESPEED_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

# Error bodies from the API can be whole HTML pages
MAX_ERROR_BODY = 500


def _score(value: Any) -> float:
    """Lighthouse reports null for checks it could not score; treat as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class PageSpeedClient:
    """Thin client for the runPagespeed endpoint, accessibility category only."""

    def __init__(
        self,
        api_key: str,
        session: requests.Session,
        timeout_s: float = 30.0,
        endpoint: str = PAGESPEED_ENDPOINT,
    ) -> None:
        self.api_key = api_key
        self.session = session
        self.timeout_s = timeout_s
        self.endpoint = endpoint

    def run(self, page_url: str) -> Dict[str, Any]:
        """Return the decoded API response for page_url or raise AuditError."""
        params = {"url": page_url, "category": "accessibility", "key": self.api_key}
        try:
            resp = self.session.get(self.endpoint, params=params, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise AuditError(f"Failed to call Lighthouse API: {exc}") from exc

        if resp.status_code != 200:
            body = resp.text[:MAX_ERROR_BODY]
            raise AuditError(f"Lighthouse API error (status {resp.status_code}): {body}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise AuditError(f"Failed to decode Lighthouse response: {exc}") from exc
        if not isinstance(payload, dict):
            raise AuditError("Failed to decode Lighthouse response: expected a JSON object")
        return payload


def map_lighthouse_result(page_url: str, payload: Mapping[str, Any]) -> PageResult:
    """
    Translate a runPagespeed response into a PageResult.

    Only binary (pass/fail) audits that did not pass produce issues: one per
    located node, or a single rule-level issue with unknown impact when the
    audit lists no nodes. Raises AuditError when the response has the wrong
    shape. Issue order follows the response's audit mapping
    and is not meaningful.
    """
    lighthouse = _mapping(payload.get("lighthouseResult"))
    accessibility = _mapping(_mapping(lighthouse.get("categories")).get("accessibility"))
    score = _score(accessibility.get("score"))

    issues: List[Issue] = []
    for audit_id, audit in _mapping(lighthouse.get("audits")).items():
        audit = _mapping(audit)
        if audit.get("scoreDisplayMode") != "binary" or _score(audit.get("score")) >= 1.0:
            continue

        title = _text(audit.get("title"))
        description = _text(audit.get("description"))
        items = _mapping(audit.get("details")).get("items") or []
        if not isinstance(items, list):
            raise AuditError(
                f"Failed to decode Lighthouse response: details.items of {audit_id} is not a list"
            )

        for item in items:
            item = _mapping(item)
            node = _mapping(item.get("node"))
            issues.append(Issue(
                audit_id=audit_id,
                title=title,
                description=description,
                impact=_text(item.get("impact")),
                selector=_text(node.get("selector")),
                snippet=_text(node.get("snippet")),
            ))

        if not items:
            issues.append(Issue(
                audit_id=audit_id,
                title=title,
                description=description,
                impact=UNKNOWN_IMPACT,
            ))

    return PageResult(url=page_url, accessibility_score=score, issues=tuple(issues))


class AccessibilityAuditor:
    """Audits one URL; failures are reported on the result, never raised."""

    def __init__(self, client: PageSpeedClient) -> None:
        self.client = client

    def __call__(self, page_url: str) -> PageResult:
        try:
            return map_lighthouse_result(page_url, self.client.run(page_url))
        except AuditError as exc:
            return PageResult(url=page_url, error=str(exc))
