from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        body: Any = "",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers or {}
        if isinstance(body, (dict, list)):
            self.text = json.dumps(body)
        else:
            self.text = body
        self.content = self.text.encode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Records GET calls and answers them from a handler."""

    def __init__(self, handler: Callable[..., FakeResponse]) -> None:
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        return self.handler(url, **kwargs)

    def close(self) -> None:
        self.closed = True


def failing_handler(exc: Exception) -> Callable[..., FakeResponse]:
    def handler(url: str, **kwargs: Any) -> FakeResponse:
        raise exc
    return handler

