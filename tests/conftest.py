from __future__ import annotations

import json as jsonlib
from typing import Any, Dict, List, Optional

import pytest

from ledger.api_client import ApiClient


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, content: Optional[bytes] = None,
                 headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        if content is None:
            content = b"" if body is None else jsonlib.dumps(body).encode("utf-8")
        self.content = content
        self.text = content.decode("utf-8", errors="replace")
        self.headers = headers or {"Content-Type": "application/json"}

    def json(self):
        return jsonlib.loads(self.content)


class FakeSession:
    """Stands in for requests.Session; replies are queued per (method, path)."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.routes: Dict[tuple, Any] = {}

    def add(self, method: str, path: str, reply: Any) -> None:
        self.routes[(method, path)] = reply

    def request(self, method, url, **kwargs):
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):] if "/" in path else "/"
        self.calls.append({"method": method, "path": path, **kwargs})
        reply = self.routes.get((method, path))
        if reply is None:
            return FakeResponse(404, content=b"Not Found")
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(fake_session: FakeSession) -> ApiClient:
    return ApiClient("http://api.test/", token_provider=lambda: "token-123", session=fake_session)


