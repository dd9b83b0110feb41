from typing import Dict, Optional, Tuple

import pytest
from starlette.requests import Request


def build_request(
    headers: Optional[Dict[str, str]] = None,
    client: Optional[Tuple[str, int]] = ("203.0.113.9", 50000),
    path: str = "/",
    method: str = "GET",
) -> Request:
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": raw_headers,
        "query_string": b"",
        "client": client,
    }
    return Request(scope)


@pytest.fixture
def make_request():
    return build_request


class VerdictRecorder:
    """Stands in for the (error, result) callback a CORS layer would pass."""

    def __init__(self):
        self.calls = []

    def __call__(self, error, result=None):
        self.calls.append((error, result))
        return "called"

    @property
    def error(self):
        return self.calls[-1][0]

    @property
    def result(self):
        return self.calls[-1][1]


@pytest.fixture
def verdict() -> VerdictRecorder:
    return VerdictRecorder()
