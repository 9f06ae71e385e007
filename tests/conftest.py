"""Shared fixtures: a fake aiohttp session routed by method and URL."""

import json

import pytest
from multidict import CIMultiDict

from bd_courier_stats.const import ENV_MAPPING

CREDENTIALS = {
    "pathao_user": "merchant@example.com",
    "pathao_password": "pathao-secret",
    "steadfast_user": "shop@example.com",
    "steadfast_password": "steadfast-secret",
    "redx_user": "01711111111",
    "redx_password": "redx-secret",
}


class FakeResponse:
    def __init__(self, status=200, body="", cookies=None, headers=None):
        self.status = status
        self._body = body if isinstance(body, str) else json.dumps(body)
        self.headers = CIMultiDict(headers or {})
        for name, value in (cookies or {}).items():
            self.headers.add("Set-Cookie", f"{name}={value}; path=/; httponly")

    async def text(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.request.

    Each (method, url) route holds a list of responses served in order;
    an exception instance in the list is raised instead.
    """

    def __init__(self, default=None):
        self.routes = {}
        self.calls = []
        self.default = default
        self.closed = False

    def add(self, method, url, response):
        self.routes.setdefault((method, url), []).append(response)
        return self

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        queue = self.routes.get((method, url))
        item = queue.pop(0) if queue else self.default
        if item is None:
            raise AssertionError(f"Unexpected request: {method} {url}")
        if isinstance(item, BaseException):
            raise item
        return item

    def calls_to(self, url):
        return [call for call in self.calls if call["url"] == url]

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def _clear_credential_env(monkeypatch):
    for env_key in ENV_MAPPING.values():
        monkeypatch.delenv(env_key, raising=False)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def credentials():
    return dict(CREDENTIALS)
