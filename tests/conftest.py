import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from yarl import URL

from expense_client.api.auth import AuthAPI
from expense_client.api.expenses import ExpenseAPI
from expense_client.logging_config import error_aggregator
from expense_client.session.guard import SessionGuard
from expense_client.session.navigation import HistoryNavigator
from expense_client.session.notifier import LogNotifier
from expense_client.session.validator import TokenValidator
from expense_client.storage.cookies import CookieStore
from expense_client.storage.local_store import LocalStore
from expense_client.storage.preferences import Preferences
from expense_client.storage.token_store import TokenStore

BASE_URL = "http://backend.test"


class FakeResp:
    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        *,
        content_type: str = "application/json",
        text: str | None = None,
        delay: float | None = None,
        exception: BaseException | None = None,
    ):
        self.status = status
        self._payload = payload
        self.content_type = content_type
        self._text = text
        self.delay = delay
        self.exception = exception

    async def __aenter__(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exception:
            raise self.exception
        return self

    async def __aexit__(self, _exc_type, _exc, _tb):
        return False

    async def json(self):
        await asyncio.sleep(0)
        return self._payload

    async def text(self):
        await asyncio.sleep(0)
        if self._text is not None:
            return self._text
        return json.dumps(self._payload)


@dataclass
class RecordedCall:
    method: str
    path: str
    headers: dict[str, str]
    params: dict[str, str] | None
    json: Any


class FakeSession:
    """Stands in for aiohttp.ClientSession.request with scripted routes.

    Each route holds a queue of responses; the last one repeats.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[FakeResp]] = {}
        self.calls: list[RecordedCall] = []
        self.closed = False

    def route(self, method: str, path: str, *responses: FakeResp) -> None:
        self.routes[(method, path)] = list(responses)

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        path = URL(url).path
        self.calls.append(RecordedCall(method, path, dict(headers or {}), params, json))
        queue = self.routes.get((method, path))
        if not queue:
            return FakeResp(404, {"message": f"no route for {method} {path}"})
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method and c.path == path]

    @property
    def paths(self) -> list[str]:
        return [c.path for c in self.calls]

    async def close(self):
        self.closed = True


@dataclass
class Harness:
    """Stores and APIs wired the way ExpenseClient wires them."""

    session: FakeSession
    local_store: LocalStore
    cookies: CookieStore
    token_store: TokenStore
    preferences: Preferences
    auth_api: AuthAPI
    notifier: LogNotifier = field(default_factory=LogNotifier)

    def guard(self, current_path: str, *, timeout: float = 0.5) -> SessionGuard:
        validator = TokenValidator(self.auth_api, self.token_store, timeout=timeout)
        return SessionGuard(self.token_store, validator, HistoryNavigator(current_path))

    def expense_api(self, guard: SessionGuard, *, max_attempts: int = 1) -> ExpenseAPI:
        return ExpenseAPI(
            self.session, BASE_URL, guard.auth_headers, max_attempts=max_attempts
        )


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest_asyncio.fixture
async def harness(tmp_path, fake_session):
    # CookieStore builds an aiohttp.CookieJar, which needs the running loop.
    local_store = LocalStore(tmp_path / "local_storage.json")
    cookies = CookieStore(BASE_URL, tmp_path / "cookies.json")
    return Harness(
        session=fake_session,
        local_store=local_store,
        cookies=cookies,
        token_store=TokenStore(local_store, cookies),
        preferences=Preferences(local_store),
        auth_api=AuthAPI(fake_session, BASE_URL),
    )


@pytest.fixture(autouse=True)
def reset_error_aggregator():
    error_aggregator.reset()
    yield
    error_aggregator.reset()


@pytest.fixture
def resp():
    """Factory for scripted responses: ``resp(status=200, payload={...})``."""
    return FakeResp
