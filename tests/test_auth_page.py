"""Tests for the login/register page flow."""

import asyncio
import json
import time

import aiohttp
import pytest

from expense_client.constants import AUTH_COOKIE_MAX_AGE_SECONDS, LOGIN_REDIRECT_DELAY_SECONDS
from expense_client.pages.auth_page import AuthPage
from expense_client.session.guard import GuardState
from expense_client.session.notifier import NotificationLevel

LOGIN = ("POST", "/api/auth/login")
REGISTER = ("POST", "/api/auth/register")
VALIDATE = ("POST", "/api/auth/validate")


def make_page(harness, current_path="/login.html", *, timeout=0.5, redirect_delay=0.05):
    guard = harness.guard(current_path, timeout=timeout)
    return AuthPage(guard, harness.auth_api, harness.notifier, redirect_delay=redirect_delay)


def test_default_redirect_delay_is_one_second():
    assert LOGIN_REDIRECT_DELAY_SECONDS == 1.0


class TestOnLoad:
    @pytest.mark.asyncio
    async def test_no_token_stays_uninitialized(self, harness):
        page = make_page(harness)
        assert await page.on_load() is GuardState.UNINITIALIZED
        assert harness.session.calls == []
        assert page.guard.navigator.navigations == []

    @pytest.mark.asyncio
    async def test_valid_token_redirects_to_dashboard(self, harness, resp):
        harness.session.route(*VALIDATE, resp(status=200))
        harness.token_store.write("tok-1", "alice")
        page = make_page(harness)

        assert await page.on_load() is GuardState.REDIRECTING
        assert page.guard.navigator.navigations == ["/dashboard"]

    @pytest.mark.asyncio
    async def test_valid_token_already_on_dashboard_does_not_navigate(self, harness, resp):
        harness.session.route(*VALIDATE, resp(status=200))
        harness.token_store.write("tok-1", "alice")
        page = make_page(harness, current_path="/dashboard")

        assert await page.on_load() is GuardState.AUTHENTICATED
        assert page.guard.navigator.navigations == []

    @pytest.mark.asyncio
    async def test_invalid_token_cleared(self, harness, resp):
        harness.session.route(*VALIDATE, resp(status=400))
        harness.token_store.write("tok-1", "alice")
        page = make_page(harness)

        assert await page.on_load() is GuardState.UNINITIALIZED
        assert harness.token_store.read() is None
        assert page.guard.navigator.navigations == []

    @pytest.mark.asyncio
    async def test_hanging_validation_times_out(self, harness, resp):
        harness.session.route(*VALIDATE, resp(status=200, delay=30))
        harness.token_store.write("tok-1", "alice")
        page = make_page(harness, timeout=0.05)

        assert await page.on_load() is GuardState.UNINITIALIZED
        assert harness.token_store.read() is None

    @pytest.mark.asyncio
    async def test_second_load_skipped_while_validating(self, harness, resp):
        harness.session.route(*VALIDATE, resp(status=200, delay=0.05))
        harness.token_store.write("tok-1", "alice")
        page = make_page(harness)

        first = asyncio.create_task(page.on_load())
        await asyncio.sleep(0.01)
        assert await page.on_load() is GuardState.VALIDATING
        assert await first is GuardState.REDIRECTING
        assert len(harness.session.calls_to(*VALIDATE)) == 1
        assert page.guard.navigator.navigations == ["/dashboard"]


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_persists_and_redirects_after_delay(self, harness, resp):
        harness.session.route(*LOGIN, resp(status=200, payload={"token": "tok-1", "username": "alice"}))
        page = make_page(harness, redirect_delay=0.1)

        response = await page.login("alice", "pw")

        assert response.token == "tok-1"
        assert harness.local_store.get("authToken") == "tok-1"
        assert harness.local_store.get("username") == "alice"
        assert harness.cookies.get("authToken") == "tok-1"
        assert harness.notifier.messages(NotificationLevel.SUCCESS) == [
            "Login successful! Redirecting..."
        ]
        await asyncio.sleep(0.02)
        assert page.guard.navigator.navigations == []
        await page.wait_for_redirect()
        assert page.guard.navigator.navigations == ["/dashboard"]

    @pytest.mark.asyncio
    async def test_success_sets_week_long_cookie(self, harness, resp, tmp_path):
        harness.session.route(*LOGIN, resp(status=200, payload={"token": "tok-1", "username": "alice"}))
        page = make_page(harness)
        await page.login("alice", "pw")
        await page.wait_for_redirect()

        record = json.loads((tmp_path / "cookies.json").read_text())["authToken"]
        assert record["value"] == "tok-1"
        assert record["expires_at"] - time.time() == pytest.approx(AUTH_COOKIE_MAX_AGE_SECONDS, abs=5)

    @pytest.mark.asyncio
    async def test_sends_credentials(self, harness, resp):
        harness.session.route(*LOGIN, resp(status=200, payload={"token": "t", "username": "alice"}))
        page = make_page(harness)
        await page.login("alice", "pw")
        await page.wait_for_redirect()
        assert harness.session.calls_to(*LOGIN)[0].json == {"username": "alice", "password": "pw"}

    @pytest.mark.asyncio
    async def test_rejected_shows_backend_message(self, harness, resp):
        harness.session.route(*LOGIN, resp(status=401, payload={"message": "Invalid username or password"}))
        page = make_page(harness)

        assert await page.login("alice", "bad") is None
        assert harness.notifier.messages(NotificationLevel.ERROR) == ["Invalid username or password"]
        assert harness.token_store.read() is None
        assert page.pending_redirect is None

    @pytest.mark.asyncio
    async def test_rejected_without_message_uses_fallback(self, harness, resp):
        harness.session.route(*LOGIN, resp(status=500, payload={}))
        page = make_page(harness)
        assert await page.login("alice", "bad") is None
        assert harness.notifier.messages(NotificationLevel.ERROR) == ["Login failed"]

    @pytest.mark.asyncio
    async def test_network_error_message(self, harness, resp):
        harness.session.route(*LOGIN, resp(exception=aiohttp.ClientConnectionError("refused")))
        page = make_page(harness)
        assert await page.login("alice", "pw") is None
        assert harness.notifier.messages(NotificationLevel.ERROR) == ["Network error. Please try again."]


class TestRegister:
    @pytest.mark.asyncio
    async def test_password_mismatch_makes_no_request(self, harness):
        page = make_page(harness)
        assert await page.register("bob", "bob@example.com", "a", "b") is None
        assert harness.session.calls == []
        assert harness.notifier.messages(NotificationLevel.ERROR) == ["Passwords do not match"]

    @pytest.mark.asyncio
    async def test_success_signs_in(self, harness, resp):
        harness.session.route(*REGISTER, resp(status=200, payload={"token": "tok-9", "username": "bob"}))
        page = make_page(harness)

        response = await page.register("bob", "bob@example.com", "pw", "pw")
        await page.wait_for_redirect()

        assert response.username == "bob"
        assert harness.token_store.read() == "tok-9"
        assert harness.notifier.messages(NotificationLevel.SUCCESS) == [
            "Account created successfully! Redirecting..."
        ]
        assert page.guard.navigator.navigations == ["/dashboard"]
        assert harness.session.calls_to(*REGISTER)[0].json == {
            "username": "bob",
            "email": "bob@example.com",
            "password": "pw",
        }

    @pytest.mark.asyncio
    async def test_refused_shows_backend_message(self, harness, resp):
        harness.session.route(*REGISTER, resp(status=400, payload={"message": "Username already exists"}))
        page = make_page(harness)
        assert await page.register("bob", "bob@example.com", "pw", "pw") is None
        assert harness.notifier.messages(NotificationLevel.ERROR) == ["Username already exists"]
