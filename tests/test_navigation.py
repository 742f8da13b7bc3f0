import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from conftest import FakePage
from reportomatic.portal.navigation import goto_with_retry, with_retry
from reportomatic.utils.errors import NavigationTimeout


def _flaky(failures: int, exc=PlaywrightTimeoutError):
    calls = []

    async def step():
        calls.append(1)
        if len(calls) <= failures:
            raise exc("Timeout 60000ms exceeded.")
        return "ok"

    return step, calls


def test_success_without_retry():
    step, calls = _flaky(0)
    assert asyncio.run(with_retry(step, label="u")) == "ok"
    assert len(calls) == 1


def test_one_timeout_is_retried():
    step, calls = _flaky(1)
    assert asyncio.run(with_retry(step, label="u")) == "ok"
    assert len(calls) == 2


def test_second_timeout_gives_up():
    step, calls = _flaky(2)
    with pytest.raises(NavigationTimeout) as info:
        asyncio.run(with_retry(step, label="https://x/report"))
    assert len(calls) == 2
    assert info.value.attempts == 2
    assert info.value.url == "https://x/report"


def test_other_errors_are_not_retried():
    step, calls = _flaky(5, exc=RuntimeError)
    with pytest.raises(RuntimeError):
        asyncio.run(with_retry(step, label="u"))
    assert len(calls) == 1


def test_goto_uses_configured_wait_and_timeout(portal):
    page = FakePage(timeouts={"https://portal.test/a": 1})
    asyncio.run(goto_with_retry(page, "https://portal.test/a", portal))

    assert page.visits == ["https://portal.test/a"] * 2
    assert page.goto_kwargs[-1] == {"wait_until": "networkidle", "timeout": 60_000}
    assert page.url == "https://portal.test/a"
