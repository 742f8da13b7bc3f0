"""Bounded-retry navigation shared by login, listing and survey pages."""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from reportomatic.config.schema import PortalSettings
from reportomatic.utils.errors import NavigationTimeout

log = structlog.get_logger()

T = TypeVar("T")

# One retry after the first timeout, then give up on that page.
DEFAULT_RETRIES = 1


async def with_retry(
    step: Callable[[], Awaitable[T]],
    *,
    label: str,
    retries: int = DEFAULT_RETRIES,
) -> T:
    """Await ``step()``; repeat it up to *retries* times on a Playwright timeout.

    Only timeouts are retried.  Any other exception propagates unchanged on
    the first occurrence.

    Args:
        step: Zero-argument callable returning a fresh awaitable per attempt.
        label: Target shown in log events and in the raised error (a URL).
        retries: Extra attempts after the first one.

    Raises:
        NavigationTimeout: When every attempt timed out.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await step()
        except PlaywrightTimeoutError as exc:
            if attempt > retries:
                log.error("portal.timeout", target=label, attempts=attempt)
                raise NavigationTimeout(label, attempt) from exc
            log.warning("portal.retrying", target=label, attempt=attempt, error=str(exc))


async def goto_with_retry(page, url: str, portal: PortalSettings):
    """Navigate *page* to *url* with the configured wait strategy and timeout."""
    response = await with_retry(
        lambda: page.goto(url, wait_until=portal.wait_until, timeout=portal.timeout_ms),
        label=url,
    )
    log.info("portal.navigated", url=url)
    return response


__all__ = ["DEFAULT_RETRIES", "with_retry", "goto_with_retry"]
