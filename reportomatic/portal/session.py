"""Browser lifetime and portal sign-in."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import Page, async_playwright

from reportomatic.config.schema import PortalSettings
from reportomatic.utils.errors import AuthenticationError, NavigationTimeout
from .navigation import goto_with_retry

log = structlog.get_logger()


@asynccontextmanager
async def open_page(portal: PortalSettings, *, headless: bool = True) -> AsyncIterator[Page]:
    """Yield one Chromium page; the browser is closed on exit."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            page.set_default_navigation_timeout(portal.timeout_ms)
            log.info("portal.browser_ready", headless=headless)
            yield page
        finally:
            await browser.close()
            log.debug("portal.browser_closed")


def _on_login_route(url: str, portal: PortalSettings) -> bool:
    path = url.split("?", 1)[0].split("#", 1)[0].rstrip("/")
    return path.endswith(portal.login_route.rstrip("/"))


async def login(page, portal: PortalSettings, email: str, password: str) -> None:
    """Sign in through the portal's login form.

    Raises:
        AuthenticationError: When the login page cannot be reached, its form
            cannot be filled, or the portal is still on the login route after
            submitting.
    """
    try:
        await goto_with_retry(page, portal.login_url, portal)
    except (NavigationTimeout, PlaywrightError) as exc:
        raise AuthenticationError(f"Login page unreachable: {exc}") from exc

    log.info("portal.logging_in", email=email)
    try:
        await page.locator(portal.email_selector).fill(email)
        await page.locator(portal.password_selector).fill(password)
        await page.locator(portal.submit_selector).click()
    except PlaywrightError as exc:
        raise AuthenticationError(f"Login form could not be submitted: {exc}") from exc
    try:
        await page.wait_for_load_state("networkidle", timeout=portal.timeout_ms)
    except PlaywrightTimeoutError:
        log.warning("portal.login_slow", url=page.url)

    if _on_login_route(page.url, portal):
        raise AuthenticationError("Portal rejected the supplied credentials")
    log.info("portal.logged_in", url=page.url)


__all__ = ["open_page", "login"]
