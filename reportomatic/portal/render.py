"""Render one survey page to a local PDF."""

from __future__ import annotations

from pathlib import Path

import structlog

from reportomatic.config.schema import PortalSettings
from reportomatic.utils.paths import ensure_parent_dir, sanitize_title, unique_path
from .navigation import goto_with_retry

log = structlog.get_logger()


def survey_url(portal: PortalSettings, report_id: str) -> str:
    return portal.url(portal.survey_route, report_id=report_id)


async def render_survey(
    page,
    portal: PortalSettings,
    report_id: str,
    destination: Path,
) -> Path:
    """Print the survey page of *report_id* into *destination*.

    The file is named after the page title (``/`` replaced by ``_``), or
    after the identifier when the title is empty.  An existing file of that
    name is never overwritten; a ``_2``, ``_3`` ... suffix is added instead.

    Args:
        page: Signed-in Playwright page.
        portal: Portal settings (routes, ready selector, PDF format).
        report_id: Identifier such as ``"12/2024"``.
        destination: Directory receiving the PDF; created when missing.

    Returns:
        Path of the written PDF.

    Raises:
        NavigationTimeout: The survey page kept timing out.
        FilesystemError: *destination* could not be created.
        playwright.async_api.Error: Ready selector or printing failed.
    """
    url = survey_url(portal, report_id)
    await goto_with_retry(page, url, portal)
    if portal.ready_selector:
        await page.wait_for_selector(portal.ready_selector, timeout=portal.timeout_ms)

    title = await page.title()
    stem = sanitize_title(title, fallback=report_id)
    log.debug("portal.title", original=title, sanitized=stem)

    target = Path(destination) / f"{stem}.pdf"
    ensure_parent_dir(target)
    target = unique_path(target)
    await page.pdf(path=str(target), format=portal.pdf_format, print_background=True)
    log.info("portal.pdf_saved", report_id=report_id, path=str(target))
    return target


__all__ = ["survey_url", "render_survey"]
