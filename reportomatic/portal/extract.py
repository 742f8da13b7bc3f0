"""Report-identifier extraction from the per-organization listing page."""

from __future__ import annotations

import re
from typing import Iterable, List

import structlog
from playwright.async_api import Error as PlaywrightError

from reportomatic.config.schema import PortalSettings
from reportomatic.models import ReportTarget
from reportomatic.utils.errors import NavigationTimeout
from .navigation import goto_with_retry

log = structlog.get_logger()

REPORT_ID_RE = re.compile(r"^\d+/\d+$")


def filter_report_ids(texts: Iterable[str]) -> List[str]:
    """Return the cell texts that look like ``<number>/<number>``.

    Texts are stripped first.  Order is kept and repeats are dropped.
    """
    seen: set[str] = set()
    ids: List[str] = []
    for raw in texts:
        text = (raw or "").strip()
        if REPORT_ID_RE.match(text) and text not in seen:
            seen.add(text)
            ids.append(text)
    return ids


def listing_url(portal: PortalSettings, target: ReportTarget) -> str:
    return portal.url(
        portal.report_route,
        organization_id=target.organization_id,
        form_id=target.form_id,
        month=target.month,
        year=target.year,
    )


async def list_report_ids(page, portal: PortalSettings, target: ReportTarget) -> List[str]:
    """Open the listing page of *target* and return its report identifiers.

    A navigation failure or a page without table cells is logged and yields
    an empty list, so the caller simply moves on to the next organization.
    """
    url = listing_url(portal, target)
    bound = log.bind(**target.log_context())
    try:
        await goto_with_retry(page, url, portal)
        texts = await page.locator(portal.cell_selector).all_inner_texts()
    except (NavigationTimeout, PlaywrightError) as exc:
        bound.error("portal.listing_failed", url=url, error=str(exc))
        return []

    if not texts:
        bound.info("portal.no_cells", url=url)
        return []
    ids = filter_report_ids(texts)
    if not ids:
        bound.info("portal.no_report_ids", url=url, cells=len(texts))
    else:
        bound.info("portal.report_ids", count=len(ids))
    return ids


__all__ = ["REPORT_ID_RE", "filter_report_ids", "listing_url", "list_report_ids"]
