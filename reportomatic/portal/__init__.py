"""
Playwright helpers for the report portal.

* :mod:`.session` – browser lifetime and login.
* :mod:`.navigation` – the bounded retry applied to every page load.
* :mod:`.extract` – report identifiers from listing pages.
* :mod:`.render` – survey page → PDF.
"""

from .extract import filter_report_ids, list_report_ids  # noqa: F401
from .navigation import goto_with_retry, with_retry  # noqa: F401
from .render import render_survey  # noqa: F401
from .session import login, open_page  # noqa: F401

__all__: list[str] = [
    "filter_report_ids",
    "list_report_ids",
    "goto_with_retry",
    "with_retry",
    "render_survey",
    "login",
    "open_page",
]
