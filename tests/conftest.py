"""Shared fixtures and in-memory stand-ins for the browser page and Drive."""

from __future__ import annotations

import itertools
import re
from pathlib import Path
from types import SimpleNamespace

import pytest
from googleapiclient.errors import HttpError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from reportomatic.config.schema import HarvestConfig, PortalSettings

BASE_URL = "https://portal.test"

_QUOTED = r"'((?:[^'\\]|\\.)*)'"
_FOLDER_Q = re.compile(rf"name = {_QUOTED} and {_QUOTED} in parents")


def _unescape(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


def http_error(status: int = 500, reason: str = "boom") -> HttpError:
    return HttpError(resp=SimpleNamespace(status=status, reason=reason), content=reason.encode())


# --------------------------------------------------------------------------- #
# Drive                                                                       #
# --------------------------------------------------------------------------- #
class _Request:
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class _Files:
    def __init__(self, drive: "FakeDrive"):
        self.drive = drive

    def list(self, q, **kwargs):
        drive = self.drive
        drive.list_calls.append(q)

        def run():
            if drive.fail_list is not None:
                raise drive.fail_list
            m = _FOLDER_Q.match(q)
            assert m, q
            name, parent = _unescape(m.group(1)), _unescape(m.group(2))
            hits = [
                f for f in drive.folders
                if f["name"] == name and parent in f["parents"] and not f.get("trashed")
            ]
            hits.sort(key=lambda f: f["createdTime"])
            return {"files": [{k: f[k] for k in ("id", "name", "createdTime")} for f in hits]}

        return _Request(run)

    def create(self, body, media_body=None, fields=None, **kwargs):
        drive = self.drive

        def run():
            if media_body is None:
                if drive.fail_create is not None:
                    raise drive.fail_create
                return {"id": drive.add_folder(body["name"], body["parents"][0])}
            if drive.fail_upload is not None:
                raise drive.fail_upload
            drive.uploads.append(
                {
                    "name": body["name"],
                    "parents": body["parents"],
                    "mimetype": media_body.mimetype(),
                    "data": media_body.getbytes(0, media_body.size()),
                }
            )
            if drive.upload_response is not None:
                return drive.upload_response
            return {"id": f"file-{len(drive.uploads)}"}

        return _Request(run)


class FakeDrive:
    """Tiny subset of the Drive v3 resource: folders, queries and uploads."""

    def __init__(self):
        self.folders: list[dict] = []
        self.uploads: list[dict] = []
        self.list_calls: list[str] = []
        self.fail_list = None
        self.fail_create = None
        self.fail_upload = None
        self.upload_response = None
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)

    def files(self):
        return _Files(self)

    def add_folder(self, name: str, parent: str, *, created: int | None = None) -> str:
        folder_id = f"folder-{next(self._ids)}"
        self.folders.append(
            {
                "id": folder_id,
                "name": name,
                "parents": [parent],
                "createdTime": created if created is not None else next(self._clock),
            }
        )
        return folder_id

    def children(self, parent: str) -> list[str]:
        return [f["name"] for f in self.folders if parent in f["parents"]]

    def created_names(self) -> list[str]:
        return [f["name"] for f in self.folders]


# --------------------------------------------------------------------------- #
# Playwright page                                                             #
# --------------------------------------------------------------------------- #
class _Locator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    async def fill(self, value: str) -> None:
        self.page.filled[self.selector] = value

    async def click(self) -> None:
        page = self.page
        page.clicked.append(self.selector)
        if page.filled.get("input[name=password]") == page.accept_password:
            page.url = f"{BASE_URL}/dashboard"

    async def all_inner_texts(self) -> list[str]:
        return list(self.page.cells.get(self.page.url, []))


class FakePage:
    """Records navigation and prints; serves canned cells and titles per URL.

    ``timeouts`` maps a URL to the number of times ``goto`` should time out
    before succeeding.
    """

    def __init__(self, *, cells=None, titles=None, timeouts=None, accept_password="secret"):
        self.url = "about:blank"
        self.cells: dict[str, list[str]] = dict(cells or {})
        self.titles: dict[str, str] = dict(titles or {})
        self.timeouts: dict[str, int] = dict(timeouts or {})
        self.accept_password = accept_password
        self.visits: list[str] = []
        self.goto_kwargs: list[dict] = []
        self.filled: dict[str, str] = {}
        self.clicked: list[str] = []
        self.waited: list[str] = []
        self.pdfs: list[tuple[str, str]] = []
        self.nav_timeout = None

    def set_default_navigation_timeout(self, ms: int) -> None:
        self.nav_timeout = ms

    async def goto(self, url: str, **kwargs):
        self.visits.append(url)
        self.goto_kwargs.append(kwargs)
        if self.timeouts.get(url, 0) > 0:
            self.timeouts[url] -= 1
            raise PlaywrightTimeoutError(f"Timeout {kwargs.get('timeout')}ms exceeded.")
        self.url = url
        return None

    def locator(self, selector: str) -> _Locator:
        return _Locator(self, selector)

    async def wait_for_load_state(self, state: str = "load", timeout=None) -> None:
        return None

    async def wait_for_selector(self, selector: str, timeout=None) -> None:
        self.waited.append(selector)

    async def title(self) -> str:
        return self.titles.get(self.url, "")

    async def pdf(self, path: str, format: str | None = None, **kwargs) -> bytes:
        Path(path).write_bytes(b"%PDF-1.4 fake")
        self.pdfs.append((path, format))
        return b""


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Run every test from an empty directory with logs kept under it."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("REPORTOMATIC_LOG_DIR", str(tmp_path / "logs"))
    return work


@pytest.fixture
def portal() -> PortalSettings:
    return PortalSettings(base_url=BASE_URL)


@pytest.fixture
def cfg(tmp_path, portal) -> HarvestConfig:
    return HarvestConfig(
        portal=portal,
        local_root=tmp_path / "pdfs",
        organizations={1: "ORG A", 4: "EXCLUDED 4", 2: "ORG/B", 15: "EXCLUDED 15"},
        forms={7: "Form X"},
    )


@pytest.fixture
def drive() -> FakeDrive:
    return FakeDrive()


def listing(org: int, form: int, month: int, year: int) -> str:
    return f"{BASE_URL}/report-pdf/{org}/{form}/{month}-{year}"


def survey(report_id: str) -> str:
    return f"{BASE_URL}/survey-pdf/{report_id}"
