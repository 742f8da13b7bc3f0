import asyncio
from pathlib import Path

import pytest

from conftest import FakeDrive, FakePage, http_error, listing, survey
from reportomatic.pipelines import harvest as harvest_mod
from reportomatic.pipelines.harvest import harvest_reports, plan_harvest, run_harvest
from reportomatic.pipelines.types import HarvestPlan
from reportomatic.utils.errors import AuthenticationError, ConfigError, InvalidRangeError


def _plan(cfg, **overrides) -> HarvestPlan:
    data = dict(year=2024, months=(3,), form_ids=(7,), local_root=cfg.local_root)
    data.update(overrides)
    return HarvestPlan(**data)


def _page() -> FakePage:
    return FakePage(
        cells={
            listing(1, 7, 3, 2024): ["12/2024", "Total", "13/2024"],
            listing(2, 7, 3, 2024): ["5/1"],
        },
        titles={
            survey("12/2024"): "Acta 12/2024",
            survey("13/2024"): "Acta 13/2024",
            survey("5/1"): "Acta 5/1",
        },
    )


def test_full_run_archives_every_report(cfg, drive: FakeDrive):
    page = _page()
    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert [d.report_id for d in result.archived] == ["12/2024", "13/2024", "5/1"]
    assert result.skipped == []
    assert [u["name"] for u in drive.uploads] == ["Acta 12_2024.pdf", "Acta 13_2024.pdf", "Acta 5_1.pdf"]
    assert result.archived[2].remote_path == "2024/3.Marzo/Form X/ORG-B"
    # The shared part of the chain is created once.
    assert drive.created_names() == ["2024", "3.Marzo", "Form X", "ORG A", "ORG-B"]
    # Local copies are gone after confirmed upload.
    assert list(Path(cfg.local_root).rglob("*.pdf")) == []


def test_excluded_organizations_are_never_visited(cfg, drive: FakeDrive):
    page = _page()
    asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg, months=(3, 4))))

    assert not any("/report-pdf/4/" in url or "/report-pdf/15/" in url for url in page.visits)
    assert all("EXCLUDED" not in name for name in drive.created_names())


def test_processing_order_is_period_form_organization(cfg, drive: FakeDrive):
    cfg = cfg.model_copy(update={"forms": {7: "Form X", 8: "Form Y"}})
    page = FakePage()
    asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg, months=(1, 2), form_ids=(8, 7))))

    assert page.visits == [
        listing(1, 8, 1, 2024),
        listing(2, 8, 1, 2024),
        listing(1, 7, 1, 2024),
        listing(2, 7, 1, 2024),
        listing(1, 8, 2, 2024),
        listing(2, 8, 2, 2024),
        listing(1, 7, 2, 2024),
        listing(2, 7, 2, 2024),
    ]


def test_empty_listings_are_recorded(cfg, drive: FakeDrive):
    page = FakePage(cells={listing(2, 7, 3, 2024): ["no reports"]})
    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert [t.organization_id for t in result.empty_listings] == [1, 2]
    assert result.archived == []
    assert drive.folders == []


def test_survey_timeout_skips_only_that_report(cfg, drive: FakeDrive):
    page = _page()
    page.timeouts[survey("12/2024")] = 2

    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert [d.report_id for d in result.archived] == ["13/2024", "5/1"]
    assert len(result.skipped) == 1
    skipped = result.skipped[0]
    assert (skipped.organization, skipped.form, skipped.period, skipped.report_id) == (
        "ORG A",
        "Form X",
        "3-2024",
        "12/2024",
    )
    assert "Timed out" in skipped.reason


def test_upload_failure_keeps_pdf_and_continues(cfg, drive: FakeDrive):
    page = _page()
    drive.fail_upload = http_error(500)

    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert result.archived == []
    assert [s.report_id for s in result.skipped] == ["12/2024", "13/2024", "5/1"]
    kept = sorted(p.name for p in Path(cfg.local_root).rglob("*.pdf"))
    assert kept == ["Acta 12_2024.pdf", "Acta 13_2024.pdf", "Acta 5_1.pdf"]


def test_folder_failure_is_per_item(cfg, drive: FakeDrive):
    page = _page()
    drive.fail_list = OSError("network down")

    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert len(result.skipped) == 3
    assert drive.uploads == []


def test_dry_run_touches_nothing(cfg):
    page = _page()
    result = asyncio.run(harvest_reports(page, None, cfg, _plan(cfg, dry_run=True)))

    assert [d.report_id for d in result.planned] == ["12/2024", "13/2024", "5/1"]
    assert result.planned[0].local_path == (
        Path(cfg.local_root) / "2024" / "3.Marzo" / "Form X" / "ORG A" / "12_2024.pdf"
    )
    assert page.pdfs == []
    assert not Path(cfg.local_root).exists()
    assert not any("/survey-pdf/" in url for url in page.visits)


def test_unknown_form_in_plan(cfg, drive: FakeDrive):
    with pytest.raises(ConfigError):
        asyncio.run(harvest_reports(FakePage(), drive, cfg, _plan(cfg, form_ids=(99,))))


# ---------------------------------------------------------------- plans ----
def test_plan_defaults_to_all_forms_and_months(cfg):
    plan = plan_harvest(cfg, year=2024)
    assert plan.months == tuple(range(1, 13))
    assert plan.form_ids == (7,)
    assert plan.root_folder_id == "root"
    assert plan.local_root == Path(cfg.local_root)


def test_plan_single_form_and_range(cfg, tmp_path):
    plan = plan_harvest(
        cfg, year=2023, month_start=2, month_end=4, form_type=7, local_root=tmp_path / "out"
    )
    assert plan.months == (2, 3, 4)
    assert plan.form_ids == (7,)
    assert plan.local_root == tmp_path / "out"


def test_plan_rejects_bad_input(cfg):
    with pytest.raises(InvalidRangeError):
        plan_harvest(cfg, year=2024, month_start=6, month_end=2)
    with pytest.raises(ConfigError):
        plan_harvest(cfg, year=2024, form_type=99)


# ------------------------------------------------------------ full run ----
def test_run_harvest_wires_drive_login_and_loop(cfg, drive: FakeDrive, monkeypatch):
    page = _page()
    events = []

    async def fake_authorize(settings):
        events.append("authorize")
        return drive

    class FakeBrowser:
        def __init__(self, portal, headless=True):
            events.append(("browser", headless))

        async def __aenter__(self):
            return page

        async def __aexit__(self, *exc):
            events.append("closed")
            return False

    monkeypatch.setattr(harvest_mod, "authorize_drive", fake_authorize)
    monkeypatch.setattr(harvest_mod, "open_page", FakeBrowser)

    result = asyncio.run(run_harvest(cfg, _plan(cfg), "me@x.co", "secret", headless=False))

    assert events == ["authorize", ("browser", False), "closed"]
    assert len(result.archived) == 3


def test_run_harvest_bad_password(cfg, drive: FakeDrive, monkeypatch):
    async def fake_authorize(settings):
        return drive

    class FakeBrowser:
        def __init__(self, portal, headless=True):
            pass

        async def __aenter__(self):
            return FakePage()

        async def __aexit__(self, *exc):
            return False

    monkeypatch.setattr(harvest_mod, "authorize_drive", fake_authorize)
    monkeypatch.setattr(harvest_mod, "open_page", FakeBrowser)

    with pytest.raises(AuthenticationError):
        asyncio.run(run_harvest(cfg, _plan(cfg), "me@x.co", "nope"))
    assert drive.folders == []


def test_failed_uploads_with_shared_title_are_all_kept(cfg, drive: FakeDrive):
    page = FakePage(
        cells={listing(1, 7, 3, 2024): ["12/2024", "13/2024"]},
        titles={survey("12/2024"): "Encuesta", survey("13/2024"): "Encuesta"},
    )
    drive.fail_upload = http_error(500)

    result = asyncio.run(harvest_reports(page, drive, cfg, _plan(cfg)))

    assert [s.report_id for s in result.skipped] == ["12/2024", "13/2024"]
    kept = sorted(p.name for p in Path(cfg.local_root).rglob("*.pdf"))
    assert kept == ["Encuesta.pdf", "Encuesta_2.pdf"]
