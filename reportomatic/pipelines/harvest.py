"""
Harvest pipeline.

Processing order is period → form → organization → report identifier.  For
every identifier the pipeline renders the survey to a local PDF, resolves
the ``year/period/form/organization`` folder chain on Drive and archives the
PDF, deleting the local copy once Drive confirms it.

A failure that concerns one report (or one listing page) is logged with its
organization/form/period/identifier context, recorded in the
:class:`HarvestResult`, and the loop moves on.  Only authentication and
configuration problems end a run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
from playwright.async_api import Error as PlaywrightError

from reportomatic.config.schema import HarvestConfig
from reportomatic.drive.auth import authorize_drive
from reportomatic.drive.folders import resolve_remote_folder
from reportomatic.drive.upload import archive_file
from reportomatic.models import ArchivalPath, ReportTarget, iter_organizations
from reportomatic.portal.extract import list_report_ids
from reportomatic.portal.render import render_survey
from reportomatic.portal.session import login, open_page
from reportomatic.utils.errors import (
    ConfigError,
    FilesystemError,
    NavigationTimeout,
    RemoteStoreError,
    UploadError,
)
from reportomatic.utils.paths import local_document_path, sanitize_title
from reportomatic.utils.periods import generate_months
from .types import (
    ArchivedDocument,
    HarvestPlan,
    HarvestResult,
    PlannedDocument,
    SkippedItem,
)

log = structlog.get_logger()

# Failures confined to one report; everything else propagates.
ITEM_ERRORS = (
    NavigationTimeout,
    FilesystemError,
    RemoteStoreError,
    UploadError,
    PlaywrightError,
)


def plan_harvest(
    cfg: HarvestConfig,
    *,
    year: int,
    month_start: Optional[int] = None,
    month_end: Optional[int] = None,
    form_type: Optional[int] = None,
    root_folder_id: str = "root",
    local_root: Optional[Path] = None,
    dry_run: bool = False,
) -> HarvestPlan:
    """Build a :class:`HarvestPlan` from CLI-style arguments.

    Raises:
        InvalidRangeError: Bad month bounds.
        ConfigError: *form_type* is not in the forms table.
    """
    months = generate_months(month_start, month_end)
    if form_type is None:
        form_ids = tuple(cfg.forms)
    elif form_type in cfg.forms:
        form_ids = (form_type,)
    else:
        raise ConfigError(f"Unknown form type {form_type}; known: {sorted(cfg.forms)}")
    return HarvestPlan(
        year=year,
        months=tuple(months),
        form_ids=form_ids,
        root_folder_id=root_folder_id,
        local_root=Path(local_root or cfg.local_root).expanduser(),
        dry_run=dry_run,
    )


async def _archive_one(page, drive, cfg, plan, archival, report_id, cache) -> ArchivedDocument:
    local = await render_survey(page, cfg.portal, report_id, archival.local_dir(plan.local_root))
    folder_id = resolve_remote_folder(drive, plan.root_folder_id, archival.segments, cache=cache)
    file_id = archive_file(drive, local, folder_id)
    return ArchivedDocument(
        report_id=report_id,
        file_id=file_id,
        remote_path=archival.as_posix(),
        name=local.name,
    )


async def harvest_reports(page, drive, cfg: HarvestConfig, plan: HarvestPlan) -> HarvestResult:
    """Run the nested harvest loop on an already signed-in *page*.

    Args:
        page: Signed-in Playwright page.
        drive: Authenticated Drive v3 resource; unused (may be ``None``) for
            a dry run.
        cfg: Validated configuration.
        plan: Run parameters.

    Returns:
        The filled-in :class:`HarvestResult`.
    """
    unknown = [f for f in plan.form_ids if f not in cfg.forms]
    if unknown:
        raise ConfigError(f"Unknown form type(s): {unknown}")

    result = HarvestResult()
    cache: dict = {}
    log.info(
        "harvest.started",
        year=plan.year,
        months=list(plan.months),
        forms=list(plan.form_ids),
        dry_run=plan.dry_run,
    )

    for month in plan.months:
        for form_id in plan.form_ids:
            form_name = cfg.forms[form_id]
            for org_id, org_name in iter_organizations(cfg.organizations):
                target = ReportTarget(
                    organization_id=org_id,
                    organization_name=org_name,
                    form_id=form_id,
                    form_name=form_name,
                    month=month,
                    year=plan.year,
                )
                bound = log.bind(**target.log_context())

                ids = await list_report_ids(page, cfg.portal, target)
                if not ids:
                    result.empty_listings.append(target)
                    continue

                archival = ArchivalPath.from_target(target)
                for report_id in ids:
                    if plan.dry_run:
                        local = local_document_path(
                            plan.local_root, archival, sanitize_title(None, report_id)
                        )
                        result.planned.append(
                            PlannedDocument(
                                report_id=report_id,
                                local_path=local,
                                remote_path=archival.as_posix(),
                            )
                        )
                        bound.info("harvest.planned", report_id=report_id, remote=archival.as_posix())
                        continue

                    try:
                        doc = await _archive_one(page, drive, cfg, plan, archival, report_id, cache)
                    except ITEM_ERRORS as exc:
                        bound.error(
                            "harvest.item_skipped",
                            report_id=report_id,
                            error_type=type(exc).__name__,
                            error=str(exc),
                        )
                        result.skipped.append(
                            SkippedItem.from_target(target, str(exc), report_id=report_id)
                        )
                        continue
                    result.archived.append(doc)
                    bound.info("harvest.archived", report_id=report_id, file_id=doc.file_id)

    log.info("harvest.finished", **result.summary())
    return result


async def run_harvest(
    cfg: HarvestConfig,
    plan: HarvestPlan,
    email: str,
    password: str,
    *,
    headless: bool = True,
) -> HarvestResult:
    """Authorize Drive, open a browser, sign in and harvest.

    Drive is authorized before the browser starts so the interactive consent
    step, when needed, never overlaps page work.  A dry run skips Drive.

    Raises:
        AuthenticationError: Drive or portal authorization failed.
    """
    drive = None if plan.dry_run else await authorize_drive(cfg.drive)
    async with open_page(cfg.portal, headless=headless) as page:
        await login(page, cfg.portal, email, password)
        return await harvest_reports(page, drive, cfg, plan)


__all__ = ["ITEM_ERRORS", "plan_harvest", "harvest_reports", "run_harvest"]
