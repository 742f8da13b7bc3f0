"""``reportomatic-cli harvest`` – sign in, render every report and archive it.

Key flags
------------
* ``-y/--year``, ``-s/--month-start``, ``-m/--month-end`` – reporting period;
  no month flags means the whole year, a single flag means that month only.
* ``-f/--form-type`` – restrict to one form type (default: all of them).
* ``-i/--parent-folder-id`` – Drive folder the archive tree hangs from.
* ``--dry-run`` – list identifiers and destinations without rendering,
  uploading or deleting anything.
"""

from __future__ import annotations

import asyncio
import datetime
from pathlib import Path

import click
import structlog

from reportomatic.pipelines.harvest import plan_harvest, run_harvest
from reportomatic.pipelines.types import HarvestResult
from reportomatic.utils.display import echo_banner, echo_section, echo_success, echo_warning
from reportomatic.utils.errors import AuthenticationError, InvalidRangeError

log = structlog.get_logger()


def _print_summary(result: HarvestResult, dry_run: bool) -> None:
    echo_banner("Harvest summary")
    if dry_run:
        for doc in result.planned:
            click.echo(f"  • {doc.report_id} → {doc.remote_path}/ ({doc.local_path})")
        echo_success(f"{len(result.planned)} report(s) would be archived")
    else:
        echo_success(f"{len(result.archived)} report(s) archived")
    click.echo(f"  {len(result.empty_listings)} listing(s) without reports")
    if result.skipped:
        echo_section("Skipped")
        for item in result.skipped:
            ident = item.report_id or "-"
            echo_warning(f"{item.organization} / {item.form} / {item.period} / {ident}: {item.reason}")


@click.command(name="harvest")
@click.option("-e", "--email", envvar="REPORTOMATIC_EMAIL", help="Portal account e-mail.")
@click.option(
    "-p",
    "--password",
    envvar="REPORTOMATIC_PASSWORD",
    show_default=False,
    help="Portal account password.",
)
@click.option(
    "-y",
    "--year",
    type=click.IntRange(1900, 9999),
    default=lambda: datetime.date.today().year,
    show_default="current year",
)
@click.option("-s", "--month-start", type=int, help="First month (1-12).")
@click.option("-m", "--month-end", type=int, help="Last month (1-12).")
@click.option("-f", "--form-type", type=int, help="Only this form-type id.")
@click.option(
    "-i",
    "--parent-folder-id",
    envvar="REPORTOMATIC_PARENT_FOLDER_ID",
    default="root",
    help="Drive folder that receives the year/period/form/organization tree.",
)
@click.option(
    "--local-root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Staging directory for PDFs (default: local_root from settings.yaml).",
)
@click.option("--dry-run", is_flag=True, help="List what would be archived, touch nothing.")
@click.option("--headed", is_flag=True, help="Show the browser window.")
@click.pass_obj
def cli(
    obj: dict,
    email: str | None,
    password: str | None,
    year: int,
    month_start: int | None,
    month_end: int | None,
    form_type: int | None,
    parent_folder_id: str,
    local_root: Path | None,
    dry_run: bool,
    headed: bool,
) -> None:
    """Harvest report PDFs for one year into Google Drive."""
    cfg = obj["cfg"]

    if not email or not password:
        log.error("harvest.missing_credentials")
        raise click.ClickException("Email and password are required.")

    if form_type is not None and form_type not in cfg.forms:
        raise click.BadParameter(
            f"{form_type} is not a known form type ({', '.join(map(str, cfg.forms))})",
            param_hint="'-f' / '--form-type'",
        )

    try:
        plan = plan_harvest(
            cfg,
            year=year,
            month_start=month_start,
            month_end=month_end,
            form_type=form_type,
            root_folder_id=parent_folder_id,
            local_root=local_root,
            dry_run=dry_run,
        )
    except InvalidRangeError as exc:
        log.error("harvest.invalid_range", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    log.info(
        "harvest.parameters",
        email=email,
        password="[HIDDEN]",
        year=plan.year,
        months=list(plan.months),
        forms=list(plan.form_ids),
        parent_folder_id=plan.root_folder_id,
        local_root=str(plan.local_root),
        dry_run=dry_run,
    )

    try:
        result = asyncio.run(run_harvest(cfg, plan, email, password, headless=not headed))
    except AuthenticationError as exc:
        log.error("harvest.authentication_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    _print_summary(result, dry_run)
