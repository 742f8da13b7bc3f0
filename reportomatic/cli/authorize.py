"""``reportomatic-cli authorize`` – run the Drive consent flow once.

Useful on a workstation before scheduling unattended harvests: the token
cached here is refreshed silently by later runs.
"""

from __future__ import annotations

import asyncio

import click
import structlog

from reportomatic.drive.auth import authorize_drive
from reportomatic.utils.display import echo_success
from reportomatic.utils.errors import AuthenticationError

log = structlog.get_logger()


@click.command(name="authorize")
@click.pass_obj
def cli(obj: dict) -> None:
    """Authorize Google Drive access and cache the token."""
    settings = obj["cfg"].drive
    try:
        asyncio.run(authorize_drive(settings))
    except AuthenticationError as exc:
        log.error("drive.authorization_failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc
    echo_success(f"Google Drive authorized (token cache: {settings.token_file})")
