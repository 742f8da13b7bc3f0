"""
Google Drive authorization.

:func:`authorize_drive` is the single awaitable step that turns
:class:`~reportomatic.config.schema.DriveSettings` into an authenticated
Drive v3 resource.  Credential sources are tried in order:

1. a service-account key file, when configured and present;
2. the cached authorized-user token (refreshed when expired);
3. the interactive installed-app consent flow, whose local callback
   listener runs on ``settings.oauth_port``.  The resulting token is cached
   for the next run.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from reportomatic.config.schema import DriveSettings
from reportomatic.utils.errors import AuthenticationError

log = structlog.get_logger()


def _save_token(creds: Credentials, token_file: Path) -> None:
    token_file = Path(token_file)
    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text(creds.to_json(), encoding="utf-8")
    log.info("drive.token_saved", path=str(token_file))


def _cached_credentials(settings: DriveSettings):
    """Return usable credentials from the token cache, or ``None``."""
    token_file = Path(settings.token_file)
    if not token_file.exists():
        return None
    creds = Credentials.from_authorized_user_file(str(token_file), settings.scopes)
    if creds.valid:
        log.debug("drive.token_cached", path=str(token_file))
        return creds
    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            log.warning("drive.token_unusable", path=str(token_file), error=str(exc))
            return None
        _save_token(creds, token_file)
        log.info("drive.token_refreshed")
        return creds
    log.warning("drive.token_unusable", path=str(token_file))
    return None


def _consent_flow(settings: DriveSettings) -> Credentials:
    """Run the blocking installed-app consent flow and cache its token."""
    secrets = Path(settings.client_secrets)
    if not secrets.exists():
        raise AuthenticationError(
            f"No Drive credentials available: {secrets} not found and no cached token"
        )
    flow = InstalledAppFlow.from_client_secrets_file(str(secrets), settings.scopes)
    log.info("drive.consent_started", port=settings.oauth_port)
    creds = flow.run_local_server(
        port=settings.oauth_port,
        access_type="offline",
        success_message="Authorization successful! You can now close this tab.",
    )
    _save_token(creds, settings.token_file)
    return creds


def build_drive(credentials):
    """Return a Drive v3 resource bound to *credentials*."""
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


async def authorize_drive(settings: DriveSettings):
    """Return an authenticated Drive v3 resource.

    Raises:
        AuthenticationError: When no credential source succeeds.
    """
    try:
        sa_file = settings.service_account_file
        if sa_file is not None and Path(sa_file).exists():
            creds = service_account.Credentials.from_service_account_file(
                str(sa_file), scopes=settings.scopes
            )
            log.info("drive.authorized", source="service_account")
            return build_drive(creds)

        creds = _cached_credentials(settings)
        if creds is not None:
            log.info("drive.authorized", source="token")
            return build_drive(creds)

        creds = await asyncio.to_thread(_consent_flow, settings)
        log.info("drive.authorized", source="consent")
        return build_drive(creds)
    except AuthenticationError:
        raise
    except (GoogleAuthError, OSError, ValueError) as exc:
        raise AuthenticationError(f"Google Drive authorization failed: {exc}") from exc


__all__ = ["authorize_drive", "build_drive"]
