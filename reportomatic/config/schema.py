"""
Pydantic models that mirror the YAML configuration consumed by *reportomatic*.

Three files feed one :class:`HarvestConfig`:

* ``settings.yaml`` – portal routes/selectors, Drive credentials and the
  local staging root.
* ``organizations.yaml`` – association id → display name.
* ``forms.yaml`` – form-type id → display name.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

# --------------------------------------------------------------------------- #
# 1.  Portal                                                                  #
# --------------------------------------------------------------------------- #


class PortalSettings(BaseModel, frozen=True):
    """Where the portal lives and how its pages are driven.

    Route templates are formatted with ``str.format``; the report route
    receives ``organization_id``, ``form_id``, ``month`` and ``year`` and the
    survey route receives ``report_id``.
    """

    base_url: str = "https://programaintegraldefruticultura.com.co"
    login_route: str = "/login"
    report_route: str = "/report-pdf/{organization_id}/{form_id}/{month}-{year}"
    survey_route: str = "/survey-pdf/{report_id}"

    email_selector: str = "input[name=email]"
    password_selector: str = "input[name=password]"
    submit_selector: str = "button[type=submit]"
    cell_selector: str = "td"

    timeout_ms: int = Field(60_000, gt=0, description="Navigation timeout")
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"
    ready_selector: Optional[str] = None
    pdf_format: str = "Letter"

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def url(self, route: str, **fields) -> str:
        """Return the absolute URL for *route* formatted with *fields*."""
        return self.base_url + route.format(**fields)

    @property
    def login_url(self) -> str:
        return self.url(self.login_route)


# --------------------------------------------------------------------------- #
# 2.  Drive                                                                   #
# --------------------------------------------------------------------------- #


class DriveSettings(BaseModel, frozen=True):
    """Credential locations and OAuth parameters for Google Drive.

    Attributes:
        client_secrets: OAuth "installed app" client file.
        token_file: Cache for the authorized-user token.
        service_account_file: When set and present, used instead of OAuth.
        scopes: OAuth scopes requested.
        oauth_port: Local port of the consent-flow callback listener.
    """

    client_secrets: Path = Path("credentials.json")
    token_file: Path = Path("token.json")
    service_account_file: Optional[Path] = None
    scopes: List[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/drive.file"]
    )
    oauth_port: int = Field(3000, ge=0, le=65535)


# --------------------------------------------------------------------------- #
# 3.  Top-level model – complete validated config                             #
# --------------------------------------------------------------------------- #


class HarvestConfig(BaseModel, frozen=True):
    """Root configuration object consumed by the rest of *reportomatic*.

    Attributes:
        portal: :class:`PortalSettings`.
        drive: :class:`DriveSettings`.
        local_root: Staging directory for rendered PDFs.
        organizations: Association table in processing order.
        forms: Form-type table in processing order.
    """

    portal: PortalSettings = Field(default_factory=PortalSettings)
    drive: DriveSettings = Field(default_factory=DriveSettings)
    local_root: Path = Path("pdfs")
    organizations: Dict[int, str]
    forms: Dict[int, str]

    @field_validator("organizations", "forms")
    @classmethod
    def _non_empty_names(cls, v: Dict[int, str]) -> Dict[int, str]:
        if not v:
            raise ValueError("table must contain at least one entry")
        blank = [k for k, name in v.items() if not str(name).strip()]
        if blank:
            raise ValueError(f"blank name for id(s): {blank}")
        return {int(k): str(name).strip() for k, name in v.items()}


__all__ = ["PortalSettings", "DriveSettings", "HarvestConfig"]
