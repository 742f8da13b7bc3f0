"""
Domain-level data models shared across the portal, Drive and CLI layers.

The module provides:

* **`EXCLUDED_ORGANIZATIONS`** and :func:`iter_organizations` – the single
  place where reserved association ids are dropped from a run.
* **`ReportTarget`** – one listing page (organization × form × period).
* **`ArchivalPath`** – the ordered folder segments shared by the local PDF
  tree and the Drive folder chain.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Mapping, Tuple

from pydantic import BaseModel, field_validator

from reportomatic.utils.periods import month_label

log = logging.getLogger(__name__)

# Association ids that never take part in a harvest, whatever the YAML says.
EXCLUDED_ORGANIZATIONS: frozenset[int] = frozenset({4, 15})


def iter_organizations(organizations: Mapping[int, str]) -> Iterator[Tuple[int, str]]:
    """Yield ``(id, name)`` pairs in table order, minus the excluded ids."""
    for org_id, name in organizations.items():
        if int(org_id) in EXCLUDED_ORGANIZATIONS:
            log.info("Skipping association ID %s.", org_id)
            continue
        yield int(org_id), name


def clean_segment(value: str) -> str:
    """Return *value* usable as one folder name (no ``/``, no outer blanks)."""
    return str(value).replace("/", "-").strip()


class ReportTarget(BaseModel, frozen=True):
    """
    Immutable description of one report listing page.

    Attributes
    ----------
    organization_id / organization_name
        Association as configured in *organizations.yaml*.
    form_id / form_name
        Form type as configured in *forms.yaml*.
    month / year
        Reporting period.
    """

    organization_id: int
    organization_name: str
    form_id: int
    form_name: str
    month: int
    year: int

    @field_validator("organization_id")
    @classmethod
    def _not_excluded(cls, v: int) -> int:
        if v in EXCLUDED_ORGANIZATIONS:
            raise ValueError(f"Association ID {v} is excluded from harvesting")
        return v

    @property
    def period_label(self) -> str:
        return month_label(self.month)

    def log_context(self) -> dict:
        """Key/value pairs attached to every log event about this target."""
        return {
            "organization": self.organization_name,
            "organization_id": self.organization_id,
            "form": self.form_name,
            "form_id": self.form_id,
            "period": f"{self.month}-{self.year}",
        }


class ArchivalPath(BaseModel, frozen=True):
    """
    Ordered folder segments ``(year, period, form, organization)``.

    The same :class:`ReportTarget` always yields the same segments, which in
    turn always resolve to the same Drive folder chain.
    """

    segments: Tuple[str, ...]

    @field_validator("segments")
    @classmethod
    def _clean(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = tuple(clean_segment(s) for s in v)
        if not cleaned or any(not s for s in cleaned):
            raise ValueError(f"Archival path contains an empty segment: {v!r}")
        return cleaned

    @classmethod
    def from_target(cls, target: ReportTarget) -> "ArchivalPath":
        return cls(
            segments=(
                str(target.year),
                target.period_label,
                target.form_name,
                target.organization_name,
            )
        )

    def as_posix(self) -> str:
        """Slash-joined form, used in log lines and Drive folder descriptions."""
        return "/".join(self.segments)

    def local_dir(self, root: Path) -> Path:
        return Path(root).joinpath(*self.segments)


__all__ = [
    "EXCLUDED_ORGANIZATIONS",
    "iter_organizations",
    "clean_segment",
    "ReportTarget",
    "ArchivalPath",
]
