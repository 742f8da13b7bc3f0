"""
Value objects that circulate between the CLI and the harvest pipeline.

:class:`HarvestPlan` and the per-item records are frozen pydantic models;
:class:`HarvestResult` is the one mutable object, filled in while the run
progresses and summarised at the end.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from reportomatic.models import ReportTarget
from reportomatic.utils.periods import month_label


class HarvestPlan(BaseModel, frozen=True):
    """Parameters of one harvest run.

    Attributes
    ----------
    year
        Reporting year.
    months
        Months to process, in order.
    form_ids
        Form types to process, in order.
    root_folder_id
        Drive folder the ``year/period/form/organization`` chain hangs from.
    local_root
        Staging directory for rendered PDFs.
    dry_run
        List identifiers and destinations only.
    """

    year: int = Field(..., ge=1900, le=9999)
    months: Tuple[int, ...]
    form_ids: Tuple[int, ...]
    root_folder_id: str = "root"
    local_root: Path
    dry_run: bool = False

    @field_validator("months")
    @classmethod
    def _valid_months(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v:
            raise ValueError("at least one month is required")
        for m in v:
            month_label(m)
        return v

    @field_validator("form_ids")
    @classmethod
    def _some_forms(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if not v:
            raise ValueError("at least one form type is required")
        return v


class ArchivedDocument(BaseModel, frozen=True):
    """One PDF confirmed by Drive."""

    report_id: str
    file_id: str
    remote_path: str
    name: str


class PlannedDocument(BaseModel, frozen=True):
    """What a dry run would have rendered and uploaded."""

    report_id: str
    local_path: Path
    remote_path: str


class SkippedItem(BaseModel, frozen=True):
    """A report (or listing, when *report_id* is ``None``) that was not archived."""

    organization: str
    form: str
    period: str
    report_id: Optional[str] = None
    reason: str

    @classmethod
    def from_target(
        cls, target: ReportTarget, reason: str, report_id: Optional[str] = None
    ) -> "SkippedItem":
        return cls(
            organization=target.organization_name,
            form=target.form_name,
            period=f"{target.month}-{target.year}",
            report_id=report_id,
            reason=reason,
        )


class HarvestResult(BaseModel):
    """Running summary of a harvest."""

    archived: List[ArchivedDocument] = Field(default_factory=list)
    planned: List[PlannedDocument] = Field(default_factory=list)
    skipped: List[SkippedItem] = Field(default_factory=list)
    empty_listings: List[ReportTarget] = Field(default_factory=list)

    def summary(self) -> dict:
        return {
            "archived": len(self.archived),
            "planned": len(self.planned),
            "skipped": len(self.skipped),
            "empty_listings": len(self.empty_listings),
        }


__all__ = [
    "HarvestPlan",
    "ArchivedDocument",
    "PlannedDocument",
    "SkippedItem",
    "HarvestResult",
]
