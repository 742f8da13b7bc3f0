"""Harvest pipeline and the value objects it exchanges with the CLI."""

from .harvest import harvest_reports, plan_harvest, run_harvest  # noqa: F401
from .types import HarvestPlan, HarvestResult, SkippedItem  # noqa: F401

__all__: list[str] = [
    "harvest_reports",
    "plan_harvest",
    "run_harvest",
    "HarvestPlan",
    "HarvestResult",
    "SkippedItem",
]
