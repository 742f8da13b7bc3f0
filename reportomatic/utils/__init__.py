"""
Public façade for the *utils* package.

Only the dependency-free helpers are re-exported here; :mod:`.paths` and
:mod:`.logging` are imported from their own modules by the callers that
need them.
"""

from __future__ import annotations

# ─── errors ──────────────────────────────────────────────────────────────
from .errors import (
    ReportomaticError,
    AuthenticationError,
    InvalidRangeError,
    ConfigError,
    FilesystemError,
    RemoteStoreError,
    UploadError,
    NavigationTimeout,
)

# ─── periods ─────────────────────────────────────────────────────────────
from .periods import MONTH_LABELS, month_label, generate_months

# ─── console output ──────────────────────────────────────────────────────
from .display import echo_banner, echo_success, echo_section, echo_warning

# ------------------------------------------------------------------------
__all__: list[str] = [
    # errors
    "ReportomaticError",
    "AuthenticationError",
    "InvalidRangeError",
    "ConfigError",
    "FilesystemError",
    "RemoteStoreError",
    "UploadError",
    "NavigationTimeout",
    # periods
    "MONTH_LABELS",
    "month_label",
    "generate_months",
    # display
    "echo_banner",
    "echo_success",
    "echo_section",
    "echo_warning",
]
