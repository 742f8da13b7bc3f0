"""Exception taxonomy shared by the harvesting pipeline.

Two classes are fatal to a run and are only raised before or during login:
:class:`AuthenticationError` and :class:`InvalidRangeError` (plus
:class:`ConfigError` for unusable YAML).  Everything else describes the
failure of a single report and is caught by the loop that owns that report.
"""

from __future__ import annotations


class ReportomaticError(RuntimeError):
    """Base class for every error raised by reportomatic."""


class AuthenticationError(ReportomaticError):
    """Raised when the portal or Google Drive rejects our credentials."""


class InvalidRangeError(ReportomaticError, ValueError):
    """Raised for a month outside 1–12 or a start month after the end month."""


class ConfigError(ReportomaticError):
    """Raised when the merged YAML configuration fails validation."""


class FilesystemError(ReportomaticError):
    """Raised when a local directory or file cannot be created or removed."""


class RemoteStoreError(ReportomaticError):
    """Raised when a Drive folder query or folder creation fails."""


class UploadError(ReportomaticError):
    """Raised when a document could not be archived; the local copy is kept."""


class NavigationTimeout(ReportomaticError):
    """Raised when a page navigation still times out after its retry.

    Attributes:
        url: Target of the navigation.
        attempts: Number of attempts made before giving up.
    """

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"Timed out navigating to {url} after {attempts} attempt(s)")
        self.url = url
        self.attempts = attempts


__all__ = [
    "ReportomaticError",
    "AuthenticationError",
    "InvalidRangeError",
    "ConfigError",
    "FilesystemError",
    "RemoteStoreError",
    "UploadError",
    "NavigationTimeout",
]
