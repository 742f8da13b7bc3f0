"""
Google Drive side of the archive.

* :func:`authorize_drive` – one awaitable authorization step.
* :func:`resolve_remote_folder` – search-before-create folder chains.
* :func:`archive_file` – confirmed upload followed by local cleanup.
"""

from .auth import authorize_drive  # noqa: F401
from .folders import resolve_remote_folder  # noqa: F401
from .upload import archive_file  # noqa: F401

__all__: list[str] = ["authorize_drive", "resolve_remote_folder", "archive_file"]
