"""
Materialise a folder chain on Google Drive.

:func:`resolve_remote_folder` walks a sequence of folder names from a root
folder id downwards.  Every level is looked up first and created only when
no live folder of that exact name exists under the current parent, so
re-running a harvest never duplicates a folder this tool created.
"""

from __future__ import annotations

from typing import MutableMapping, Optional, Sequence, Tuple

import structlog
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from reportomatic.utils.errors import RemoteStoreError

log = structlog.get_logger()

FOLDER_MIME = "application/vnd.google-apps.folder"

FolderCache = MutableMapping[Tuple[str, str], str]

# Errors raised by the Drive client for a single request (sockets included).
_REMOTE_ERRORS = (HttpError, GoogleAuthError, OSError)


def escape_query_value(value: str) -> str:
    """Escape *value* for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def folder_query(name: str, parent_id: str) -> str:
    """Return the ``files.list`` query for live folders *name* under *parent_id*."""
    return (
        f"name = '{escape_query_value(name)}' "
        f"and '{escape_query_value(parent_id)}' in parents "
        f"and mimeType = '{FOLDER_MIME}' "
        "and trashed = false"
    )


def _split(path: Sequence[str] | str) -> list[str]:
    if isinstance(path, str):
        return [p for p in path.split("/") if p.strip()]
    return [str(p) for p in path]


def find_folder(drive, parent_id: str, name: str) -> Optional[str]:
    """Return the id of the oldest live folder *name* under *parent_id*.

    When several folders match, the first by ``createdTime`` wins and a
    warning lists every candidate.
    """
    response = (
        drive.files()
        .list(
            q=folder_query(name, parent_id),
            fields="files(id, name, createdTime)",
            orderBy="createdTime",
            spaces="drive",
            supportsAllDrives=True,
            includeItemsFromAllDrives=True,
        )
        .execute()
    )
    matches = response.get("files", [])
    if not matches:
        return None
    if len(matches) > 1:
        log.warning(
            "drive.duplicate_folders",
            name=name,
            parent_id=parent_id,
            candidates=[m["id"] for m in matches],
            chosen=matches[0]["id"],
        )
    return matches[0]["id"]


def create_folder(drive, parent_id: str, name: str) -> str:
    """Create folder *name* under *parent_id* and return its id."""
    body = {"name": name, "mimeType": FOLDER_MIME, "parents": [parent_id]}
    created = (
        drive.files()
        .create(body=body, fields="id", supportsAllDrives=True)
        .execute()
    )
    folder_id = created.get("id")
    if not folder_id:
        raise RemoteStoreError(f"Drive returned no id for new folder {name!r}")
    log.info("drive.folder_created", name=name, parent_id=parent_id, folder_id=folder_id)
    return folder_id


def resolve_remote_folder(
    drive,
    root_id: str,
    path: Sequence[str] | str,
    *,
    cache: Optional[FolderCache] = None,
) -> str:
    """Return the id of the leaf folder of *path* below *root_id*.

    Args:
        drive: Authenticated Drive v3 resource (``googleapiclient``).
        root_id: Folder id the chain hangs from (``"root"`` for My Drive).
        path: Folder names, outermost first.  A slash-delimited string is
            split on ``/``.
        cache: Optional ``(parent_id, name) -> folder_id`` mapping shared for
            one run.  It only saves queries; the folder chosen is the same
            with or without it.

    Returns:
        Id of the innermost folder.  An empty *path* returns *root_id*.

    Raises:
        RemoteStoreError: When a query or a folder creation fails.
    """
    current = root_id
    for name in _split(path):
        key = (current, name)
        if cache is not None and key in cache:
            current = cache[key]
            continue
        try:
            found = find_folder(drive, current, name)
            if found is None:
                found = create_folder(drive, current, name)
            else:
                log.debug("drive.folder_exists", name=name, parent_id=current, folder_id=found)
        except _REMOTE_ERRORS as exc:
            raise RemoteStoreError(
                f"Could not resolve folder {name!r} under {current!r}: {exc}"
            ) from exc
        if cache is not None:
            cache[key] = found
        current = found
    return current


__all__ = [
    "FOLDER_MIME",
    "escape_query_value",
    "folder_query",
    "find_folder",
    "create_folder",
    "resolve_remote_folder",
]
