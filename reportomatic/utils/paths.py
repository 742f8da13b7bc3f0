"""Local path helpers for rendered report PDFs."""

from __future__ import annotations

from pathlib import Path

import structlog

from reportomatic.models import ArchivalPath
from .errors import FilesystemError

log = structlog.get_logger()


def sanitize_title(title: str | None, fallback: str) -> str:
    """Return a filename stem derived from the page *title*.

    ``/`` becomes ``_`` so report numbers such as ``12/2024`` do not create
    sub-directories.  An empty title falls back to *fallback* (usually the
    report identifier), sanitised the same way.
    """
    stem = (title or "").strip() or fallback
    return stem.replace("/", "_").strip()


def local_document_path(
    root: Path,
    archival_path: ArchivalPath,
    title: str,
    ext: str = "pdf",
) -> Path:
    """Return ``<root>/<year>/<period>/<form>/<organization>/<title>.<ext>``."""
    return archival_path.local_dir(root) / f"{title}.{ext.lstrip('.')}"


def unique_path(path: Path) -> Path:
    """Return *path*, or the first free ``<stem>_<n><suffix>`` sibling when it exists.

    Existing files, such as a PDF kept after a failed upload, are never
    overwritten.
    """
    path = Path(path)
    candidate = path
    n = 2
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
        n += 1
    if candidate != path:
        log.info("paths.name_taken", requested=str(path), used=str(candidate))
    return candidate


def ensure_parent_dir(path: Path) -> Path:
    """Create every missing ancestor directory of *path*.

    The file itself is never created or touched.  Calling the helper again on
    the same path is a no-op.

    Args:
        path: Target file path.

    Returns:
        The parent directory.

    Raises:
        FilesystemError: When the directory chain cannot be created.
    """
    parent = Path(path).parent
    if parent.is_dir():
        log.debug("paths.dir_exists", directory=str(parent))
        return parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Could not create directory {parent}: {exc}") from exc
    log.info("paths.dir_created", directory=str(parent))
    return parent


__all__ = ["sanitize_title", "local_document_path", "unique_path", "ensure_parent_dir"]
