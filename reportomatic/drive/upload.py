"""Upload one local document to Drive and delete it once Drive confirms."""

from __future__ import annotations

import io
from pathlib import Path

import structlog
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from reportomatic.utils.errors import FilesystemError, UploadError

log = structlog.get_logger()


def archive_file(
    drive,
    local_path: Path,
    folder_id: str,
    *,
    mimetype: str = "application/pdf",
) -> str:
    """Upload *local_path* into *folder_id*, then remove the local copy.

    The upload counts as confirmed only when Drive answers with the id of the
    new file.  Until then the local file is left untouched so it can be
    retried by hand.

    Args:
        drive: Authenticated Drive v3 resource.
        local_path: File to archive.  Its base name becomes the Drive name.
        folder_id: Destination folder id.
        mimetype: Media type sent with the upload.

    Returns:
        The id of the newly created Drive file.

    Raises:
        UploadError: Read failure, Drive error or a response without an id.
        FilesystemError: Upload confirmed but the local delete failed.
    """
    local_path = Path(local_path)
    try:
        payload = local_path.read_bytes()
    except OSError as exc:
        raise UploadError(f"Cannot read {local_path}: {exc}") from exc

    media = MediaIoBaseUpload(io.BytesIO(payload), mimetype=mimetype, resumable=False)
    body = {"name": local_path.name, "parents": [folder_id]}
    try:
        response = (
            drive.files()
            .create(body=body, media_body=media, fields="id", supportsAllDrives=True)
            .execute()
        )
    except (HttpError, GoogleAuthError, OSError) as exc:
        raise UploadError(f"Upload of {local_path.name} failed: {exc}") from exc

    file_id = (response or {}).get("id")
    if not file_id:
        raise UploadError(f"Drive did not confirm upload of {local_path.name}")
    log.info(
        "drive.uploaded",
        file=local_path.name,
        folder_id=folder_id,
        file_id=file_id,
        size=len(payload),
    )

    try:
        local_path.unlink()
    except OSError as exc:
        raise FilesystemError(
            f"{local_path} was archived as {file_id} but could not be deleted: {exc}"
        ) from exc
    log.info("local.deleted", path=str(local_path))
    return file_id


__all__ = ["archive_file"]
