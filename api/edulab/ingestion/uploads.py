from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from fastapi import UploadFile

from edulab.core.errors import ApiError, bad_request
from edulab.ingestion.parser import extension_tag

logger = logging.getLogger("uploads")

CHUNK_BYTES = 1024 * 1024


@dataclass(frozen=True)
class StoredUpload:
    path: Path
    original_name: str
    size: int
    extension: str


def discard(path: Path) -> None:
    """Best-effort delete; a failure here never replaces the real response."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("temp file cleanup failed path=%s err=%s", path, e)


def _too_large(max_bytes: int) -> ApiError:
    return bad_request("file_too_large", details=f"upload exceeds {max_bytes // (1024 * 1024)} MB")


async def _write_capped(file: UploadFile, dest: Path, max_bytes: int) -> int:
    # multipart parsing already sized the part; refuse before touching disk
    if file.size is not None and file.size > max_bytes:
        raise _too_large(max_bytes)

    size = 0
    with open(dest, "wb") as out:
        while True:
            chunk = await file.read(CHUNK_BYTES)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                raise _too_large(max_bytes)
            out.write(chunk)
    return size


@asynccontextmanager
async def stored_upload(file: UploadFile, upload_dir: Path, max_bytes: int) -> AsyncIterator[StoredUpload]:
    """
    Save ``file`` under a unique name in ``upload_dir`` and delete it when the
    block exits, whatever the outcome.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    original = file.filename or ""
    ext = extension_tag(original)
    path = upload_dir / f"{uuid.uuid4().hex}{'.' + ext if ext.isalnum() else ''}"

    try:
        size = await _write_capped(file, path, max_bytes)
        logger.info("stored upload name=%s ext=%s size=%s", original, ext, size)
        yield StoredUpload(path=path, original_name=original, size=size, extension=ext)
    finally:
        discard(path)
