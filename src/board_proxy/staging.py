"""Local staging of uploaded files while they are forwarded upstream."""
import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


@dataclass
class StagedFile:
    """An upload written to disk under a generated name."""
    path: Path
    original_name: str
    size_bytes: int = 0
    discarded: bool = False


def _copy_to_disk(upload: UploadFile, destination: Path) -> int:
    upload.file.seek(0)
    with open(destination, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    return destination.stat().st_size


async def stage_upload(upload: UploadFile, upload_dir: Union[str, Path]) -> StagedFile:
    """Write ``upload`` under ``upload_dir`` with a unique name."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / uuid.uuid4().hex

    try:
        size = await run_in_threadpool(_copy_to_disk, upload, destination)
    except OSError:
        destination.unlink(missing_ok=True)
        raise
    logger.info(f"Staged upload '{upload.filename}' at {destination} ({size} bytes)")
    return StagedFile(path=destination, original_name=upload.filename or destination.name, size_bytes=size)


async def read_staged(staged: StagedFile) -> bytes:
    """Read the staged file without blocking the event loop."""
    return await run_in_threadpool(staged.path.read_bytes)


def discard_staged(staged: StagedFile) -> bool:
    """
    Delete the staged file.

    Runs at most once per file; a failure is logged and reported as False,
    never raised, since the caller's response does not depend on it.
    """
    if staged.discarded:
        return True
    staged.discarded = True
    try:
        staged.path.unlink()
        logger.info(f"Deleted staged file {staged.path}")
        return True
    except OSError as e:
        logger.error(f"Failed to delete temp file {staged.path}: {str(e)}")
        return False
