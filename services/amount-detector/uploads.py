"""Scoped temp-file storage for uploaded documents.

Every upload is written under a unique name in the upload directory and
removed when the ``stored_upload`` block exits, whatever the outcome.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UploadedDocument:
    path: Path
    mime_type: str
    filename: str | None
    size: int

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


@asynccontextmanager
async def stored_upload(
    upload: UploadFile,
    directory: str | Path,
    default_mime_type: str = "image/jpeg",
) -> AsyncIterator[UploadedDocument]:
    """Persist ``upload`` to ``directory`` for the duration of the block."""
    content = await upload.read()
    path = Path(directory) / uuid.uuid4().hex
    document = UploadedDocument(
        path=path,
        mime_type=upload.content_type or default_mime_type,
        filename=upload.filename,
        size=len(content),
    )

    try:
        await asyncio.to_thread(_write_file, path, content)
        yield document
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not delete temp file %s", path)
