"""Middleware persisting an uploaded file."""

from __future__ import annotations

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import Response

from ..origin import CallNext
from .middleware import Middleware

logger = logging.getLogger("dualserve.upload")


@dataclass(frozen=True)
class UploadedFile:
    """
    Metadata of a file persisted by UploadMiddleware.

    Attributes:
        field_name: Form field the file was sent in
        original_name: File name given by the client
        content_type: Content type given by the client
        destination: Directory the file was stored in
        path: Full path of the stored file
        size: Size in bytes
    """

    field_name: str
    original_name: str | None
    content_type: str | None
    destination: Path
    path: Path
    size: int


def _store(upload: UploadFile, destination: Path) -> Path:
    """Copy an uploaded file to a fresh, randomly named file."""
    destination.mkdir(parents=True, exist_ok=True)
    target = destination / uuid.uuid4().hex
    upload.file.seek(0)
    with open(target, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    return target


class UploadMiddleware(Middleware):
    """
    Stores the single file sent in a form field and records it on the request.

    After this middleware runs, ``request.state.file`` holds an UploadedFile,
    or None when the request carried no file in that field.
    """

    __slots__ = ("_dest", "_field_name")

    def __init__(self, dest: str | Path, field_name: str) -> None:
        """
        Args:
            dest: Directory to store uploaded files in
            field_name: Name of the form field containing the file
        """
        self._dest = Path(dest)
        self._field_name = field_name

        async def store_upload(request: Request, call_next: CallNext) -> Response:
            request.state.file = None
            content_type = request.headers.get("content-type", "")
            if content_type.startswith("multipart/form-data"):
                # read the body first so it stays available downstream
                await request.body()
                async with request.form() as form:
                    upload = form.get(self._field_name)
                    if isinstance(upload, UploadFile):
                        path = await run_in_threadpool(_store, upload, self._dest)
                        request.state.file = UploadedFile(
                            field_name=self._field_name,
                            original_name=upload.filename,
                            content_type=upload.content_type,
                            destination=self._dest,
                            path=path,
                            size=path.stat().st_size,
                        )
                        logger.debug(f"stored upload '{upload.filename}' as {path}")
            return await call_next(request)

        super().__init__(store_upload)

    @property
    def dest(self) -> Path:
        """Directory uploaded files are stored in."""
        return self._dest

    @property
    def field_name(self) -> str:
        """Form field holding the file."""
        return self._field_name
