"""Decodes multipart uploads into form fields and spooled temp files."""

import os
import tempfile
from pathlib import Path

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from common.logging import setup_logging
from domain.models import UploadedAudio
from exceptions import ValidationError
from utils import remove_file_quietly

logger = setup_logging()

_COPY_CHUNK_SIZE = 1024 * 1024
# Room for boundaries, part headers and the players field on top of the audio.
_FORM_OVERHEAD_BYTES = 1024 * 1024


class IngestedForm:
    """Decoded multipart body: text fields plus uploads spooled to disk."""

    def __init__(
        self,
        fields: dict[str, list[str]],
        files: dict[str, list[UploadedAudio]],
    ):
        self.fields = fields
        self.files = files

    def get_all(self, name: str) -> list[str]:
        return list(self.fields.get(name, []))

    def take_file(self, *names: str) -> UploadedAudio | None:
        """
        Detaches the first upload found under any of ``names``.

        The caller becomes responsible for deleting the returned file.
        """
        for name in names:
            uploads = self.files.get(name)
            if uploads:
                return uploads.pop(0)
        return None

    def discard(self) -> None:
        """Deletes every upload still owned by the form."""
        for uploads in self.files.values():
            for upload in uploads:
                remove_file_quietly(upload.path)
        self.files = {}


class MultipartIngester:
    """Parses multipart/form-data requests and spools file parts to temp files."""

    def __init__(self, max_file_size: int, temp_dir: Path | None = None):
        self._max_file_size = max_file_size
        self._temp_dir = temp_dir

    async def ingest(self, request: Request) -> IngestedForm:
        """
        Reads the request body as multipart form data.

        Returns:
            IngestedForm with string fields and uploads copied to temp paths.

        Raises:
            ValidationError: If the body is not multipart or a file is too large.
        """
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith("multipart/form-data"):
            raise ValidationError("Request body must be multipart/form-data")

        body_limit = self._max_file_size + _FORM_OVERHEAD_BYTES
        declared_length = request.headers.get("content-length")
        if declared_length is not None:
            try:
                too_large = int(declared_length) > body_limit
            except ValueError as e:
                raise ValidationError("Invalid Content-Length header", cause=e) from e
            if too_large:
                raise ValidationError(self._too_large_message())

        bounded = Request(request.scope, receive=self._bounded_receive(request, body_limit))
        try:
            form = await bounded.form()
        except MultiPartException as e:
            raise ValidationError(f"Invalid multipart body: {e.message}", cause=e) from e
        except HTTPException as e:
            raise ValidationError(f"Invalid multipart body: {e.detail}", cause=e) from e

        ingested = IngestedForm(fields={}, files={})
        try:
            for key, value in form.multi_items():
                if isinstance(value, UploadFile):
                    upload = await run_in_threadpool(self._spool_to_disk, value)
                    ingested.files.setdefault(key, []).append(upload)
                else:
                    ingested.fields.setdefault(key, []).append(value)
        except Exception:
            ingested.discard()
            raise
        finally:
            await form.close()

        logger.info(
            "Parsed multipart payload",
            extra={
                "field_keys": list(ingested.fields),
                "file_keys": list(ingested.files),
            },
        )
        return ingested

    def _spool_to_disk(self, upload: UploadFile) -> UploadedAudio:
        """Copies an upload to an extensionless temp file, enforcing the size limit."""
        fd, temp_name = tempfile.mkstemp(prefix="upload_", dir=self._temp_dir)
        size = 0
        try:
            with os.fdopen(fd, "wb") as target:
                upload.file.seek(0)
                while True:
                    chunk = upload.file.read(_COPY_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self._max_file_size:
                        raise ValidationError(self._too_large_message())
                    target.write(chunk)
        except Exception:
            remove_file_quietly(temp_name)
            raise

        return UploadedAudio(
            path=Path(temp_name),
            original_filename=upload.filename or None,
            content_type=upload.content_type or None,
            size=size,
        )

    def _too_large_message(self) -> str:
        return f"Uploaded file exceeds the maximum size of {self._max_file_size} bytes"

    def _bounded_receive(self, request: Request, limit: int):
        """Wraps the ASGI receive channel so the body cannot grow past ``limit``."""
        receive = request.receive
        received = 0

        async def bounded_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise ValidationError(self._too_large_message())
            return message

        return bounded_receive
