"""Makes sure uploaded audio carries a filename extension on disk.

The transcription provider infers the audio codec from the file's
extension, while multipart temp files are written without one. The
extension comes from the original filename first, then from the declared
MIME type; if neither yields one the file is passed along unchanged.
"""

import mimetypes
import os
import re
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from common.logging import setup_logging
from utils import remove_file_quietly

from .models import UploadedAudio

logger = setup_logging()

_FILENAME_EXTENSION = re.compile(r"\.([a-z0-9]+)$", re.IGNORECASE)

MIME_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/wave": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/vorbis": "ogg",
    "audio/aac": "aac",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/flac": "flac",
    "audio/x-flac": "flac",
}

EXTENSION_MIME_TYPES = {
    "mp3": "audio/mpeg",
    "mpeg": "audio/mpeg",
    "mpga": "audio/mpeg",
    "mp4": "audio/mp4",
    "opus": "audio/ogg",
    "oga": "audio/ogg",
    "wav": "audio/wav",
    "webm": "audio/webm",
    "ogg": "audio/ogg",
    "aac": "audio/aac",
    "m4a": "audio/mp4",
    "flac": "audio/flac",
}


def extension_from_filename(file_name: str | None) -> str:
    if not file_name:
        return ""
    match = _FILENAME_EXTENSION.search(file_name)
    return match.group(1).lower() if match else ""


def extension_from_mime(mime_type: str | None) -> str:
    if not mime_type:
        return ""
    base_type = mime_type.split(";", 1)[0].strip().lower()
    return MIME_EXTENSIONS.get(base_type, "")


def resolve_extension(file_name: str | None, mime_type: str | None) -> str:
    """Filename extension wins; the MIME table is only consulted without one."""
    return extension_from_filename(file_name) or extension_from_mime(mime_type)


def mime_type_for_path(
    path: Path | str, declared_type: str | None = None
) -> str | None:
    """
    Maps a resolved audio path back to the MIME type sent upstream.

    Tries the audio extension table, then the platform MIME registry, then
    the type the client declared with the upload.
    """
    known = EXTENSION_MIME_TYPES.get(extension_from_filename(str(path)))
    if known:
        return known
    guessed, _ = mimetypes.guess_type(str(path))
    if guessed:
        return guessed
    if declared_type:
        return declared_type.split(";", 1)[0].strip().lower() or None
    return None


def ensure_extension_on_path(audio: UploadedAudio) -> Path:
    """
    Renames the temp file so it ends with the resolved audio extension.

    Falls back to copy-then-delete when the rename fails (for example across
    devices). Without a resolvable extension the original path is returned.

    Returns:
        The path the audio can now be read from.
    """
    extension = resolve_extension(audio.original_filename, audio.content_type)
    if not extension:
        logger.info(
            "Unable to infer audio extension, using raw path",
            extra={
                "original_filename": audio.original_filename,
                "content_type": audio.content_type,
            },
        )
        return audio.path

    if str(audio.path).lower().endswith(f".{extension}"):
        return audio.path

    new_path = Path(f"{audio.path}.{extension}")
    try:
        os.rename(audio.path, new_path)
        logger.info("Added extension to temp file", extra={"path": str(new_path)})
        return new_path
    except OSError:
        logger.warning(
            "Failed to rename temp file, attempting copy",
            extra={"path": str(audio.path)},
            exc_info=True,
        )

    try:
        shutil.copyfile(audio.path, new_path)
    except OSError:
        remove_file_quietly(new_path)
        raise
    remove_file_quietly(audio.path)
    logger.info("Copied temp file to new path", extra={"path": str(new_path)})
    return new_path


@contextmanager
def readable_audio(audio: UploadedAudio) -> Iterator[Path]:
    """
    Yields a readable, extension-bearing path for the upload.

    The temp file is deleted on exit whether or not the body succeeded.
    """
    path = audio.path
    try:
        path = ensure_extension_on_path(audio)
        yield path
    finally:
        remove_file_quietly(path)
        if path != audio.path:
            remove_file_quietly(audio.path)
