"""Filesystem helpers for request-scoped temp files."""

import os
from pathlib import Path

from common.logging import setup_logging

logger = setup_logging()


def remove_file_quietly(path: Path | str | None) -> None:
    """Deletes a temp file, logging instead of raising on failure."""
    if path is None:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError:
        logger.warning("Failed to delete temp file", extra={"path": str(path)})
