"""ZIP archive assembly for generated kits."""

import io
import logging
import zipfile
from typing import Dict, Iterable

from contracts import FileData
from errors import ArchiveError

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Forward slashes only, no leading slash."""
    return path.replace("\\", "/").lstrip("/")


def assemble(files: Iterable[FileData]) -> bytes:
    """Pack files into a deflate-compressed ZIP archive.

    Entries keep the order in which their path first appears; a later file
    with the same normalized path replaces the earlier content. Membership is
    deterministic for a given input, the bytes are not (entry timestamps).

    Raises:
        ArchiveError: If the archive cannot be written.
    """
    entries: Dict[str, str] = {}
    for file in files:
        clean_path = normalize_path(file.path)
        if not clean_path:
            logger.warning("Skipping archive entry with empty path")
            continue
        entries[clean_path] = file.content

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for clean_path, content in entries.items():
                zf.writestr(clean_path, content)
                logger.debug("Added to zip: %s", clean_path)
    except (OSError, ValueError, MemoryError, zipfile.BadZipFile) as e:
        logger.error("Error generating zip file: %s", e)
        raise ArchiveError(str(e)) from e

    return buffer.getvalue()
