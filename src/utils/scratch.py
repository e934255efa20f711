"""
Scratch directory and atomic file operations for the catalog.

Extraction work happens in uniquely named directories next to the target,
and results are moved into place with rename so that readers see either
the old state or the complete new file, never a partial one.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

# Characters of the anchor name kept in scratch directory names
PREFIX_NAME_CHARS = 64


@contextmanager
def scratch_directory(anchor: Union[str, Path]) -> Iterator[Path]:
    """
    Create a uniquely named scratch directory beside ``anchor``.

    The directory lives in the same parent as the anchor file so that a
    later rename onto a sibling path stays on one filesystem. It is removed
    on every exit path, including failures.

    Args:
        anchor: File the scratch directory is created next to

    Yields:
        Path to the scratch directory
    """
    anchor = Path(anchor)
    path = Path(tempfile.mkdtemp(
        dir=anchor.parent,
        prefix=f".{anchor.name[:PREFIX_NAME_CHARS]}_extracted.",
    ))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            logger.warning(f"Scratch directory left behind: {path}")


def atomic_replace(source: Union[str, Path], destination: Union[str, Path], mode: int = 0o644) -> Path:
    """
    Move ``source`` onto ``destination`` atomically.

    On POSIX systems, rename() is atomic within the same filesystem.

    Args:
        source: File to move
        destination: Final path
        mode: File permissions (default 0o644)

    Returns:
        The destination path
    """
    destination = Path(destination)
    os.chmod(source, mode)
    os.replace(source, destination)

    # Sync parent directory (ensures rename is persisted)
    try:
        dir_fd = os.open(str(destination.parent), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError):
        # O_DIRECTORY not available on all platforms
        pass

    return destination
