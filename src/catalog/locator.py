"""
Bundle Locator - existence checks for bundle archives and cached artifacts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from common.exceptions import BundleNotFound


class BundleLocator:
    """Validates that a path names an existing regular file."""

    @staticmethod
    def exists(path: Union[str, Path]) -> bool:
        """True if ``path`` exists and is a regular file."""
        return Path(path).is_file()

    @classmethod
    def require(cls, path: Union[str, Path]) -> Path:
        """
        Return ``path`` as a Path, or raise if it is not a file.

        Raises:
            BundleNotFound: If nothing usable exists at ``path``.
        """
        if not cls.exists(path):
            raise BundleNotFound(str(path))
        return Path(path)
