"""
Bundle Scanner - builds the set of bundles in a catalog directory.

Each scan starts from scratch: bundles are constructed per call and not
shared between requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from common.decorators import handle_errors, timed
from common.exceptions import BundleNotFound, CatalogDirectoryError, CatalogError

from .bundle import AppBundle

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("ipa",)


class BundleScanner:
    """
    Lists the valid bundles in a directory.

    A bundle whose archive cannot be read is logged and left out; only a
    failure to list the directory itself is raised.
    """

    def __init__(self, directory: Path, extensions: Optional[Iterable[str]] = None):
        self.directory = Path(directory)
        self.extensions = tuple(
            ext.lower().lstrip(".") for ext in (extensions or DEFAULT_EXTENSIONS)
        )

    @handle_errors(OSError, default=False, log_level=logging.WARNING,
                   message="Skipping unreadable directory entry")
    def is_candidate(self, path: Path) -> bool:
        """Whether ``path`` is a regular file with a bundle extension."""
        if path.suffix.lower().lstrip(".") not in self.extensions:
            return False
        return path.is_file()

    def candidates(self) -> List[Path]:
        """
        Candidate archive paths, sorted by file name.

        Raises:
            CatalogDirectoryError: If the directory cannot be listed.
        """
        try:
            entries = list(self.directory.iterdir())
        except OSError as e:
            raise CatalogDirectoryError(str(self.directory), cause=e)

        return sorted(
            (path for path in entries if self.is_candidate(path)),
            key=lambda path: path.name,
        )

    def load(self, path: Path) -> Optional[AppBundle]:
        """Construct and fully resolve one bundle, or None if it is unusable."""
        try:
            return AppBundle(path).resolve()
        except (CatalogError, OSError) as e:
            logger.warning(
                f"Unable to load app {path.name}: {e}",
                extra={"extra_data": {"bundle": path.name, "operation": "scan"}},
            )
            return None

    @timed
    def scan(self) -> List[AppBundle]:
        """
        Build every valid bundle in the directory.

        Returns:
            Bundles sorted by file name.
        """
        bundles = []
        for path in self.candidates():
            bundle = self.load(path)
            if bundle is not None:
                bundles.append(bundle)

        logger.info(f"Found {len(bundles)} app(s) in {self.directory}")
        return bundles

    def find(self, file_name: str) -> AppBundle:
        """
        Load a single bundle by file name.

        Raises:
            BundleNotFound: If the name is not a bundle in this directory.
        """
        path = self.directory / file_name
        if Path(file_name).name != file_name or not self.is_candidate(path):
            raise BundleNotFound(file_name)
        return AppBundle(path).resolve()
