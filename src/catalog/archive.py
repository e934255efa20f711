"""
Bundle Archive - random-access view over the zip container of a bundle.
"""

from __future__ import annotations

import logging
import posixpath
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional

from common.exceptions import ArchiveError

logger = logging.getLogger(__name__)

# Well-known entries inside an application bundle
METADATA_ENTRY = "Info.plist"
ARTWORK_ENTRY = "iTunesArtwork"


class BundleArchive:
    """
    Read-only access to the named entries of a bundle archive.

    Use as a context manager so the underlying zip file is always closed:

        with BundleArchive(path) as archive:
            entry = archive.find_entry(METADATA_ENTRY)
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._zip: Optional[zipfile.ZipFile] = None

    def open(self) -> "BundleArchive":
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError(str(self.path), "not a readable zip archive", cause=e)
        return self

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self) -> "BundleArchive":
        return self.open()

    def __exit__(self, *args):
        self.close()

    @property
    def _archive(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise RuntimeError("Archive not open. Use BundleArchive as a context manager.")
        return self._zip

    def entries(self) -> List[zipfile.ZipInfo]:
        """All entries in central directory order."""
        return self._archive.infolist()

    def find_entry(self, name: str) -> Optional[zipfile.ZipInfo]:
        """
        Find the first file entry whose base name is exactly ``name``.

        Matching is case-sensitive and follows the archive's own entry order,
        so the result is deterministic for a given file.
        """
        for info in self.entries():
            if info.is_dir():
                continue
            if posixpath.basename(info.filename) == name:
                return info
        return None

    def extract_entry(self, info: zipfile.ZipInfo, destination: Path) -> Path:
        """
        Extract one entry below ``destination``.

        Returns:
            Path of the extracted file.
        """
        try:
            extracted = self._archive.extract(info, path=str(destination))
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, OSError) as e:
            raise ArchiveError(str(self.path), f"cannot extract {info.filename}", cause=e)
        except RuntimeError as e:
            # zipfile raises RuntimeError for entries that need a password
            raise ArchiveError(str(self.path), f"{info.filename} is encrypted", cause=e)
        logger.debug(f"Extracted {info.filename} from {self.path.name}")
        return Path(extracted)
