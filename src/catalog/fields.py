"""
Field Extractor - derives the public attributes of a bundle.

Metadata-backed fields read the Info.plist document and fall back when a key
or the whole document is absent. Size and timestamps come from stat and do
not depend on the document.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from common.exceptions import PatternNotMatched
from common.singleflight import Memo

from .metadata import MetadataStore

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

KEY_VERSION = "CFBundleVersion"
KEY_SHORT_VERSION = "CFBundleShortVersionString"
KEY_EXECUTABLE = "CFBundleExecutable"
KEY_IDENTIFIER = "CFBundleIdentifier"


def name_from_filename(file_name: str) -> str:
    """
    Derive a display name from a reverse-DNS style file name.

    ``com.acme.Widget.ipa`` gives ``Widget``. A name without any dot is
    returned unchanged.
    """
    components = file_name.split(".")
    if len(components) > 1:
        return components[-2]
    return file_name


class FieldExtractor:
    """Memoized accessors for every derived bundle field."""

    def __init__(self, location: Path, metadata: MetadataStore):
        self.location = Path(location)
        self.metadata = metadata

        self._version: Memo[str] = Memo()
        self._short_version: Memo[str] = Memo()
        self._display_name: Memo[str] = Memo()
        self._bundle_id: Memo[str] = Memo()
        self._stat: Memo[os.stat_result] = Memo()

    def _lookup(self, key: str, fallback: str) -> str:
        document = self.metadata.document
        if not document.available:
            return fallback
        try:
            return document.require(key)
        except PatternNotMatched:
            logger.debug(f"{self.location.name}: {key} missing, using {fallback!r}")
            return fallback

    @property
    def version(self) -> str:
        return self._version.get(lambda: self._lookup(KEY_VERSION, UNKNOWN))

    @property
    def short_version(self) -> str:
        """Marketing version, or the build version when not declared."""
        return self._short_version.get(
            lambda: self._lookup(KEY_SHORT_VERSION, self.version)
        )

    @property
    def display_name(self) -> str:
        return self._display_name.get(
            lambda: self._lookup(KEY_EXECUTABLE, name_from_filename(self.location.name))
        )

    @property
    def bundle_id(self) -> str:
        return self._bundle_id.get(lambda: self._lookup(KEY_IDENTIFIER, UNKNOWN))

    @property
    def stat(self) -> os.stat_result:
        return self._stat.get(lambda: os.stat(self.location))

    @property
    def size_bytes(self) -> int:
        return self.stat.st_size

    @property
    def created_at(self) -> datetime:
        # st_ctime is the inode change time on POSIX and creation time on Windows
        return datetime.fromtimestamp(self.stat.st_ctime)

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.stat.st_mtime)
