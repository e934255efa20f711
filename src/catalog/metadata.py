"""
Metadata Store - lazy loading of the Info.plist document embedded in a bundle.

The document is read once per bundle. A missing or unparsable Info.plist is
not an error for callers: it is recorded as an absent document and every
field extractor applies its own fallback.
"""

from __future__ import annotations

import logging
import plistlib
from pathlib import Path
from typing import Any, Dict, Optional
from xml.parsers.expat import ExpatError

from common.decorators import timed
from common.exceptions import MetadataUnavailable, PatternNotMatched
from common.singleflight import Memo, extraction_group
from utils.scratch import scratch_directory

from .archive import BundleArchive, METADATA_ENTRY

logger = logging.getLogger(__name__)


class InfoDocument:
    """
    Parsed bundle metadata, or the explicit absence of it.

    Attributes:
        available: Whether a metadata document was found and parsed
        values: Top-level keys of the property list
        entry_name: Archive entry the document was read from
    """

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        entry_name: Optional[str] = None,
        available: bool = True,
    ):
        self.values = values or {}
        self.entry_name = entry_name
        self.available = available

    @classmethod
    def absent(cls) -> "InfoDocument":
        return cls(available=False)

    @classmethod
    def parse(cls, data: bytes, entry_name: Optional[str] = None) -> "InfoDocument":
        """
        Parse XML or binary property list data.

        Raises:
            ValueError: If the data is not a dictionary property list.
        """
        try:
            values = plistlib.loads(data)
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise ValueError(f"invalid property list: {e}") from e
        if not isinstance(values, dict):
            raise ValueError("property list root is not a dictionary")
        return cls(values=values, entry_name=entry_name)

    def require(self, key: str) -> str:
        """
        Return the non-empty string stored under ``key``.

        Raises:
            PatternNotMatched: If the document is absent or the key does not
                hold a non-empty string.
        """
        value = self.values.get(key)
        if not isinstance(value, str) or not value.strip():
            raise PatternNotMatched(key)
        return value.strip()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the string under ``key`` or ``default``."""
        try:
            return self.require(key)
        except PatternNotMatched:
            return default

    def __repr__(self):
        if not self.available:
            return "InfoDocument(absent)"
        return f"InfoDocument({self.entry_name!r}, {len(self.values)} keys)"


class MetadataStore:
    """
    Loads and caches the metadata document of one bundle.

    Archive faults (unreadable zip, failed extraction) propagate as
    ArchiveError; a missing or malformed Info.plist does not.
    """

    def __init__(self, location: Path):
        self.location = Path(location)
        self._document: Memo[InfoDocument] = Memo()
        self._flight_key = ("metadata", str(self.location.resolve()))

    @timed
    def load_metadata(self) -> InfoDocument:
        """
        Scan the archive and parse the first Info.plist entry.

        Raises:
            MetadataUnavailable: If the entry is missing or does not parse.
            ArchiveError: If the archive cannot be read.
        """
        with BundleArchive(self.location) as archive:
            info = archive.find_entry(METADATA_ENTRY)
            if info is None:
                raise MetadataUnavailable(str(self.location), f"no {METADATA_ENTRY} entry")

            with scratch_directory(self.location) as scratch:
                extracted = archive.extract_entry(info, scratch)
                data = extracted.read_bytes()

        try:
            document = InfoDocument.parse(data, entry_name=info.filename)
        except ValueError as e:
            raise MetadataUnavailable(str(self.location), str(e), cause=e)

        logger.debug(f"Loaded metadata for {self.location.name} from {info.filename}")
        return document

    def _load_or_absent(self) -> InfoDocument:
        try:
            return self.load_metadata()
        except MetadataUnavailable as e:
            logger.info(f"{self.location.name}: {e.message}")
            return InfoDocument.absent()

    @property
    def document(self) -> InfoDocument:
        """The parsed document, loaded on first access."""
        return self._document.get(
            lambda: extraction_group().do(self._flight_key, self._load_or_absent)
        )

    @property
    def loaded(self) -> bool:
        return self._document.resolved
