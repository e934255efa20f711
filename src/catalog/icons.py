"""
Icon Resolver - locates or populates the cached icon of a bundle.

Each bundle ships its artwork inside the archive, which is expensive to
open. The first resolution extracts it to ``<bundle>.<version>.png`` next
to the archive; later resolutions find that file and never open the
archive again.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
from pathlib import Path
from typing import Optional

from common.decorators import timed
from common.singleflight import Memo, extraction_group
from utils.scratch import scratch_directory, atomic_replace

from .archive import BundleArchive, ARTWORK_ENTRY
from .fields import FieldExtractor
from .locator import BundleLocator

logger = logging.getLogger(__name__)

DEFAULT_ICON = "default"

# Longest file name most filesystems accept, in bytes
NAME_MAX = 255
MAX_VERSION_BYTES = 64
DIGEST_LENGTH = 16

_UNSAFE_CHARACTERS = re.compile(r"[\x00-\x1f\x7f/\\\ud800-\udfff]")


def version_component(version: str, budget: int = MAX_VERSION_BYTES) -> Optional[str]:
    """
    Turn a version string into something safe to embed in a file name.

    Control characters, unpaired surrogates and path separators become ``_``. A version longer
    than ``budget`` bytes is replaced by a digest of the original, so
    distinct versions still get distinct names. Returns None if not even
    the digest fits.
    """
    component = _UNSAFE_CHARACTERS.sub("_", version)
    if len(component.encode("utf-8")) <= budget:
        return component
    if budget < DIGEST_LENGTH:
        return None
    digest = hashlib.sha256(version.encode("utf-8", "surrogatepass")).hexdigest()
    return digest[:DIGEST_LENGTH]


def icon_cache_path(location: Path, version: str) -> Optional[Path]:
    """
    Conventional cache path for the icon of a bundle version.

    Returns None when the archive name is too long to leave room for any
    version suffix.
    """
    location = Path(location)
    used = len(os.fsencode(f"{location.name}..png"))
    component = version_component(version, min(MAX_VERSION_BYTES, NAME_MAX - used))
    if component is None:
        return None
    return location.with_name(f"{location.name}.{component}.png")


class IconResolver:
    """Resolves the icon reference of one bundle."""

    def __init__(self, location: Path, fields: FieldExtractor):
        self.location = Path(location)
        self.fields = fields
        self._icon: Memo[str] = Memo()

    @property
    def cache_path(self) -> Optional[Path]:
        return icon_cache_path(self.location, self.fields.version)

    def resolve_icon_path(self) -> str:
        """
        Return the cached icon path, or DEFAULT_ICON if the bundle has no artwork.

        The result is memoized for the lifetime of the resolver.
        """
        return self._icon.get(self._resolve)

    def _resolve(self) -> str:
        cache_path = self.cache_path
        if cache_path is None:
            logger.warning(f"{self.location.name}: name too long for an icon cache file")
            return DEFAULT_ICON
        if BundleLocator.exists(cache_path):
            return str(cache_path)

        key = ("icon", str(cache_path.resolve()))
        return extraction_group().do(key, lambda: self._populate(cache_path))

    @timed
    def _populate(self, cache_path: Path) -> str:
        # Another caller may have finished populating while we waited
        if BundleLocator.exists(cache_path):
            return str(cache_path)

        with BundleArchive(self.location) as archive:
            info = archive.find_entry(ARTWORK_ENTRY)
            if info is None:
                logger.info(f"{self.location.name}: no {ARTWORK_ENTRY}, using default icon")
                return DEFAULT_ICON

            with scratch_directory(self.location) as scratch:
                extracted = archive.extract_entry(info, scratch)
                atomic_replace(extracted, cache_path)

        logger.info(f"Cached icon for {self.location.name} at {cache_path.name}")
        return str(cache_path)
