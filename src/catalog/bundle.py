"""
App Bundle - read-only view of one application archive.

Wraps the locator, metadata store, field extractor and icon resolver of a
single archive behind named accessors for the serving layer.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

from .fields import FieldExtractor
from .icons import IconResolver, DEFAULT_ICON
from .locator import BundleLocator
from .metadata import InfoDocument, MetadataStore


class AppBundle:
    """
    An installable application bundle found on disk.

    Every derived field is computed on first access and cached for the
    lifetime of the instance; the archive is assumed not to change while
    the process runs.

    Raises:
        BundleNotFound: From the constructor, if ``location`` is not a file.
    """

    def __init__(self, location: Union[str, Path]):
        self.location = BundleLocator.require(location)
        self.metadata = MetadataStore(self.location)
        self.fields = FieldExtractor(self.location, self.metadata)
        self.icons = IconResolver(self.location, self.fields)

    def __repr__(self):
        return f"AppBundle({str(self.location)!r})"

    @property
    def file_name(self) -> str:
        return self.location.name

    @property
    def download_path(self) -> str:
        return str(self.location)

    @property
    def document(self) -> InfoDocument:
        return self.metadata.document

    @property
    def display_name(self) -> str:
        return self.fields.display_name

    @property
    def version(self) -> str:
        return self.fields.version

    @property
    def short_version(self) -> str:
        return self.fields.short_version

    @property
    def bundle_id(self) -> str:
        return self.fields.bundle_id

    @property
    def icon_path(self) -> str:
        return self.icons.resolve_icon_path()

    @property
    def has_icon(self) -> bool:
        return self.icon_path != DEFAULT_ICON

    @property
    def icon_name(self) -> str:
        """File name of the cached icon, or the default sentinel."""
        icon = self.icon_path
        if icon == DEFAULT_ICON:
            return icon
        return Path(icon).name

    @property
    def size_bytes(self) -> int:
        return self.fields.size_bytes

    @property
    def size_str(self) -> str:
        size = self.size_bytes
        if size >= 1024 * 1024:
            return f"{size / (1024 * 1024):.1f} MB"
        elif size >= 1024:
            return f"{size / 1024:.1f} KB"
        return f"{size} B"

    @property
    def created_at(self) -> datetime:
        return self.fields.created_at

    @property
    def modified_at(self) -> datetime:
        return self.fields.modified_at

    def resolve(self) -> "AppBundle":
        """
        Compute every field now.

        Archive faults surface here instead of halfway through rendering.
        """
        self.to_dict()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "file_name": self.file_name,
            "name": self.display_name,
            "version": self.version,
            "short_version": self.short_version,
            "bundle_id": self.bundle_id,
            "icon": self.icon_name,
            "size_bytes": self.size_bytes,
            "created_at": self.created_at.isoformat(),
            "modified_at": self.modified_at.isoformat(),
            "metadata_available": self.document.available,
        }
