"""
App Catalog Core

Reads application bundle archives and derives their name, version,
identifier, icon and file statistics.
"""

from .archive import BundleArchive, METADATA_ENTRY, ARTWORK_ENTRY
from .bundle import AppBundle
from .fields import FieldExtractor, UNKNOWN, name_from_filename
from .icons import IconResolver, DEFAULT_ICON, icon_cache_path
from .locator import BundleLocator
from .metadata import InfoDocument, MetadataStore
from .scanner import BundleScanner

__all__ = [
    "AppBundle",
    "BundleArchive",
    "BundleLocator",
    "BundleScanner",
    "FieldExtractor",
    "IconResolver",
    "InfoDocument",
    "MetadataStore",
    "METADATA_ENTRY",
    "ARTWORK_ENTRY",
    "DEFAULT_ICON",
    "UNKNOWN",
    "icon_cache_path",
    "name_from_filename",
]
