"""
App Catalog Server

Serves the bundle listing, detail pages, icons and bundle downloads over HTTP.
"""

from .app import CatalogApp, ThreadedHTTPServer, SUPPORTED_MIME_TYPES
from .config import CatalogConfig, find_config, read_config_data

__all__ = [
    "CatalogApp",
    "CatalogConfig",
    "ThreadedHTTPServer",
    "SUPPORTED_MIME_TYPES",
    "find_config",
    "read_config_data",
]
