"""
App Catalog Common Utilities

Shared exceptions, logging, decorators and thread-safety helpers.
"""

from .exceptions import (
    CatalogError, BundleError, BundleNotFound, MetadataUnavailable,
    PatternNotMatched, ArchiveError, CatalogDirectoryError, AssetNotFound,
    UnsupportedMediaType, ConfigError, InvalidConfigError, MissingConfigError,
    TemplateError, TemplateNotFoundError, TemplateRenderError,
)
from .decorators import handle_errors, timed
from .logging_config import setup_logging, get_logger
from .singleflight import Memo, SingleFlight, extraction_group

__all__ = [
    # Exceptions
    "CatalogError", "BundleError", "BundleNotFound", "MetadataUnavailable",
    "PatternNotMatched", "ArchiveError", "CatalogDirectoryError", "AssetNotFound",
    "UnsupportedMediaType", "ConfigError", "InvalidConfigError", "MissingConfigError",
    "TemplateError", "TemplateNotFoundError", "TemplateRenderError",
    # Decorators
    "handle_errors", "timed",
    # Logging
    "setup_logging", "get_logger",
    # Thread safety
    "Memo", "SingleFlight", "extraction_group",
]
