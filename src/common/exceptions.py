"""
App Catalog Exception Hierarchy

Provides clear, actionable error messages with structured information
for logging, HTTP error responses, and programmatic error handling.
"""

from typing import Optional, Dict, Any


class CatalogError(Exception):
    """
    Base exception for all app catalog errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context as key-value pairs
        cause: Original exception that caused this error
        recoverable: Whether the error is recoverable
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable

    def __str__(self):
        s = f"[{self.code}] {self.message}"
        if self.details:
            s += f" (details: {self.details})"
        if self.cause:
            s += f" caused by: {self.cause}"
        return s

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Bundle errors
# =============================================================================

class BundleError(CatalogError):
    """Base for errors raised while reading a bundle archive."""
    pass


class BundleNotFound(BundleError):
    """Bundle archive does not exist."""
    def __init__(self, path: str):
        super().__init__(
            f"Application file not found: {path}",
            code="BUNDLE_NOT_FOUND",
            details={"path": str(path)},
            recoverable=False,
        )


class MetadataUnavailable(BundleError):
    """The metadata entry is missing from the archive or cannot be parsed."""
    def __init__(self, path: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"No usable metadata in {path}: {reason}",
            code="METADATA_UNAVAILABLE",
            details={"path": str(path), "reason": reason},
            cause=cause,
        )


class PatternNotMatched(BundleError):
    """The metadata document exists but does not carry the requested key."""
    def __init__(self, key: str):
        super().__init__(
            f"Metadata field not present: {key}",
            code="FIELD_UNAVAILABLE",
            details={"key": key},
        )


class ArchiveError(BundleError):
    """The archive cannot be opened or an entry cannot be extracted."""
    def __init__(self, path: str, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Unable to read archive {path}: {reason}",
            code="ARCHIVE_UNREADABLE",
            details={"path": str(path), "reason": reason},
            cause=cause,
            recoverable=False,
        )


# =============================================================================
# Catalog / serving errors
# =============================================================================

class CatalogDirectoryError(CatalogError):
    """The bundle directory itself cannot be listed."""
    def __init__(self, directory: str, cause: Optional[Exception] = None):
        super().__init__(
            f"Unable to read bundle directory {directory}",
            code="DIRECTORY_UNREADABLE",
            details={"directory": str(directory)},
            cause=cause,
            recoverable=False,
        )


class AssetNotFound(CatalogError):
    """Requested file is not available for download."""
    def __init__(self, name: str):
        super().__init__(
            f"File not found: {name}",
            code="ASSET_NOT_FOUND",
            details={"name": name},
        )


class UnsupportedMediaType(CatalogError):
    """Requested file extension is not served."""
    def __init__(self, extension: str):
        super().__init__(
            f"File format {extension} is not supported by this server.",
            code="UNSUPPORTED_MEDIA_TYPE",
            details={"extension": extension},
        )


# =============================================================================
# Configuration errors
# =============================================================================

class ConfigError(CatalogError):
    """Base for configuration errors."""
    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration."""
    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration: {field}={value}: {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value), "reason": reason},
        )


class MissingConfigError(ConfigError):
    """Required configuration missing."""
    def __init__(self, field: str):
        super().__init__(
            f"Missing required configuration: {field}",
            code="MISSING_CONFIG",
            details={"field": field},
        )


# =============================================================================
# Template errors
# =============================================================================

class TemplateError(CatalogError):
    """Template-related errors."""
    pass


class TemplateNotFoundError(TemplateError):
    """Template not found."""
    def __init__(self, template_name: str):
        super().__init__(
            f"Template not found: {template_name}",
            code="TEMPLATE_NOT_FOUND",
            details={"template": template_name},
        )


class TemplateRenderError(TemplateError):
    """Template rendering failed."""
    def __init__(self, template_name: str, reason: str):
        super().__init__(
            f"Failed to render template '{template_name}': {reason}",
            code="TEMPLATE_RENDER_FAILED",
            details={"template": template_name, "reason": reason},
        )
