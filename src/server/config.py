"""
Catalog server configuration.

Settings are read from a JSON file. The keys of the original
``appCatalog.conf`` format (``ipaDir``, ``serverPort``) are still accepted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from common.exceptions import InvalidConfigError, MissingConfigError

logger = logging.getLogger(__name__)

CONFIG_PATHS = [
    Path("appcatalog.json"),
    Path("appCatalog.conf"),
    Path.home() / ".config/appcatalog/appcatalog.json",
    Path("/etc/appcatalog/appcatalog.json"),
]

KEY_ALIASES = {
    "ipaDir": "bundle_dir",
    "serverPort": "port",
    "serverHost": "host",
}


@dataclass
class CatalogConfig:
    """Settings for the catalog server."""
    bundle_dir: Path
    host: str = "0.0.0.0"
    port: int = 8081
    request_timeout: float = 30.0
    extensions: List[str] = field(default_factory=lambda: ["ipa"])
    template_dir: Optional[Path] = None
    log_file: Optional[Path] = None
    json_logs: bool = False
    access_log: bool = True

    def __post_init__(self):
        self.bundle_dir = Path(self.bundle_dir)
        if self.template_dir is not None:
            self.template_dir = Path(self.template_dir)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        self.validate()

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            InvalidConfigError: On the first invalid field.
        """
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise InvalidConfigError("port", self.port, "must be an integer")
        if not 0 <= self.port <= 65535:
            raise InvalidConfigError("port", self.port, "must be between 0 and 65535")
        if not isinstance(self.request_timeout, (int, float)) or self.request_timeout <= 0:
            raise InvalidConfigError("request_timeout", self.request_timeout, "must be positive")
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bundle_dir": str(self.bundle_dir),
            "host": self.host,
            "port": self.port,
            "request_timeout": self.request_timeout,
            "extensions": list(self.extensions),
            "template_dir": str(self.template_dir) if self.template_dir else None,
            "log_file": str(self.log_file) if self.log_file else None,
            "json_logs": self.json_logs,
            "access_log": self.access_log,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogConfig":
        """
        Create from dictionary.

        Raises:
            MissingConfigError: If no bundle directory is given.
            InvalidConfigError: If a value is out of range.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            name = KEY_ALIASES.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown configuration key: {key}")
                continue
            values[name] = value

        if not values.get("bundle_dir"):
            raise MissingConfigError("bundle_dir")

        return cls(**values)


def find_config() -> Optional[Path]:
    """Return the first existing file from CONFIG_PATHS."""
    for path in CONFIG_PATHS:
        if path.is_file():
            return path
    return None


def read_config_data(path: Path) -> Dict[str, Any]:
    """
    Read the raw key/value pairs of a JSON configuration file.

    Raises:
        InvalidConfigError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise InvalidConfigError("config", str(path), f"cannot read file: {e}")
    except json.JSONDecodeError as e:
        raise InvalidConfigError("config", str(path), f"invalid JSON: {e}")

    if not isinstance(data, dict):
        raise InvalidConfigError("config", str(path), "top level must be an object")
    return data
