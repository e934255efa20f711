"""
Catalog App - the page and asset logic behind the HTTP handler.

Every listing rescans the bundle directory; bundles are not shared
between requests.
"""

from __future__ import annotations

import json
import logging
from http.server import HTTPServer
from pathlib import Path
from socketserver import ThreadingMixIn
from typing import Dict, Optional, Tuple

from catalog.scanner import BundleScanner
from common.exceptions import AssetNotFound, UnsupportedMediaType

from .config import CatalogConfig
from .handler import CatalogRequestHandler
from .templates import TemplateLoader

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES: Dict[str, str] = {
    "png": "image/png",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "ico": "image/x-icon",
    "ipa": "application/octet-stream",
}


class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True

    def __init__(self, server_address, handler_class, app: "CatalogApp"):
        self.app = app
        super().__init__(server_address, handler_class)


class CatalogApp:
    """Builds catalog pages and resolves downloadable assets."""

    def __init__(self, config: CatalogConfig, templates: Optional[TemplateLoader] = None):
        self.config = config
        extra = [config.template_dir] if config.template_dir else None
        self.templates = templates or TemplateLoader(extra)

    def scanner(self) -> BundleScanner:
        return BundleScanner(self.config.bundle_dir, self.config.extensions)

    def render_list(self) -> str:
        """HTML listing of every valid bundle."""
        apps = self.scanner().scan()
        return self.templates.render("app_list.html.j2", apps=apps)

    def render_detail(self, file_name: str) -> str:
        """
        HTML detail page for one bundle.

        Raises:
            BundleNotFound: If the bundle does not exist.
        """
        app = self.scanner().find(file_name)
        return self.templates.render("app_detail.html.j2", app=app)

    def render_error(self, status: int, reason: str, message: str) -> str:
        return self.templates.render(
            "error.html.j2", status=status, reason=reason, message=message,
        )

    def listing_json(self) -> str:
        """JSON listing of every valid bundle."""
        apps = self.scanner().scan()
        return json.dumps({"apps": [app.to_dict() for app in apps]}, indent=2)

    def resolve_asset(self, name: str) -> Tuple[Path, str]:
        """
        Map a request file name to a file in the bundle directory.

        Returns:
            (path, content type)

        Raises:
            UnsupportedMediaType: If the extension is not served.
            AssetNotFound: If the file does not exist or the name leaves the directory.
        """
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise AssetNotFound(name)

        extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
        mime_type = SUPPORTED_MIME_TYPES.get(extension)
        if mime_type is None:
            raise UnsupportedMediaType(extension or name)

        path = self.config.bundle_dir / name
        if not path.is_file():
            raise AssetNotFound(name)
        return path, mime_type

    def create_server(self) -> ThreadedHTTPServer:
        server = ThreadedHTTPServer(
            (self.config.host, self.config.port), CatalogRequestHandler, self,
        )
        logger.info(
            f"Serving {self.config.bundle_dir} on http://{self.config.host}:{server.server_port}/"
        )
        return server
