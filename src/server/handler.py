"""
HTTP request handler for the catalog server.

Request types:
1) List of all apps (/)
2) A specific app's details (/?app=<filename>)
3) JSON listing (/apps.json)
4) Manifest request (/manifest?appID=...), not implemented
5) A file download, icon or bundle (/<filename>.<ext>)
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, unquote, urlparse

from common.exceptions import (
    AssetNotFound, BundleNotFound, CatalogError, UnsupportedMediaType,
)
from common.logging_config import get_logger

logger = logging.getLogger(__name__)
access_logger = get_logger("access")

STATUS_FOR_ERROR = {
    BundleNotFound: HTTPStatus.NOT_FOUND,
    AssetNotFound: HTTPStatus.NOT_FOUND,
    UnsupportedMediaType: HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
}

CHUNK_SIZE = 64 * 1024


def status_for(error: CatalogError) -> HTTPStatus:
    for error_type, status in STATUS_FOR_ERROR.items():
        if isinstance(error, error_type):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


class CatalogRequestHandler(BaseHTTPRequestHandler):
    server_version = "AppCatalog/1.0"

    def setup(self) -> None:
        # Applies to the connection socket; slow clients are dropped
        self.timeout = self.server.app.config.request_timeout
        super().setup()

    @property
    def app(self):
        return self.server.app

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        access_logger.info(f"{self.address_string()} {format % args}")

    def do_GET(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        query = parse_qs(parsed.query)
        json_response = parsed.path == "/apps.json"
        self._response_started = False

        try:
            if parsed.path == "/" and "app" not in query:
                logger.debug("List of apps requested.")
                self._write_html(self.app.render_list())
            elif parsed.path == "/":
                logger.debug("Specific app detail requested.")
                self._write_html(self.app.render_detail(query["app"][0]))
            elif json_response:
                self._write_body(HTTPStatus.OK, "application/json", self.app.listing_json())
            elif parsed.path == "/healthz":
                self._write_body(HTTPStatus.OK, "application/json", json.dumps({"status": "ok"}))
            elif parsed.path == "/manifest":
                logger.debug("Manifest file requested.")
                self._write_error(
                    HTTPStatus.NOT_IMPLEMENTED, "Manifest generation is not supported.",
                )
            else:
                logger.debug("Specific file requested.")
                self._stream_file(unquote(parsed.path[1:]))
        except CatalogError as e:
            status = status_for(e)
            if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
                logger.error(f"Request {parsed.path} failed: {e}")
            else:
                logger.info(f"Request {parsed.path} rejected: {e}")
            if json_response:
                self._write_body(status, "application/json", json.dumps(e.to_dict()))
            else:
                self._write_error(status, e.message)
        except (BrokenPipeError, ConnectionResetError):
            logger.debug(f"Client disconnected during {parsed.path}")
        except Exception:
            logger.exception(f"Unhandled error serving {parsed.path}")
            if self._response_started:
                # Headers are already out; the body cannot be replaced
                self.close_connection = True
            elif json_response:
                error = {"error": "INTERNAL_ERROR", "message": "Internal server error."}
                self._write_body(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "application/json", json.dumps(error),
                )
            else:
                self._write_error(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error.")

    def _write_body(self, status: HTTPStatus, content_type: str, body: str) -> None:
        data = body.encode("utf-8")
        self._response_started = True
        self.send_response(status)
        self.send_header("Content-Type", f"{content_type}; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _write_html(self, html: str, status: HTTPStatus = HTTPStatus.OK) -> None:
        self._write_body(status, "text/html", html)

    def _write_error(self, status: HTTPStatus, message: str) -> None:
        try:
            html = self.app.render_error(status.value, status.phrase, message)
        except CatalogError as e:
            logger.error(f"Unable to render error page: {e}")
            self._write_body(status, "text/plain", message)
            return
        self._write_html(html, status)

    def _stream_file(self, name: str) -> None:
        path, mime_type = self.app.resolve_asset(name)
        try:
            f = open(path, "rb")
        except OSError as e:
            raise AssetNotFound(name) from e

        with f:
            size = os.fstat(f.fileno()).st_size
            self._response_started = True
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", mime_type)
            self.send_header("Content-Length", str(size))
            if mime_type == "application/octet-stream":
                self.send_header("Content-Disposition", f'attachment; filename="{path.name}"')
            self.end_headers()
            shutil.copyfileobj(f, self.wfile, CHUNK_SIZE)
