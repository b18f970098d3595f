"""Minimal HTTP API for DMN validation.

POST /v1/dmns/validate accepts a DMN document and returns the validation
report verbatim with status 200, whether or not the document is valid.
Transport-level errors are reserved for malformed requests.
"""

import json
import logging
import threading
import time
import uuid
from datetime import UTC, datetime
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from dmnlint import __version__
from dmnlint.config import DmnLintConfig
from dmnlint.validation import DmnValidator

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"
VALIDATE_PATH = "/v1/dmns/validate"

JSON_CONTENT_TYPE = "application/json"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
}


class ApiError(Exception):
    """Request failure carrying the HTTP status and a machine-readable type."""

    def __init__(self, status_code: int, error_type: str, detail: str):
        self.status_code = status_code
        self.error_type = error_type
        self.detail = detail
        super().__init__(f"{error_type}: {detail}")

    def to_body(self, request_path: str) -> dict:
        return {
            "error": self.error_type,
            "detail": self.detail,
            "traceId": uuid.uuid4().hex,
            "timestamp": datetime.now(UTC).isoformat(),
            "requestPath": request_path,
        }


class DmnLintApiHandler(BaseHTTPRequestHandler):
    """One instance per request; the owning ``DmnLintApiServer`` holds the config."""

    routes = {
        (HEALTH_PATH, "GET"): "_handle_health",
        (VALIDATE_PATH, "POST"): "_handle_validate",
    }

    def __init__(self, api_server: "DmnLintApiServer", *args):
        self.api_server = api_server
        super().__init__(*args)

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_DELETE(self):
        self._dispatch("DELETE")

    def do_PATCH(self):
        self._dispatch("PATCH")

    def do_OPTIONS(self):
        self._write(200, b"", content_type=None)

    def _dispatch(self, method: str) -> None:
        started = time.perf_counter()
        path = urlsplit(self.path).path
        status = 500
        try:
            handler_name = self.routes.get((path, method))
            if handler_name is None:
                if any(route_path == path for route_path, _ in self.routes):
                    raise ApiError(405, "method_not_allowed", f"{method} is not supported on {path}")
                raise ApiError(404, "not_found", f"No endpoint at {path}")
            status = getattr(self, handler_name)()
        except ApiError as e:
            status = e.status_code
            self._write_json(e.status_code, e.to_body(self.path))
        except Exception:
            logger.exception(f"Request {method} {self.path} failed")
            self._write_json(500, ApiError(500, "internal", "Internal server error").to_body(self.path))
        finally:
            if self.api_server.verbose:
                logger.info(f"{method} {self.path} -> {status} "
                            f"({(time.perf_counter() - started) * 1000:.0f}ms, {self.client_address[0]})")

    def _handle_health(self) -> int:
        self._write_json(200, {
            "status": "ok",
            "version": __version__,
            "timestamp": datetime.now(UTC).isoformat(),
        })
        return 200

    def _handle_validate(self) -> int:
        content = self._read_document()
        result = DmnValidator(self.api_server.config).validate(content, source="<upload>")
        self._write_json(200, result.to_dict())
        return 200

    def _read_document(self) -> str:
        """DMN text from a JSON ``{"content": ...}`` body or a raw XML body."""
        declared_length = self.headers.get("Content-Length", "0")
        try:
            length = int(declared_length)
        except ValueError:
            raise ApiError(400, "bad_request", f"Content-Length is not a number: {declared_length!r}")
        if length <= 0:
            raise ApiError(400, "bad_request", "Request body is empty; send a DMN document")

        limit = self.api_server.config.validation.max_document_bytes
        if length > limit:
            raise ApiError(413, "payload_too_large", f"Body of {length} bytes exceeds the {limit} byte limit")

        body = self.rfile.read(length)
        media_type = self.headers.get_content_type()
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ApiError(400, "bad_request", f"Body is not valid UTF-8: {e}")

        if media_type == JSON_CONTENT_TYPE:
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as e:
                raise ApiError(400, "bad_request", f"Body is not valid JSON: {e}")
            text = payload.get("content") if isinstance(payload, dict) else None
            if not isinstance(text, str):
                raise ApiError(400, "bad_request", "JSON body must contain a 'content' string")

        if not text.strip():
            raise ApiError(400, "bad_request", "Document is empty")
        return text

    def _write_json(self, status: int, payload: dict) -> None:
        data = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
        self._write(status, data, content_type=f"{JSON_CONTENT_TYPE}; charset=utf-8")

    def _write(self, status: int, data: bytes, content_type: str | None) -> None:
        try:
            self.send_response(status)
            if content_type:
                self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(data)))
            for name, value in CORS_HEADERS.items():
                self.send_header(name, value)
            self.end_headers()
            self.wfile.write(data)
        except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError):
            logger.debug(f"Client disconnected before the response to {self.path} was sent")


class DmnLintApiServer:
    """Background HTTP server; requests are handled on their own threads."""

    def __init__(self, config: DmnLintConfig, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int | None:
        return self.httpd.server_address[1] if self.httpd else None

    @property
    def url(self) -> str | None:
        if self.httpd is None:
            return None
        host = self.config.api.bind
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"

    def start(self, port: int | None = None) -> str:
        """Bind and serve in a daemon thread.

        Args:
            port: Overrides ``api.port``; 0 lets the OS pick a free port

        Returns:
            Base URL of the running server

        Raises:
            ApiError: 503 when the API is disabled or the address cannot be bound
        """
        if not self.config.api.enabled:
            raise ApiError(503, "service_unavailable", "API is disabled in configuration")

        address = (self.config.api.bind, self.config.api.port if port is None else port)
        try:
            self.httpd = ThreadingHTTPServer(address, partial(DmnLintApiHandler, self))
        except OSError as e:
            raise ApiError(503, "service_unavailable", f"Cannot listen on {address[0]}:{address[1]}: {e}")
        self.httpd.daemon_threads = True

        self._thread = threading.Thread(target=self.httpd.serve_forever, name="dmnlint-api", daemon=True)
        self._thread.start()
        logger.info(f"dmnlint API listening on {self.url}")
        return self.url

    def stop(self) -> None:
        if self.httpd is None:
            return
        self.httpd.shutdown()
        self.httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
        logger.info("dmnlint API stopped")
        self.httpd = None


def start_api_server(config: DmnLintConfig, verbose: bool = False,
                     port: int | None = None) -> DmnLintApiServer:
    """Create and start a server for ``config``."""
    server = DmnLintApiServer(config, verbose=verbose)
    server.start(port=port)
    return server
