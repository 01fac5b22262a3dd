"""
HTTP server for classification endpoints.

Endpoints (below an optional context path):
    GET  /classificationDistribution/<url-encoded line>
    POST /classificationDistribution        (first line of the body)
    GET  /classify/<url-encoded line>
    POST /classify
    GET  /ready
"""

from collections.abc import Callable, Iterable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import unquote, urlsplit

from rdfserving.config.settings import ServingConfig
from rdfserving.errors import InternalInconsistencyError, ServingError
from rdfserving.generation.generation import GenerationManager
from rdfserving.serving.service import ClassificationService
from rdfserving.utils.logging import configure_logging, get_logger, log_context

log = get_logger(__name__)

DISTRIBUTION_ENDPOINT = "/classificationDistribution"
CLASSIFY_ENDPOINT = "/classify"
READY_ENDPOINT = "/ready"


class ClassificationHandler(BaseHTTPRequestHandler):
    """HTTP request handler for classification endpoints."""

    # Class variables set by server
    service: ClassificationService | None = None
    context_path: str = ""

    def do_GET(self) -> None:
        """Handle GET requests; the record is the trailing path segment."""
        path = self._endpoint_path()
        if path is None:
            self.send_error(404, "Not Found")
            return

        if path == READY_ENDPOINT:
            self._serve_ready()
            return

        for endpoint, handler in self._routes():
            if path == endpoint:
                handler(None)
                return
            if path.startswith(endpoint + "/"):
                handler(unquote(path[len(endpoint) + 1 :]))
                return

        self.send_error(404, "Not Found")

    def do_POST(self) -> None:
        """Handle POST requests; the record is the first line of the body."""
        path = self._endpoint_path()
        for endpoint, handler in self._routes():
            if path == endpoint:
                handler(self._read_first_line())
                return
        self.send_error(404, "Not Found")

    def _routes(self) -> list[tuple[str, Callable[[str | None], None]]]:
        return [
            (DISTRIBUTION_ENDPOINT, self._serve_distribution),
            (CLASSIFY_ENDPOINT, self._serve_classify),
        ]

    def _endpoint_path(self) -> str | None:
        """Request path without query and context path, still URL-encoded."""
        path = urlsplit(self.path).path
        if not self.context_path:
            return path
        if path == self.context_path:
            return "/"
        if path.startswith(self.context_path + "/"):
            return path[len(self.context_path) :]
        return None

    def _read_first_line(self) -> str | None:
        content_length = int(self.headers.get("Content-Length") or 0)
        if content_length <= 0:
            return None
        body = self.rfile.read(content_length).decode("utf-8", errors="replace")
        # Only CR and LF end a line; other Unicode separators are record data
        return body.split("\n", 1)[0].split("\r", 1)[0]

    def _serve_ready(self) -> None:
        if self.service is None or not self.service.manager.is_ready:
            self._safe_send_error(503, "Model not loaded")
            return
        self._write_text(["OK\n"])

    def _serve_distribution(self, line: str | None) -> None:
        with log_context(endpoint=DISTRIBUTION_ENDPOINT):
            self._run(lambda service: service.classification_distribution(line))

    def _serve_classify(self, line: str | None) -> None:
        with log_context(endpoint=CLASSIFY_ENDPOINT):
            self._run(lambda service: [service.classify(line) + "\n"])

    def _run(self, call: Callable[[ClassificationService], Iterable[str]]) -> None:
        """Run a service call and stream its lines, mapping errors to statuses."""
        if self.service is None:
            self._safe_send_error(500, "Server not properly configured")
            return
        try:
            lines = call(self.service)
        except InternalInconsistencyError as e:
            log.error("Internal inconsistency", reason=e.reason)
            self._safe_send_error(e.status_code, e.reason)
            return
        except ServingError as e:
            log.info("Rejected request", status=e.status_code, reason=e.reason)
            self._safe_send_error(e.status_code, e.reason)
            return
        except Exception as e:
            log.exception("Request failed", error=str(e))
            self._safe_send_error(500, "Classification failed")
            return
        self._write_text(lines)

    def _write_text(self, lines: Iterable[str]) -> None:
        """Stream lines as they are produced; headers go out with the first."""
        started = False
        try:
            for text in lines:
                if not started:
                    self._start_text_response()
                    started = True
                self.wfile.write(text.encode("utf-8"))
            if not started:
                self._start_text_response()
        except (ConnectionAbortedError, ConnectionResetError, BrokenPipeError):
            # Client went away mid-response
            pass
        except InternalInconsistencyError as e:
            log.error("Internal inconsistency", reason=e.reason, streaming=started)
            if started:
                self.close_connection = True
            else:
                self._safe_send_error(e.status_code, e.reason)

    def _start_text_response(self) -> None:
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=UTF-8")
        self.end_headers()

    def _safe_send_error(self, code: int, message: str) -> None:
        """Send error response, ignoring connection errors."""
        try:
            self.send_error(code, explain=message)
        except (ConnectionAbortedError, ConnectionResetError, BrokenPipeError):
            pass

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use our logger."""
        # format and args are unused - we use our own logger
        _ = format, args
        log.debug("HTTP request", method=self.command, path=self.path)


def create_server(
    config: ServingConfig,
    manager: GenerationManager,
) -> ThreadingHTTPServer:
    """
    Create (but do not start) the classification HTTP server.

    Args:
        config: Serving configuration.
        manager: Holder of the current generation.

    Returns:
        Bound server; use ``server_address`` to find an ephemeral port.
    """
    handler = type(
        "BoundClassificationHandler",
        (ClassificationHandler,),
        {
            "service": ClassificationService(manager, config.inbound),
            "context_path": config.server.context_path,
        },
    )
    server = ThreadingHTTPServer((config.server.host, config.server.port), handler)
    server.daemon_threads = True
    return server


def start_server(
    config: ServingConfig,
    manager: GenerationManager | None = None,
) -> None:
    """
    Load the configured generation and serve until interrupted.

    Args:
        config: Serving configuration.
        manager: Existing generation holder; a new one is created and
            loaded from ``config.model`` if not given.
    """
    configure_logging(config.logging.level, json_output=config.logging.json_output)

    if manager is None:
        manager = GenerationManager()
        manager.load(
            config.model.path,
            categories_path=config.model.categories,
            target_column=config.inbound.target_index,
        )

    server = create_server(config, manager)
    host, port = server.server_address[:2]

    log.info(
        "Starting classification server",
        url=f"http://{host}:{port}{config.server.context_path}",
        project=config.project,
        columns=config.total_columns,
    )

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down classification server")
    finally:
        server.server_close()
