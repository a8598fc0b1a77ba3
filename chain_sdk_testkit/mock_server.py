"""Mock REST gateway with route-based request validation.

Each registered path carries a canned response and a set of parameter
descriptors. Incoming requests are checked against the descriptors; requests
that satisfy all of them get the canned response, the rest get a 400 listing
what was wrong. Unknown paths get a 404.

A server is a scoped resource: close it explicitly, use it as a context
manager, or let it expire after ``lifetime`` seconds.
"""

import logging
import threading
from dataclasses import dataclass, field
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import parse_qs, unquote, urlsplit

from chain_sdk_testkit.client import Client, NetworkType, new_config
from chain_sdk_testkit.config_manager import get_config_manager
from chain_sdk_testkit.exceptions import ConfigError, RoutingError
from chain_sdk_testkit.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

BODY_PARAM = "body"
BODY_EMPTY = "body is empty"
BODY_READ_FAILED = "failed during reading body"
BAD_TYPE_PARAM = "bad type param"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
FORM_METHODS = ("POST", "PUT", "PATCH")


@dataclass(frozen=True)
class ParamDescriptor:
    """Validation rule for one request parameter.

    ``type`` is compared literally against the parameter value; it is not a
    type check.
    """

    description: str = ""
    required: bool = False
    type: str = ""
    default_value: Any = None


@dataclass(frozen=True)
class Route:
    """Canned response plus the parameters a request must carry."""

    response: str
    params: Mapping[str, ParamDescriptor] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


ROUTE_NEED_BODY: Mapping[str, ParamDescriptor] = MappingProxyType(
    {BODY_PARAM: ParamDescriptor(description="required body")}
)


@dataclass
class ValidationResult:
    """Outcome of checking a request against a route."""

    bad_params: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return not self.bad_params and self.error is None

    def message(self) -> str:
        """Render the 400 response body."""
        text = ""
        if self.bad_params:
            text += f"bad params - {','.join(self.bad_params)}"
        if self.error is not None:
            text += f"error during params validate - {self.error}"
        return text

    def raise_for_status(self) -> None:
        """Raise RoutingError if the request was rejected.

        Raises:
            RoutingError: ERR_MALFORMED_REQUEST for fatal errors,
                ERR_VALIDATION_FAILED for missing parameters.
        """
        if self.error is not None:
            raise RoutingError(self.message(), RoutingError.ERR_MALFORMED_REQUEST)
        if self.bad_params:
            raise RoutingError(self.message(), RoutingError.ERR_VALIDATION_FAILED)


class RequestView:
    """Read-once view of an incoming request's body and form values."""

    def __init__(
        self,
        target: str,
        headers: Mapping[str, str],
        rfile: Any,
        method: str = "GET",
    ):
        parts = urlsplit(target)
        self.method = method.upper()
        self.target = target
        # Routes match the decoded path; target stays raw for messages
        self.path = unquote(parts.path)
        self.query = parse_qs(parts.query, keep_blank_values=True)
        self.headers = headers
        self._rfile = rfile
        self._body: bytes | None = None
        self._form: dict[str, list[str]] | None = None

    def read_body(self) -> bytes:
        """Read the whole body once; later calls return the cached bytes.

        Raises:
            RoutingError: ERR_MALFORMED_REQUEST if the body cannot be read.
        """
        if self._body is None:
            try:
                self._body = self._read()
            except (OSError, ValueError) as e:
                raise RoutingError(
                    BODY_READ_FAILED, RoutingError.ERR_MALFORMED_REQUEST
                ) from e
        return self._body

    def _read(self) -> bytes:
        if "chunked" in (self.headers.get("Transfer-Encoding") or "").lower():
            return self._read_chunked()

        length = int(self.headers.get("Content-Length") or 0)
        if length < 0:
            raise ValueError(f"negative Content-Length {length}")
        body = self._rfile.read(length) if length else b""
        if len(body) != length:
            raise OSError(f"body truncated at {len(body)} of {length} bytes")
        return body

    def _read_chunked(self) -> bytes:
        chunks = []
        while True:
            size = int(self._rfile.readline().split(b";")[0].strip(), 16)
            if size == 0:
                # Trailer section ends with an empty line
                while self._rfile.readline() not in (b"\r\n", b"\n", b""):
                    pass
                return b"".join(chunks)
            chunk = self._rfile.read(size)
            if len(chunk) != size:
                raise OSError("chunk truncated")
            chunks.append(chunk)
            self._rfile.readline()

    def form_value(self, key: str) -> str:
        """First value for key, form body before query string; "" if absent.

        The body is parsed as a form only for POST, PUT and PATCH.
        """
        if self._form is None:
            self._form = {}
            media_type = (self.headers.get("Content-Type") or "").split(";")[0]
            if (
                self.method in FORM_METHODS
                and media_type.strip().lower() == FORM_CONTENT_TYPE
            ):
                try:
                    body = self.read_body()
                except RoutingError as e:
                    logger.debug(f"Form body unreadable, using query only: {e}")
                else:
                    self._form = parse_qs(
                        body.decode("utf-8", "replace"), keep_blank_values=True
                    )

        for source in (self._form, self.query):
            values = source.get(key)
            if values:
                return values[0]
        return ""


def check_params(route: Route, request: RequestView) -> ValidationResult:
    """Check a request against a route's parameter descriptors.

    Keys are checked in sorted order. A body read failure or a literal type
    mismatch stops the check; missing parameters found before it are kept.

    Args:
        route: Registered route.
        request: Incoming request.

    Returns:
        ValidationResult listing failed parameters and any fatal error.
    """
    result = ValidationResult()
    for key in sorted(route.params):
        descriptor = route.params[key]

        if key == BODY_PARAM:
            try:
                body = request.read_body()
            except RoutingError:
                result.error = BODY_READ_FAILED
                return result
            # Also matches bodies that merely contain "null" somewhere
            if not body or b"null" in body:
                result.bad_params.append(BODY_EMPTY)
            continue

        value = request.form_value(key)
        if descriptor.required and value == "":
            result.bad_params.append(key)
        elif descriptor.type and value != descriptor.type:
            result.error = BAD_TYPE_PARAM
            return result

    return result


def freeze_routes(routes: Mapping[str, Route]) -> Mapping[str, Route]:
    """Validate route paths and return a read-only route table.

    Raises:
        RoutingError: ERR_INVALID_ROUTE for paths that are not absolute or
            that claim the root not-found handler.
    """
    table = {}
    for path, route in routes.items():
        if not isinstance(path, str) or not path.startswith("/") or path == "/":
            raise RoutingError(
                f"Invalid mock route path: {path!r}",
                RoutingError.ERR_INVALID_ROUTE,
                hint="Paths must start with '/' and '/' itself is reserved",
            )
        if not isinstance(route, Route):
            raise RoutingError(
                f"Route for {path} must be a Route, got {type(route).__name__}",
                RoutingError.ERR_INVALID_ROUTE,
            )
        table[path] = route
    return MappingProxyType(table)


class _MockHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    request_queue_size = 64

    def __init__(self, address: tuple[str, int], routes: Mapping[str, Route]):
        self.routes = routes
        # Subtree patterns, longest first
        self.prefixes = sorted(
            (path for path in routes if path.endswith("/")), key=len, reverse=True
        )
        super().__init__(address, _MockRequestHandler)

    def match(self, path: str) -> Route | None:
        route = self.routes.get(path)
        if route is not None:
            return route
        for prefix in self.prefixes:
            if path.startswith(prefix):
                return self.routes[prefix]
        return None


class _MockRequestHandler(BaseHTTPRequestHandler):
    server: _MockHTTPServer
    timeout = 30

    def _dispatch(self) -> None:
        request = RequestView(self.path, self.headers, self.rfile, self.command)
        route = self.server.match(request.path)

        if route is None:
            logger.info(f"{self.path} not found in mock routers")
            self._reply(HTTPStatus.NOT_FOUND, f"{self.path} not found in mock routers")
            return

        result = check_params(route, request)
        if result.ok:
            self._reply(HTTPStatus.OK, route.response)
            return

        log_with_context(
            logger,
            logging.WARNING,
            "Rejected mock request",
            {
                "method": self.command,
                "path": request.path,
                "bad_params": ",".join(result.bad_params),
                "error": result.error,
            },
        )
        self._reply(HTTPStatus.BAD_REQUEST, result.message())

    do_GET = do_HEAD = do_POST = do_PUT = do_PATCH = do_DELETE = _dispatch

    def _reply(self, status: HTTPStatus, text: str) -> None:
        payload = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")


class MockServer:
    """Local HTTP server standing in for the REST gateway."""

    def __init__(
        self,
        routes: Mapping[str, Route] | None = None,
        host: str | None = None,
        lifetime: float | None = None,
        network_type: NetworkType = NetworkType.TEST_NET,
    ):
        """Start serving routes on an ephemeral port.

        Args:
            routes: Path to Route mapping, fixed for the server's life.
            host: Bind address (config ``mock_server.host`` if None).
            lifetime: Seconds before automatic close (config
                ``mock_server.lifetime`` if None).
            network_type: Network the bundled client is configured for.
        """
        manager = get_config_manager()
        host = host or manager.get("mock_server", "host")
        if lifetime is None:
            lifetime = manager.get("mock_server", "lifetime")
        try:
            self.lifetime = float(lifetime)
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"Invalid mock server lifetime: {lifetime!r}",
                ConfigError.ERR_INVALID_SCHEMA,
                hint="mock_server.lifetime must be a number of seconds",
            ) from e

        self._routes = freeze_routes(routes or {})
        self._lock = threading.Lock()
        self._closed = False

        self._httpd = _MockHTTPServer((host, 0), self._routes)
        port = self._httpd.server_address[1]
        self.url = f"http://{host}:{port}"

        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name=f"mock-server-{port}",
            daemon=True,
        )
        self._thread.start()

        self._timer = threading.Timer(self.lifetime, self._expire)
        self._timer.daemon = True
        self._timer.start()

        self.client = Client(None, new_config(self.url, network_type))

        log_with_context(
            logger,
            logging.DEBUG,
            "Mock server started",
            {"url": self.url, "routes": len(self._routes), "lifetime": self.lifetime},
        )

    @property
    def routes(self) -> Mapping[str, Route]:
        return self._routes

    @property
    def closed(self) -> bool:
        return self._closed

    def _expire(self) -> None:
        logger.warning(f"Mock server {self.url} reached its {self.lifetime}s lifetime")
        self.close()

    def close(self) -> None:
        """Stop serving and release the socket. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._timer.cancel()
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()
        self.client.close()
        logger.debug(f"Mock server {self.url} closed")

    def __enter__(self) -> "MockServer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def new_mock_server() -> MockServer:
    """Mock server with no routes; every path answers 404."""
    return MockServer()


def new_mock_server_with_routers(routes: Mapping[str, Route]) -> MockServer:
    return MockServer(routes)
