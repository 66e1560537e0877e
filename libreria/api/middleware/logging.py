"""
Access log for the API.

One record per request with the method, path, status, duration, request ID
and, on protected routes, the email of the token holder. Credentials never
reach the log: token headers and cookies are not logged, and JSON body fields
such as ``password`` are masked.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Request ID of the request being handled, for log records emitted anywhere
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("libreria.api.access")

REQUEST_ID_HEADER = "X-Request-ID"

CREDENTIAL_HEADERS = frozenset({
    "authorization",
    "auth-token",
    "user-token",
    "cookie",
    "set-cookie",
})

MASKED_FIELDS = frozenset({"password", "token", "secret"})
MASK = "***"


@dataclass
class LoggingConfig:
    """Access log settings."""

    enabled: bool = True

    # Log JSON request bodies, masked; debug only
    log_request_body: bool = False
    max_body_bytes: int = 4096

    # Paths served without an access record
    quiet_paths: frozenset = field(default_factory=lambda: frozenset({"/health", "/favicon.ico"}))

    # Requests slower than this are logged as warnings (seconds)
    slow_request_seconds: float = 1.0


class JSONLogFormatter(logging.Formatter):
    """One JSON object per line, with the access fields when present."""

    ACCESS_FIELDS = ("request_id", "method", "path", "status", "duration_ms", "user", "headers", "body")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in self.ACCESS_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if "request_id" not in entry and request_id_var.get():
            entry["request_id"] = request_id_var.get()

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def mask_credentials(data: Any) -> Any:
    """Replace the values of credential fields, at any depth."""
    if isinstance(data, dict):
        return {
            key: MASK if key.lower() in MASKED_FIELDS else mask_credentials(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_credentials(item) for item in data]
    return data


def loggable_headers(headers: Any) -> dict[str, str]:
    return {
        name: value
        for name, value in headers.items()
        if name.lower() not in CREDENTIAL_HEADERS
    }


def get_request_id() -> str:
    """Request ID of the current request, or an empty string outside one."""
    return request_id_var.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns request IDs and writes the access log."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    async def _body_for_log(self, request: Request) -> Optional[str]:
        body = await request.body()
        if not body:
            return None
        if len(body) > self.config.max_body_bytes:
            return f"<{len(body)} bytes>"

        try:
            parsed = json.loads(body)
        except ValueError:
            return "<non-JSON body>"
        return json.dumps(mask_credentials(parsed))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        context_token = request_id_var.set(request_id)
        # The context var is reset before the server error handler runs
        request.state.request_id = request_id

        try:
            if not self.config.enabled or request.url.path in self.config.quiet_paths:
                response = await call_next(request)
                response.headers[REQUEST_ID_HEADER] = request_id
                return response

            started = time.perf_counter()
            body = await self._body_for_log(request) if self.config.log_request_body else None

            response = await call_next(request)

            elapsed = time.perf_counter() - started
            response.headers[REQUEST_ID_HEADER] = request_id

            # Set by require_token on protected routes
            claims = getattr(request.state, "user", None)

            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400 or elapsed > self.config.slow_request_seconds:
                level = logging.WARNING
            else:
                level = logging.INFO

            access_logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed * 1000:.1f}ms)",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(elapsed * 1000, 2),
                    "user": claims.email if claims is not None else None,
                    "headers": loggable_headers(request.headers),
                    "body": body,
                },
            )
            return response
        finally:
            request_id_var.reset(context_token)


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the access log middleware.

    Args:
        app: FastAPI application instance.
        config: Access log settings.
        structured: Emit ``libreria`` stdlib log records as JSON lines.
    """
    if structured:
        package_logger = logging.getLogger("libreria")
        if not any(isinstance(h.formatter, JSONLogFormatter) for h in package_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(JSONLogFormatter())
            package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
