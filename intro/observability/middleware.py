from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from intro.observability.metrics import get_metrics

# Anything else is folded into "other" so clients cannot mint new label values.
METRIC_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


def metric_method(method: str | None) -> str:
    return method if method in METRIC_METHODS else "other"


class RequestContextMiddleware:
    """Adds request_id context, access logs, and the request duration histogram."""

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app
        # Probes would otherwise dominate the histogram.
        self._excluded_metric_paths = {"/health"}

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=path,
            method=method,
        )

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed = perf_counter() - start

            # Update metrics first so they update even if logging misbehaves.
            if path not in self._excluded_metric_paths:
                get_metrics().observe_request(status=status_code, method=metric_method(method), seconds=elapsed)

            structlog.get_logger("access").info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000.0, 2),
            )

            structlog.contextvars.clear_contextvars()
