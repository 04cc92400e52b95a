"""Starlette integration for the debug screen.

Registers the debug screen as the application's handler for ``Exception``.
Starlette invokes it from ServerErrorMiddleware, running the synchronous
handler in its threadpool, and still re-raises the exception afterwards so
the server logs it as usual.

Example:
    app = Starlette(routes=routes)
    enable_debug_screen(app)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response

from debug_screen.config.schema import DebugScreenConfig
from debug_screen.core.debug_screen import HTML_CONTENT_TYPE, SERVER_ERROR, DebugScreen
from debug_screen.interfaces.locator import SourceLocator
from debug_screen.models.request import RequestSnapshot
from debug_screen.utils.logging import LogEventNames, bind_context, unbind_context

log = structlog.get_logger()


def _first_values(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Collapse repeated keys, keeping the first value per key."""
    result: dict[str, Any] = {}
    for key, value in pairs:
        result.setdefault(key, value)
    return result


def snapshot_request(request: Request) -> RequestSnapshot:
    """Copy the request data shown on the debug page.

    Session attributes are only read when SessionMiddleware is installed;
    request attributes come from ``request.state``.
    """
    http_version = request.scope.get("http_version")
    session = request.session if "session" in request.scope else {}
    state = getattr(request.state, "_state", {})

    return RequestSnapshot(
        url=str(request.url),
        scheme=request.url.scheme or None,
        method=request.method,
        protocol=f"HTTP/{http_version}" if http_version else None,
        remote_address=request.client.host if request.client else None,
        headers=_first_values(request.headers.items()),
        route_params=dict(request.path_params),
        query_params=_first_values(request.query_params.multi_items()),
        session_attributes=dict(session),
        attributes=dict(state),
        cookies=dict(request.cookies),
    )


class DebugResponse:
    """ResponseSink collecting what the debug screen writes."""

    def __init__(self) -> None:
        self.status_code = SERVER_ERROR
        self.media_type = HTML_CONTENT_TYPE
        self.content = ""

    def status(self, code: int) -> None:
        self.status_code = code

    def content_type(self, value: str) -> None:
        self.media_type = value

    def body(self, text: str) -> None:
        self.content = text

    def to_response(self) -> Response:
        """Convert into a Starlette response."""
        response = HTMLResponse(self.content, status_code=self.status_code)
        response.headers["content-type"] = self.media_type
        return response


class DebugScreenHandler:
    """Starlette exception handler delegating to a DebugScreen."""

    def __init__(self, screen: DebugScreen) -> None:
        self._screen = screen

    @property
    def screen(self) -> DebugScreen:
        """The wrapped debug screen."""
        return self._screen

    def __call__(self, request: Request, exc: Exception) -> Response:
        sink = DebugResponse()
        try:
            snapshot = snapshot_request(request)
        except Exception as e:
            # Render with whatever could not be read left out
            log.warning(LogEventNames.REQUEST_SNAPSHOT_FAILED, error=repr(e))
            snapshot = RequestSnapshot(url=str(request.url), method=request.method)
        bind_context(request_method=request.method, request_path=request.url.path)
        try:
            self._screen.handle(exc, snapshot, sink)
        finally:
            unbind_context("request_method", "request_path")
        return sink.to_response()


def enable_debug_screen(
    app: Starlette,
    *source_locators: SourceLocator,
    config: DebugScreenConfig | None = None,
) -> DebugScreen:
    """Install the debug screen as the handler for any uncaught exception.

    Args:
        app: Starlette (or FastAPI) application
        *source_locators: Locators used to find source files, in priority
            order. Defaults to the configured source roots.
        config: Configuration. If None, read from the environment.

    Returns:
        The installed DebugScreen
    """
    screen = DebugScreen(*source_locators, config=config)
    app.add_exception_handler(Exception, DebugScreenHandler(screen))
    log.info(
        LogEventNames.DEBUG_SCREEN_ENABLED,
        locators=[repr(locator) for locator in screen.source_locators],
    )
    return screen
