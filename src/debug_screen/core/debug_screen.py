"""Debug screen rendering for uncaught request exceptions.

This module implements the DebugScreen class, which turns an uncaught
exception into an HTML diagnostic page. It handles:
- Flattening the exception chain with per-frame source snippets
- Building contextual tables from the request and the environment
- Rendering through Jinja2
- A static fallback page when rendering itself fails

The handler always answers: the worst case is the plain fallback page.
"""

from __future__ import annotations

import contextlib
import html
from collections.abc import Sequence
from typing import Any

import jinja2
import structlog

from debug_screen.config.schema import DebugScreenConfig
from debug_screen.core.crawler import ExceptionChainCrawler, format_plain_trace
from debug_screen.core.frame_parser import FrameParser
from debug_screen.core.locators import LocalSourceLocator
from debug_screen.core.tables import (
    DEFAULT_TABLE_CONTRIBUTORS,
    TableContributor,
    Tables,
    install_request_tables,
    redacted_environment_tables,
)
from debug_screen.interfaces.locator import SourceLocator
from debug_screen.interfaces.request import RequestContext, ResponseSink
from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

TEMPLATE_NAME = "debugscreen.html"
TEMPLATE_PACKAGE = "debug_screen"
TEMPLATE_PACKAGE_PATH = "templates"
HTML_CONTENT_TYPE = "text/html; charset=UTF-8"
SERVER_ERROR = 500


class DebugScreenError(Exception):
    """Base exception for debug screen errors."""


class TemplateConfigError(DebugScreenError):
    """The configured template location cannot be used."""


def create_template_environment(config: DebugScreenConfig) -> jinja2.Environment:
    """Create the Jinja2 environment for the debug page.

    In development mode templates are read from ``config.template_dir`` so
    edits show up without reinstalling; otherwise the packaged copy is used.

    Raises:
        TemplateConfigError: If the development template directory is missing
    """
    loader: jinja2.BaseLoader
    if config.dev:
        if not config.template_dir.is_dir():
            raise TemplateConfigError(f"Template directory not found: {config.template_dir}")
        loader = jinja2.FileSystemLoader(config.template_dir)
    else:
        loader = jinja2.PackageLoader(TEMPLATE_PACKAGE, TEMPLATE_PACKAGE_PATH)

    return jinja2.Environment(
        loader=loader,
        autoescape=jinja2.select_autoescape(["html"]),
        undefined=jinja2.StrictUndefined,
    )


def render_fallback_page(error: BaseException, render_error: BaseException) -> str:
    """Build the minimal page used when the debug screen cannot be rendered.

    Uses string concatenation only, so it does not depend on the template
    engine or on the view model.
    """
    return (
        "<html>"
        "<head>"
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        "</head>"
        "<body>"
        "<h1>Caught Exception:</h1>"
        "<pre>" + html.escape(format_plain_trace(error)) + "</pre>"
        "<h1>Caught Exception (while rendering debug screen):</h1>"
        "<pre>" + html.escape(format_plain_trace(render_error)) + "</pre>"
        "</body>"
        "</html>"
    )


class DebugScreen:
    """Renders an in-browser stack trace when a handler raises.

    Responsibilities:
    - Set a 500 status so programmatic callers see the failure
    - Crawl the exception chain and locate source snippets
    - Install contextual tables (overridable via ``install_tables``)
    - Render the page, falling back to a static page on any failure

    Example:
        screen = DebugScreen(LocalSourceLocator("./src"))
        screen.handle(exc, request_snapshot, response)

    Subclasses may extend ``install_tables``; call the base implementation
    first to keep the default tables ahead of the added ones.
    """

    def __init__(
        self,
        *source_locators: SourceLocator,
        config: DebugScreenConfig | None = None,
        table_contributors: Sequence[TableContributor] | None = None,
        environment: jinja2.Environment | None = None,
    ) -> None:
        """Initialize the debug screen.

        Args:
            *source_locators: Locators for source files, in priority order.
                If none are given, one LocalSourceLocator per configured
                source root is used.
            config: Configuration. If None, read from the environment.
            table_contributors: Extra table contributors, run after the
                default tables
            environment: Jinja2 environment. If None, one is created from
                the configuration.
        """
        self._config = config or DebugScreenConfig()

        locators: tuple[SourceLocator, ...] = source_locators or tuple(
            LocalSourceLocator(root) for root in self._config.source_roots
        )
        self._frame_parser = FrameParser(locators, context_lines=self._config.context_lines)
        self._crawler = ExceptionChainCrawler(
            self._frame_parser,
            short_message_length=self._config.short_message_length,
            trace_collapse_threshold=self._config.trace_collapse_threshold,
        )

        defaults: tuple[TableContributor, ...] = DEFAULT_TABLE_CONTRIBUTORS
        if self._config.redact_environment:
            defaults = (install_request_tables, redacted_environment_tables)
        self._table_contributors = defaults + tuple(table_contributors or ())

        self._environment = environment or create_template_environment(self._config)

    @property
    def config(self) -> DebugScreenConfig:
        """Active configuration."""
        return self._config

    @property
    def source_locators(self) -> tuple[SourceLocator, ...]:
        """Configured source locators, in priority order."""
        return self._frame_parser.locators

    def handle(
        self,
        error: BaseException,
        request: RequestContext,
        response: ResponseSink,
    ) -> None:
        """Write the debug page for ``error`` into ``response``.

        Never raises: if building or rendering the page fails, the response
        body is replaced with the static fallback page.

        Args:
            error: The uncaught exception
            request: The request being handled when it was raised
            response: Response to write status, content type and body into
        """
        try:
            response.status(SERVER_ERROR)
            model = self.build_model(error, request)
            page = self._environment.get_template(TEMPLATE_NAME).render(**model)
            response.content_type(HTML_CONTENT_TYPE)
            response.body(page)
        except Exception as render_error:
            response.status(SERVER_ERROR)
            response.content_type(HTML_CONTENT_TYPE)
            response.body(render_fallback_page(error, render_error))
            # The response is complete; a failing logger must not escape
            with contextlib.suppress(Exception):
                log.exception(
                    LogEventNames.DEBUG_SCREEN_RENDER_FAILED,
                    error_type=type(error).__name__,
                    render_error=repr(render_error),
                )
        else:
            with contextlib.suppress(Exception):
                log.info(
                    LogEventNames.DEBUG_SCREEN_RENDERED,
                    error_type=model["exceptions"][0].type,
                    chain_length=len(model["exceptions"]),
                )

    def build_model(self, error: BaseException, request: RequestContext) -> dict[str, Any]:
        """Build the template model: the exception chain and the tables."""
        exceptions = self._crawler.crawl(error)

        tables: Tables = {}
        self.install_tables(tables, request, error)

        return {"exceptions": exceptions, "tables": tables}

    def install_tables(
        self,
        tables: Tables,
        request: RequestContext,
        error: BaseException,
    ) -> None:
        """Add the contextual tables, in display order.

        Args:
            tables: Ordered mapping of table title to key/value mapping
            request: The failing request
            error: The uncaught exception
        """
        for contributor in self._table_contributors:
            contributor(tables, request, error)
