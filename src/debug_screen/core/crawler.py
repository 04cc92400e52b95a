"""Flattening of exception chains into render records.

The crawl is depth-first, pre-order:
- the exception itself
- each exception attached to it (ExceptionGroup members), marked suppressed
- its cause (``__cause__``, or an unsuppressed ``__context__``)

Every record produced inside an attached branch stays marked suppressed,
including causes found within that branch.
"""

from __future__ import annotations

import builtins
import traceback

import jinja2
import structlog

from debug_screen.core.frame_parser import FrameParser
from debug_screen.models.exception import ExceptionRecord
from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

SHORT_MESSAGE_LENGTH = 100
TRACE_COLLAPSE_THRESHOLD = 100
ELLIPSIS = "..."


def abbreviate(text: str, max_width: int = SHORT_MESSAGE_LENGTH) -> str:
    """Shorten text to at most ``max_width`` characters, ending in '...'."""
    if len(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return text[:max_width]
    return text[: max_width - len(ELLIPSIS)] + ELLIPSIS


def qualified_type_name(error: BaseException) -> str:
    """Fully-qualified name of the exception's type (builtins left bare)."""
    cls = type(error)
    if cls.__module__ == builtins.__name__:
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def format_plain_trace(error: BaseException) -> str:
    """Format an exception the way the interpreter prints it."""
    return "".join(traceback.format_exception(error))


def format_trace(error: BaseException) -> str:
    """Format an exception for display, favouring template locations.

    Template syntax errors point at the template line rather than at the
    Python frames that compiled it.
    """
    if isinstance(error, jinja2.TemplateSyntaxError):
        lines = traceback.format_exception_only(error)
        location = error.filename or error.name or "<template>"
        lines.append(f'  Template "{location}", line {error.lineno}\n')
        if error.source is not None:
            source_lines = error.source.splitlines()
            if 1 <= error.lineno <= len(source_lines):
                lines.append(f"    {source_lines[error.lineno - 1].strip()}\n")
        return "".join(lines)

    return format_plain_trace(error)


def attached_exceptions(error: BaseException) -> tuple[BaseException, ...]:
    """Exceptions carried alongside this one (ExceptionGroup members)."""
    if isinstance(error, BaseExceptionGroup):
        return tuple(error.exceptions)
    return ()


def underlying_cause(error: BaseException) -> BaseException | None:
    """The exception this one was raised from or while handling."""
    if error.__cause__ is not None:
        return error.__cause__
    if error.__context__ is not None and not error.__suppress_context__:
        return error.__context__
    return None


class ExceptionChainCrawler:
    """Walks an exception's cause chain and attached exceptions.

    Example:
        crawler = ExceptionChainCrawler(FrameParser(locators))
        for record in crawler.crawl(exc):
            print(record.type, record.suppressed)
    """

    def __init__(
        self,
        frame_parser: FrameParser,
        short_message_length: int = SHORT_MESSAGE_LENGTH,
        trace_collapse_threshold: int = TRACE_COLLAPSE_THRESHOLD,
    ) -> None:
        """Initialize the crawler.

        Args:
            frame_parser: Parser used for each exception's frames
            short_message_length: Maximum length of the short message
            trace_collapse_threshold: Trace length above which the full
                trace is collapsed by default
        """
        self._frame_parser = frame_parser
        self._short_message_length = short_message_length
        self._trace_collapse_threshold = trace_collapse_threshold

    def crawl(self, error: BaseException) -> list[ExceptionRecord]:
        """Flatten the exception and everything chained to it.

        Args:
            error: The uncaught exception

        Returns:
            Records in depth-first order, starting with ``error`` itself
        """
        chain: list[ExceptionRecord] = []
        self._crawl(error, chain, suppressed=False, seen=set())
        return chain

    def _crawl(
        self,
        error: BaseException,
        chain: list[ExceptionRecord],
        suppressed: bool,
        seen: set[int],
    ) -> None:
        if id(error) in seen:
            log.debug(LogEventNames.EXCEPTION_CYCLE_SKIPPED, type=qualified_type_name(error))
            return
        seen.add(id(error))

        chain.append(self.build_record(error, suppressed))

        for attached in attached_exceptions(error):
            self._crawl(attached, chain, suppressed=True, seen=seen)

        cause = underlying_cause(error)
        if cause is not None:
            self._crawl(cause, chain, suppressed=suppressed, seen=seen)

    def build_record(self, error: BaseException, suppressed: bool) -> ExceptionRecord:
        """Build the render record for one exception."""
        message = str(error)
        full_trace = format_trace(error)
        type_name = qualified_type_name(error)

        return ExceptionRecord(
            message=message,
            short_message=abbreviate(message, self._short_message_length),
            full_trace=full_trace,
            show_full_trace=len(full_trace) > self._trace_collapse_threshold,
            plain_exception=format_plain_trace(error),
            name=tuple(type_name.split(".")),
            basic_type=type(error).__qualname__,
            type=type_name,
            suppressed=suppressed,
            frames=self._frame_parser.parse_frames(error),
        )
