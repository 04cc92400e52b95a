"""Conversion of stack frames into render records."""

from __future__ import annotations

import traceback
from collections.abc import Sequence
from types import TracebackType

import structlog

from debug_screen.core.locators import find_file_for_frame
from debug_screen.core.source_file import DEFAULT_CONTEXT_LINES
from debug_screen.interfaces.locator import SourceLocator
from debug_screen.models.frame import FrameView, StackFrameDescriptor
from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

UNKNOWN = "<unknown>"


def frames_from_traceback(tb: TracebackType | None) -> list[StackFrameDescriptor]:
    """List the frames of a traceback, innermost (raising) frame first."""
    frames = [
        StackFrameDescriptor.from_frame(frame, line_number)
        for frame, line_number in traceback.walk_tb(tb)
    ]
    frames.reverse()
    return frames


class FrameParser:
    """Builds FrameView records, attaching source snippets where found.

    Example:
        parser = FrameParser([LocalSourceLocator("./src")])
        views = parser.parse_frames(exc)
    """

    def __init__(
        self,
        locators: Sequence[SourceLocator],
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ) -> None:
        """Initialize the parser.

        Args:
            locators: Source locators, in priority order
            context_lines: Lines of code shown around the failing line
        """
        self._locators = tuple(locators)
        self._context_lines = context_lines

    @property
    def locators(self) -> tuple[SourceLocator, ...]:
        """Configured source locators, in priority order."""
        return self._locators

    def parse_frames(self, error: BaseException) -> tuple[FrameView, ...]:
        """Parse every frame of an exception's traceback."""
        return tuple(
            self.parse_frame(frame) for frame in frames_from_traceback(error.__traceback__)
        )

    def parse_frame(self, frame: StackFrameDescriptor) -> FrameView:
        """Parse a single frame into its render record.

        Args:
            frame: Frame descriptor

        Returns:
            FrameView; snippet fields stay None when no source is found
        """
        base = FrameView(
            file=frame.file_name or UNKNOWN,
            class_name=frame.type_name or UNKNOWN,
            line=str(frame.line_number) if frame.has_line else UNKNOWN,
            function=frame.function_name or UNKNOWN,
        )

        if not frame.has_line:
            return base

        source = find_file_for_frame(self._locators, frame)
        if source is None:
            return base

        window = source.get_window(frame.line_number, self._context_lines)
        if not window:
            return base

        # Empty lines become a single space so the template keeps them visible
        code = "\n".join(line or " " for line in window.values())

        canonical_path: str | None
        try:
            canonical_path = source.get_path()
        except OSError as e:
            log.debug(LogEventNames.CANONICAL_PATH_UNAVAILABLE, path=source.path, error=str(e))
            canonical_path = None

        return FrameView(
            file=base.file,
            class_name=base.class_name,
            line=base.line,
            function=base.function,
            code=code,
            code_start=min(window),
            canonical_path=canonical_path,
        )
