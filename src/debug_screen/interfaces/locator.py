"""Abstract interface for source-code lookup strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..core.source_file import SourceFile
    from ..models.frame import StackFrameDescriptor


@runtime_checkable
class SourceLocator(Protocol):
    """Maps a stack frame back to the source file it came from.

    Locators are tried in priority order by the debug screen; the first
    one returning a file wins. Implementations may read the local
    filesystem, a cache, or fetch sources remotely.
    """

    def find_file_for_frame(self, frame: StackFrameDescriptor) -> SourceFile | None:
        """
        Locate the source file for a frame.

        Args:
            frame: Frame descriptor from the exception's traceback

        Returns:
            The located source file, or None if this locator cannot find it
        """
        ...
