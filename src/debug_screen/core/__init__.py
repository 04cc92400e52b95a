"""Core components of the debug screen.

- DebugScreen: Renders the page for an uncaught exception
- ExceptionChainCrawler: Flattens cause chains and exception groups
- FrameParser: Turns stack frames into render records with snippets
- SourceFile / LocalSourceLocator: Source lookup around the failing line
"""

from debug_screen.core.crawler import ExceptionChainCrawler
from debug_screen.core.debug_screen import (
    DebugScreen,
    DebugScreenError,
    TemplateConfigError,
    render_fallback_page,
)
from debug_screen.core.frame_parser import FrameParser, frames_from_traceback
from debug_screen.core.locators import (
    CachingSourceLocator,
    FrameFileSourceLocator,
    LocalSourceLocator,
    find_file_for_frame,
)
from debug_screen.core.source_file import LineWindow, SourceFile

__all__ = [
    "CachingSourceLocator",
    "DebugScreen",
    "DebugScreenError",
    "ExceptionChainCrawler",
    "FrameFileSourceLocator",
    "FrameParser",
    "LineWindow",
    "LocalSourceLocator",
    "SourceFile",
    "TemplateConfigError",
    "find_file_for_frame",
    "frames_from_traceback",
    "render_fallback_page",
]
