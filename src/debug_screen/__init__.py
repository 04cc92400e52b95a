"""In-browser debug screen for uncaught exceptions in Starlette applications.

Example:
    from starlette.applications import Starlette

    from debug_screen import enable_debug_screen

    app = Starlette(routes=routes)
    enable_debug_screen(app)
"""

from debug_screen._version import __version__
from debug_screen.adapters.remote import RemoteSourceLocator
from debug_screen.adapters.starlette import enable_debug_screen
from debug_screen.config import DebugScreenConfig, load_config
from debug_screen.core import (
    CachingSourceLocator,
    DebugScreen,
    FrameFileSourceLocator,
    LocalSourceLocator,
    SourceFile,
)
from debug_screen.interfaces import RequestContext, ResponseSink, SourceLocator
from debug_screen.models import RequestSnapshot

__all__ = [
    "CachingSourceLocator",
    "DebugScreen",
    "DebugScreenConfig",
    "FrameFileSourceLocator",
    "LocalSourceLocator",
    "RemoteSourceLocator",
    "RequestContext",
    "RequestSnapshot",
    "ResponseSink",
    "SourceFile",
    "SourceLocator",
    "__version__",
    "enable_debug_screen",
    "load_config",
]
