"""Host framework and remote source integrations."""

from .remote import RemoteSourceLocator
from .starlette import DebugResponse, DebugScreenHandler, enable_debug_screen, snapshot_request

__all__ = [
    "DebugResponse",
    "DebugScreenHandler",
    "RemoteSourceLocator",
    "enable_debug_screen",
    "snapshot_request",
]
