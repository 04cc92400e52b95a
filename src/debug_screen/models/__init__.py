"""Data models and transfer objects."""

from .exception import ExceptionRecord
from .frame import FrameView, StackFrameDescriptor
from .request import RequestSnapshot

__all__ = [
    # Frame models
    "StackFrameDescriptor",
    "FrameView",
    # Exception models
    "ExceptionRecord",
    # Request models
    "RequestSnapshot",
]
