"""Data models for stack frames and their rendered views."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import FrameType


@dataclass(frozen=True)
class StackFrameDescriptor:
    """A single frame of a raised exception, as seen by source locators."""

    file_name: str | None
    type_name: str | None  # e.g., "myapp.views" (module of the frame)
    function_name: str | None  # e.g., "Handler.get"
    line_number: int = 0  # 0 means unknown
    path: str | None = None  # filename reported by the interpreter

    @classmethod
    def from_frame(cls, frame: FrameType, line_number: int | None) -> StackFrameDescriptor:
        """Build a descriptor from a live interpreter frame.

        Args:
            frame: Frame object taken from a traceback
            line_number: Line currently executing in that frame

        Returns:
            Immutable descriptor for the frame
        """
        code = frame.f_code
        path = code.co_filename or None
        module = frame.f_globals.get("__name__")

        return cls(
            file_name=os.path.basename(path) if path else None,
            type_name=module if isinstance(module, str) else None,
            function_name=code.co_qualname or None,
            line_number=line_number if line_number and line_number > 0 else 0,
            path=path,
        )

    @property
    def has_line(self) -> bool:
        """Check if the frame carries a usable line number."""
        return self.line_number > 0


@dataclass(frozen=True)
class FrameView:
    """Render record for one stack frame on the debug page."""

    file: str
    class_name: str
    line: str
    function: str
    code: str | None = None
    code_start: int | None = None
    canonical_path: str | None = None
    comments: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_code(self) -> bool:
        """Check if a source snippet was located for this frame."""
        return self.code is not None
