"""Data model for one entry of a flattened exception chain."""

from dataclasses import dataclass

from .frame import FrameView


@dataclass(frozen=True)
class ExceptionRecord:
    """A single exception in the chain shown on the debug page."""

    message: str
    short_message: str
    full_trace: str
    show_full_trace: bool
    plain_exception: str
    name: tuple[str, ...]  # e.g., ("myapp", "errors", "BadInput")
    basic_type: str  # e.g., "BadInput"
    type: str  # e.g., "myapp.errors.BadInput"
    suppressed: bool
    frames: tuple[FrameView, ...] = ()

    @property
    def innermost_frame(self) -> FrameView | None:
        """The frame where the exception was raised, if any."""
        return self.frames[0] if self.frames else None
