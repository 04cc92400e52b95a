"""Access to located source files and the lines around a failure point.

A SourceFile is only ever built for a path that could actually be read;
construction never raises to the caller. Windows of lines are keyed by
1-based line numbers so they can be rendered with their real numbering.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import structlog

from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

# Lines shown before and after the target line
DEFAULT_CONTEXT_LINES = 10

LineWindow = dict[int, str]


def split_source_lines(text: str) -> tuple[str, ...]:
    """Split source text into lines the way the interpreter numbers them.

    Only newlines end a line; form feeds and Unicode separators such as
    U+2028 stay inside the line they appear in.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return tuple(lines)


@dataclass(frozen=True)
class SourceFile:
    """A resolvable source file and its text lines (1-indexed)."""

    path: str
    lines: tuple[str, ...]
    local: bool = True

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> SourceFile | None:
        """Load a file from disk.

        Args:
            path: Candidate path of the source file

        Returns:
            SourceFile with the file's lines, or None if the path is not a
            readable file
        """
        candidate = Path(path)

        if not candidate.is_file():
            return None

        try:
            with candidate.open(encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError as e:
            log.debug(LogEventNames.SOURCE_FILE_UNREADABLE, path=str(candidate), error=str(e))
            return None

        return cls(path=str(candidate), lines=split_source_lines(content))

    @classmethod
    def from_text(cls, path: str, text: str) -> SourceFile:
        """Build a SourceFile from text obtained elsewhere (e.g. over HTTP)."""
        return cls(path=path, lines=split_source_lines(text), local=False)

    @property
    def line_count(self) -> int:
        """Number of lines in the file."""
        return len(self.lines)

    def get_window(
        self,
        target_line: int,
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ) -> LineWindow | None:
        """Get the lines surrounding a target line.

        Args:
            target_line: Line to center the window on (1-indexed)
            context_lines: Number of lines to include before and after

        Returns:
            Mapping of line number to text for the clamped window, or None if
            the target line is outside the file
        """
        last_line = self.line_count
        if target_line < 1 or target_line > last_line:
            return None

        start = max(1, target_line - context_lines)
        end = min(last_line, target_line + context_lines)

        return {number: self.lines[number - 1] for number in range(start, end + 1)}

    def get_path(self) -> str:
        """Return the canonical absolute path of the file.

        Files that did not come from disk report their original location.

        Raises:
            OSError: If the path can no longer be resolved
        """
        if not self.local:
            return self.path
        return str(Path(self.path).resolve(strict=True))
