"""Source locators that map stack frames back to files.

This module implements the built-in SourceLocator strategies and the
first-match-wins evaluation of a locator chain:
- LocalSourceLocator: module name to path under a root directory
- FrameFileSourceLocator: the filename recorded by the interpreter
- CachingSourceLocator: TTL cache in front of another locator

A locator miss is never an error; the frame is simply rendered without a
code snippet.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable
from pathlib import Path

import structlog
from cachetools import TTLCache

from debug_screen.core.source_file import SourceFile
from debug_screen.interfaces.locator import SourceLocator
from debug_screen.models.frame import StackFrameDescriptor
from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

SOURCE_EXTENSION = ".py"
PACKAGE_INIT = "__init__"


def module_to_relative_path(
    type_name: str,
    extension: str = SOURCE_EXTENSION,
    nested_separator: str | None = None,
) -> list[Path]:
    """Map a dotted module name to candidate relative file paths.

    Args:
        type_name: Fully-qualified name, e.g. "myapp.views"
        extension: Source file extension to append
        nested_separator: If set, everything from its first occurrence is
            stripped before mapping (for naming schemes with nested types)

    Returns:
        Candidate paths in lookup order: module file, then package init
    """
    if nested_separator and nested_separator in type_name:
        type_name = type_name.split(nested_separator, 1)[0]

    parts = [part for part in type_name.split(".") if part]
    if not parts:
        return []

    module_path = Path(*parts)
    return [
        module_path.with_name(module_path.name + extension),
        module_path / (PACKAGE_INIT + extension),
    ]


class LocalSourceLocator:
    """Finds sources under a root directory using module-to-path conventions.

    Example:
        locator = LocalSourceLocator("./src")
        # frame.type_name == "myapp.views" -> ./src/myapp/views.py
        source = locator.find_file_for_frame(frame)
    """

    def __init__(
        self,
        root_dir: str | os.PathLike[str],
        extension: str = SOURCE_EXTENSION,
        nested_separator: str | None = None,
    ) -> None:
        """Initialize the locator.

        Args:
            root_dir: Directory module paths are resolved against; it does
                not need to exist
            extension: Source file extension
            nested_separator: Optional nested-name separator to strip
        """
        self._root = Path(root_dir)
        self._extension = extension
        self._nested_separator = nested_separator

    @property
    def root(self) -> Path:
        """Root directory this locator resolves against."""
        return self._root

    def find_file_for_frame(self, frame: StackFrameDescriptor) -> SourceFile | None:
        """Locate the frame's module under the root directory."""
        if not frame.type_name or frame.type_name == "__main__":
            return None

        if not self._root.is_dir():
            return None

        for relative in module_to_relative_path(
            frame.type_name, self._extension, self._nested_separator
        ):
            source = SourceFile.from_path(self._root / relative)
            if source is not None:
                return source

        return None

    def __repr__(self) -> str:
        return f"LocalSourceLocator({str(self._root)!r})"


class FrameFileSourceLocator:
    """Reads the file the interpreter recorded for the frame.

    Pseudo-files such as "<string>" or "<frozen ...>" are skipped.
    """

    def find_file_for_frame(self, frame: StackFrameDescriptor) -> SourceFile | None:
        """Locate the frame's own filename on disk."""
        if not frame.path or frame.path.startswith("<"):
            return None
        return SourceFile.from_path(frame.path)


class CachingSourceLocator:
    """Caches another locator's results by frame location.

    Entries expire after ``ttl`` seconds so edited files show up again
    without restarting the development server.
    """

    def __init__(self, inner: SourceLocator, maxsize: int = 256, ttl: float = 60.0) -> None:
        """Initialize the cache.

        Args:
            inner: Locator whose results are cached
            maxsize: Maximum number of cached lookups
            ttl: Time-to-live in seconds for cached lookups
        """
        self._inner = inner
        self._cache: TTLCache[tuple[str | None, str | None], SourceFile | None] = TTLCache(
            maxsize=maxsize,
            ttl=ttl,
        )
        self._lock = threading.Lock()

    def find_file_for_frame(self, frame: StackFrameDescriptor) -> SourceFile | None:
        """Return the cached lookup, consulting the inner locator on a miss."""
        key = (frame.type_name, frame.path)

        with self._lock:
            if key in self._cache:
                return self._cache[key]

        source = self._inner.find_file_for_frame(frame)

        with self._lock:
            self._cache[key] = source

        return source

    def clear(self) -> None:
        """Drop all cached lookups."""
        with self._lock:
            self._cache.clear()


def find_file_for_frame(
    locators: Iterable[SourceLocator],
    frame: StackFrameDescriptor,
) -> SourceFile | None:
    """Try each locator in order and return the first file found.

    Exceptions raised by a locator propagate to the caller.
    """
    for locator in locators:
        source = locator.find_file_for_frame(frame)
        if source is not None:
            return source

    log.debug(LogEventNames.SOURCE_NOT_LOCATED, module=frame.type_name, file=frame.file_name)
    return None
