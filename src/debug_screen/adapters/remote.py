"""Source locator that fetches module sources over HTTP.

Useful when the running code was deployed without its sources, e.g. a
container built from a wheel, while the repository is reachable through a
raw-file URL such as ``https://raw.githubusercontent.com/owner/repo/main/src``.
"""

from __future__ import annotations

import httpx
import structlog

from debug_screen.core.locators import SOURCE_EXTENSION, module_to_relative_path
from debug_screen.core.source_file import SourceFile
from debug_screen.models.frame import StackFrameDescriptor
from debug_screen.utils.logging import LogEventNames

log = structlog.get_logger()

DEFAULT_TIMEOUT = 2.0


class RemoteSourceLocator:
    """Resolves a frame's module against a base URL.

    Example:
        locator = RemoteSourceLocator(
            "https://raw.githubusercontent.com/owner/repo/main/src"
        )
        enable_debug_screen(app, LocalSourceLocator("./src"), locator)
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        extension: str = SOURCE_EXTENSION,
    ) -> None:
        """Initialize the locator.

        Args:
            base_url: URL that module paths are appended to
            client: HTTP client to use. If None, creates one.
            timeout: Request timeout in seconds (only for the owned client)
            extension: Source file extension
        """
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._extension = extension

    def find_file_for_frame(self, frame: StackFrameDescriptor) -> SourceFile | None:
        """Fetch the frame's module from the remote location."""
        if not frame.type_name or frame.type_name == "__main__":
            return None

        for relative in module_to_relative_path(frame.type_name, self._extension):
            url = f"{self._base_url}/{relative.as_posix()}"
            try:
                response = self._client.get(url)
            except httpx.HTTPError as e:
                log.debug(LogEventNames.REMOTE_SOURCE_FETCH_FAILED, url=url, error=str(e))
                return None

            if response.is_success:
                return SourceFile.from_text(url, response.text)

        return None

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
