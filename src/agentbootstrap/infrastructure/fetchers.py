"""Template sources: the bundled local tree or a remote raw-file host.

Both fetchers turn a template-relative path such as
``.claude/settings.json`` into the file's bytes. The materializer never
looks inside those bytes.
"""

from __future__ import annotations

import http.client
import ssl
from pathlib import Path
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlparse
from urllib.request import Request, urlopen

import structlog

__all__ = [
    "DEFAULT_TEMPLATE_BASE_URL",
    "FetchError",
    "LocalFetcher",
    "RemoteFetcher",
    "SourceFetcher",
]

logger = structlog.get_logger()

DEFAULT_TEMPLATE_BASE_URL = (
    "https://raw.githubusercontent.com/sankethshetty99/claude-code-config/main/template"
)


class FetchError(Exception):
    """Raised when a template source cannot be read."""

    def __init__(
        self, message: str, source: str, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class SourceFetcher(Protocol):
    """Anything that can produce the bytes of a template file."""

    def fetch(self, source_path: str) -> bytes:
        """Return the content of the template at source_path.

        Raises:
            FetchError: If the template cannot be read.
        """
        ...

    def describe(self) -> str:
        """Human-readable description of where templates come from."""
        ...


class LocalFetcher:
    """Reads templates from a directory tree on disk."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def describe(self) -> str:
        return str(self.root)

    def fetch(self, source_path: str) -> bytes:
        root = self.root.resolve()
        path = (root / source_path).resolve()

        # Reject sources that climb out of the template tree
        if not path.is_relative_to(root):
            raise FetchError(
                f"Template path escapes template root: {source_path}",
                source=source_path,
            )

        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise FetchError(
                f"Template not found: {path}", source=source_path
            ) from e
        except OSError as e:
            raise FetchError(
                f"Cannot read template {path}: {e}", source=source_path
            ) from e

        logger.debug("template_read", source=source_path, size=len(data))
        return data


class RemoteFetcher:
    """Downloads templates with a plain HTTP GET against a base URL."""

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(self, base_url: str, timeout: float | None = None) -> None:
        """Initialize the remote fetcher.

        Args:
            base_url: URL the template-relative paths are appended to.
            timeout: Request timeout in seconds (default: 30).

        Raises:
            ValueError: If the URL is not http(s).
        """
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"Invalid template URL: {base_url} (expected http(s)://host/path)"
            )

        self.base_url = base_url.rstrip("/")
        self._timeout = timeout or self.DEFAULT_TIMEOUT
        self._ssl_context = ssl.create_default_context()

    def describe(self) -> str:
        return self.base_url

    def url_for(self, source_path: str) -> str:
        """Build the download URL for a template-relative path."""
        return f"{self.base_url}/{quote(source_path.lstrip('/'))}"

    def fetch(self, source_path: str) -> bytes:
        url = self.url_for(source_path)
        logger.debug("template_download", url=url)

        try:
            request = Request(url, method="GET")
            with urlopen(request, timeout=self._timeout, context=self._ssl_context) as response:
                status: int = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    raise FetchError(
                        f"HTTP {status} for {url}",
                        source=source_path,
                        status_code=status,
                    )
                data: bytes = response.read()
        except HTTPError as e:
            raise FetchError(
                f"HTTP {e.code}: {e.reason} for {url}",
                source=source_path,
                status_code=e.code,
            ) from e
        except URLError as e:
            raise FetchError(
                f"Failed to connect to {url}: {e.reason}",
                source=source_path,
            ) from e
        except TimeoutError as e:
            raise FetchError(
                f"Request timed out for {url}",
                source=source_path,
            ) from e
        except (OSError, http.client.HTTPException) as e:
            # Resets and truncated bodies surface while reading the response
            raise FetchError(
                f"Download failed for {url}: {e}",
                source=source_path,
            ) from e

        logger.debug("template_downloaded", url=url, size=len(data))
        return data
