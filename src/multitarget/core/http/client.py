"""
HTTP Client Utilities
=====================

Provides the HTTP client used to read raw files from a source host.

Features:
- One requests Session per client with a fixed User-Agent
- A single attempt per request (retries are disabled)
- Non-success responses and transport errors are reported as "no content"
  so callers can move on to the next candidate URL
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from multitarget import __version__

logger = logging.getLogger(__name__)


class RawContentClient:
    """
    HTTP client for fetching raw text files.

    Args:
        timeout: Request timeout in seconds (default: 30).
        user_agent: User-Agent header value.

    Example:
        >>> client = RawContentClient(timeout=10)
        >>> text = client.get_text("https://raw.githubusercontent.com/o/r/main/Cargo.toml")
        >>> if text is None:
        ...     print("not found")
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = f"multitarget/{__version__}",
    ):
        self.timeout = timeout
        self.user_agent = user_agent

        self.session = requests.Session()
        adapter = HTTPAdapter(max_retries=Retry(total=0, redirect=5, raise_on_status=False))
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": user_agent})

    def get_text(self, url: str) -> Optional[str]:
        """
        Make a single GET request and return the body on HTTP 200.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Response text, or None if the request failed or returned any
            other status.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"GET {url} failed: {e}")
            return None

        if response.status_code != 200:
            logger.debug(f"GET {url} returned HTTP {response.status_code}")
            return None

        return response.text

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
