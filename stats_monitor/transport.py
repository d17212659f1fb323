"""HTTP transport for fetching the remote stats payload."""

from typing import Optional, Tuple

import requests

from .types import TransportError


class HttpTransport:
    """Performs a single blocking GET per fetch and returns (status_code, body)."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def fetch(self, url: str, timeout: float) -> Tuple[int, bytes]:
        try:
            resp = self.session.get(url, timeout=timeout)
            return resp.status_code, resp.content
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

    def close(self) -> None:
        self.session.close()
