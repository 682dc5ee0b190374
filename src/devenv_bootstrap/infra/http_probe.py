from __future__ import annotations

from typing import Optional

import requests


class HttpProbe:
    """Status-code probe over requests."""

    def __init__(self, *, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()

    def get_status(self, url: str, *, timeout: float) -> Optional[int]:
        try:
            resp = self._session.get(url, timeout=timeout, allow_redirects=False)
        except requests.RequestException:
            return None
        resp.close()
        return resp.status_code
