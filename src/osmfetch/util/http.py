from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "osmfetch/0.1 (+https://wiki.openstreetmap.org/wiki/Overpass_API)"


class TimeoutHTTPAdapter(HTTPAdapter):
    def __init__(self, *args, timeout: float = DEFAULT_TIMEOUT, **kwargs) -> None:
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request, **kwargs):  # type: ignore[override]
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(user_agent: str = DEFAULT_USER_AGENT, timeout: float = DEFAULT_TIMEOUT, retries: int = 0) -> requests.Session:
    """Session whose requests never block longer than ``timeout`` per read.

    Retries default to zero: callers fall back across endpoints instead.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    adapter = TimeoutHTTPAdapter(max_retries=retry, timeout=timeout)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session
