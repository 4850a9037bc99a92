from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest
import requests

FIXTURES = Path(__file__).parent / "fixtures"


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


class FakeResponse:
    def __init__(self, chunks: List[bytes], status_code: int = 200, fail_after: Optional[int] = None) -> None:
        self.chunks = chunks
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def iter_content(self, chunk_size: int = 1):
        for idx, chunk in enumerate(self.chunks):
            if self.fail_after is not None and idx >= self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead")
            yield chunk

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.closed = True


Outcome = Union[bytes, FakeResponse, Exception]


class FakeSession:
    """Routes GETs by URL prefix; unknown URLs fail with a connection error."""

    def __init__(self, routes: Optional[Dict[str, Outcome]] = None) -> None:
        self.routes: Dict[str, Outcome] = dict(routes or {})
        self.calls: List[tuple[str, object]] = []

    def get(self, url: str, stream: bool = False, timeout=None):
        self.calls.append((url, timeout))
        for prefix, outcome in self.routes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, bytes):
                    return FakeResponse([outcome])
                return outcome
        raise requests.ConnectionError(f"Failed to establish a new connection to {url}")

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sample_xml() -> bytes:
    return (FIXTURES / "overpass_sample.xml").read_bytes()


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse
