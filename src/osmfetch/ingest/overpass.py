from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from typing import Any, Callable, Sequence, TypeVar

import requests

from ..errors import MalformedUrlError, TransportError
from ..geo import BoundingBox
from ..models import DownloadResult, RenderedKey
from ..util.http import DEFAULT_TIMEOUT
from ..util.time import now_millis
from .cache import CacheDirectory

LOGGER = logging.getLogger(__name__)

DEFAULT_ENDPOINTS = (
    "http://overpass-api.de/api/",
    "http://overpass.preprocessors.osm.rambler.ru/cgi/",
)
CHUNK_SIZE = 64 * 1024

K = TypeVar("K")

_MALFORMED = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
)


def render_bbox_query(bbox: BoundingBox) -> RenderedKey:
    # Overpass QL: all nodes in the box plus everything referencing them
    fragment = f"interpreter?data=(node({bbox});<;);out%20body;"
    return RenderedKey(cache_file_base_name=bbox.cache_file_base_name, query_fragment=fragment)


def _part_path(target: Path) -> Path:
    return target.with_name(target.name + ".part")


class EndpointFetcher:
    def __init__(
        self,
        session: Any,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], int] = now_millis,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.session = session
        self.timeout = timeout
        self.clock = clock
        self.chunk_size = chunk_size

    def _transfer(self, url: str, target: Path) -> None:
        part = _part_path(target)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                with part.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            fh.write(chunk)
            os.replace(part, target)
        except _MALFORMED as exc:
            raise MalformedUrlError(url, str(exc)) from exc
        except (requests.RequestException, OSError) as exc:
            raise TransportError(url, str(exc)) from exc
        finally:
            with contextlib.suppress(FileNotFoundError):
                part.unlink()

    def download_from_endpoint(self, endpoint: str, rendered: RenderedKey, cache: CacheDirectory) -> Path:
        url = endpoint + rendered.query_fragment
        LOGGER.info("Attempting to download OSM data from: %s", url)
        target = cache.make_cache_file_path(rendered.cache_file_base_name, self.clock())
        self._transfer(url, target)
        try:
            cache.refresh()
        except OSError as exc:
            raise TransportError(url, f"rescan of {cache.root} failed: {exc}") from exc
        return target

    def download_and_cache(
        self,
        endpoints: Sequence[str],
        key: K,
        render_query: Callable[[K], RenderedKey],
        cache: CacheDirectory,
    ) -> DownloadResult:
        rendered = render_query(key)
        errors: list[TransportError] = []
        for endpoint in endpoints:
            try:
                path = self.download_from_endpoint(endpoint, rendered, cache)
            except TransportError as exc:
                LOGGER.error("%s", exc)
                errors.append(exc)
                continue
            LOGGER.info("OSM data successfully downloaded and cached at %s", path)
            return DownloadResult(ok=True, url=endpoint + rendered.query_fragment, path=path, errors=errors)
        return DownloadResult(ok=False, errors=errors)
