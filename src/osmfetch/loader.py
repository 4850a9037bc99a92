from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from .errors import CacheReadError
from .ingest.cache import CacheDirectory
from .ingest.osm_xml import OsmXmlStream, stream_xml_file
from .ingest.overpass import EndpointFetcher, render_bbox_query
from .models import CachedOsmData, RenderedKey

LOGGER = logging.getLogger(__name__)

K = TypeVar("K")


class OsmDataLoader:
    """Serves OSM data from the cache, downloading when missing or stale.

    A stale entry is still served when the refresh fails. Absence is only
    reported when no cached copy exists at all or it cannot be opened.
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        cache: CacheDirectory,
        fetcher: EndpointFetcher,
        open_stream: Callable[[Path], OsmXmlStream] = stream_xml_file,
    ) -> None:
        if not endpoints:
            raise ValueError("At least one endpoint is required")
        self.endpoints = tuple(endpoints)
        self.cache = cache
        self.fetcher = fetcher
        self.open_stream = open_stream

    def get_data(
        self,
        key: K,
        render_query: Callable[[K], RenderedKey] = render_bbox_query,
        force_refresh: bool = False,
    ) -> Optional[CachedOsmData]:
        base_name = render_query(key).cache_file_base_name
        LOGGER.info("Loading OSM data for %s (cache file base name %s)", key, base_name)

        self._update_cache_if_necessary(key, base_name, render_query, force_refresh)

        if not self.cache.contains(base_name):
            LOGGER.error("Could not load data for %s from cache or web", base_name)
            return None
        return self._load_from_cache(base_name)

    def _update_cache_if_necessary(self, key, base_name: str, render_query, force_refresh: bool) -> None:
        if not force_refresh and self.cache.contains(base_name) and not self.cache.is_out_of_date(base_name):
            LOGGER.info("Recently cached OSM data can be loaded for %s", base_name)
            return
        LOGGER.info("Downloading data for %s", base_name)
        result = self.fetcher.download_and_cache(self.endpoints, key, render_query, self.cache)
        if not result:
            LOGGER.error(
                "Couldn't download OSM data for %s from any of %d endpoints. Are you connected to the internet?",
                base_name,
                len(self.endpoints),
            )

    def _load_from_cache(self, base_name: str) -> Optional[CachedOsmData]:
        path = self.cache.get_existing_cached_file_path(base_name)
        timestamp = self.cache.get_existing_cached_file_timestamp(base_name)
        try:
            reader = self.open_stream(path)
        except CacheReadError as exc:
            LOGGER.error("%s", exc)
            return None
        except (OSError, LookupError, ValueError) as exc:
            LOGGER.error("Could not read cached OSM file %s (%s)", path, exc)
            return None
        return CachedOsmData(reader=reader, timestamp=timestamp, path=path)
