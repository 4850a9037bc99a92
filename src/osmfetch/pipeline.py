from __future__ import annotations

import logging

from .config import AppSettings
from .errors import CacheReadError
from .geo import BoundingBox
from .ingest.cache import CacheDirectory
from .ingest.osm_xml import count_elements
from .ingest.overpass import EndpointFetcher
from .loader import OsmDataLoader
from .models import RunSummary
from .util.http import create_session
from .util.logging import setup_logging
from .util.time import format_timestamp, now_utc

LOGGER = logging.getLogger(__name__)


def build_loader(settings: AppSettings, session=None) -> OsmDataLoader:
    session = session or create_session(settings.user_agent, timeout=settings.timeout)
    cache = CacheDirectory(settings.cache_dir, settings.cache_ext, settings.cache_validity)
    fetcher = EndpointFetcher(session, timeout=settings.timeout)
    return OsmDataLoader(settings.endpoints, cache, fetcher)


def run_pipeline(settings: AppSettings, bbox: BoundingBox, session=None) -> RunSummary:
    setup_logging(settings.logs_dir, settings.log_level)
    loader = build_loader(settings, session)
    generated_at = now_utc()

    data = loader.get_data(bbox, force_refresh=settings.no_cache)
    if data is None:
        return RunSummary(found=False, generated_at=generated_at)

    with data:
        try:
            counts = count_elements(data.reader)
        except CacheReadError as exc:
            LOGGER.warning("Unable to count elements in %s: %s", data.path, exc)
            counts = {}

    return RunSummary(
        found=True,
        generated_at=generated_at,
        path=str(data.path),
        timestamp=data.timestamp,
        fetched_at=format_timestamp(data.timestamp),
        element_counts=counts,
    )
