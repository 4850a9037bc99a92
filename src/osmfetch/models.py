from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from .errors import TransportError

if TYPE_CHECKING:  # pragma: no cover
    from .ingest.osm_xml import OsmXmlStream


@dataclass(frozen=True, slots=True)
class RenderedKey:
    cache_file_base_name: str
    query_fragment: str


@dataclass(slots=True)
class CachedOsmData:
    """Open reader over a cached artifact plus the artifact's creation time.

    The caller owns the reader and must close it.
    """

    reader: "OsmXmlStream"
    timestamp: int
    path: Path

    def close(self) -> None:
        self.reader.close()

    def __enter__(self) -> "CachedOsmData":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass(slots=True)
class DownloadResult:
    ok: bool
    url: Optional[str] = None
    path: Optional[Path] = None
    errors: List[TransportError] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(slots=True)
class RunSummary:
    found: bool
    generated_at: datetime
    path: Optional[str] = None
    timestamp: Optional[int] = None
    fetched_at: Optional[str] = None
    element_counts: Dict[str, int] = field(default_factory=dict)
