from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Callable, Dict, Optional

from ..errors import CacheEntryNotFound
from ..util.time import duration_millis, now_millis

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    path: Path
    timestamp: int


class CacheDirectory:
    """Directory of downloaded artifacts named ``<base>_<millis><ext>``.

    Only the newest file per base name is visible to lookups. Older files
    stay on disk.
    """

    def __init__(
        self,
        root: Path,
        extension: str = ".xml",
        max_validity: timedelta = timedelta(days=60),
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.root = Path(root)
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self.max_validity = max_validity
        self.clock = clock
        self._index: Dict[str, CacheEntry] = {}
        self.root.mkdir(parents=True, exist_ok=True)
        self.refresh()

    @property
    def max_validity_millis(self) -> int:
        return duration_millis(self.max_validity)

    def _decode(self, path: Path) -> Optional[tuple[str, int]]:
        name = path.name
        if not name.endswith(self.extension):
            return None
        stem = name[: -len(self.extension)]
        base_name, sep, stamp = stem.rpartition("_")
        if not sep or not base_name or not stamp.isdigit():
            return None
        return base_name, int(stamp)

    def refresh(self) -> None:
        index: Dict[str, CacheEntry] = {}
        for path in sorted(self.root.iterdir()):
            if not path.is_file():
                continue
            decoded = self._decode(path)
            if decoded is None:
                continue
            base_name, timestamp = decoded
            current = index.get(base_name)
            # ties keep the lexically first path
            if current is None or timestamp > current.timestamp:
                index[base_name] = CacheEntry(path=path, timestamp=timestamp)
        self._index = index
        LOGGER.debug("Indexed %d cached base names under %s", len(index), self.root)

    def contains(self, base_name: str) -> bool:
        return base_name in self._index

    def _entry(self, base_name: str) -> CacheEntry:
        try:
            return self._index[base_name]
        except KeyError:
            raise CacheEntryNotFound(base_name) from None

    def is_out_of_date(self, base_name: str) -> bool:
        age = self.clock() - self._entry(base_name).timestamp
        return age > self.max_validity_millis

    def make_cache_file_path(self, base_name: str, timestamp: int) -> Path:
        return self.root / f"{base_name}_{timestamp}{self.extension}"

    def get_existing_cached_file_path(self, base_name: str) -> Path:
        return self._entry(base_name).path

    def get_existing_cached_file_timestamp(self, base_name: str) -> int:
        return self._entry(base_name).timestamp
