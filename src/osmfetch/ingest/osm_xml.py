from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Tuple
from xml.etree import ElementTree as ET

from ..errors import CacheReadError

OSM_ELEMENT_TAGS = ("node", "way", "relation")

XmlEvent = Tuple[str, ET.Element]


class OsmXmlStream:
    """Forward-only ``(event, element)`` reader over an XML file.

    Opening reads the first event so that unreadable or non-XML files fail
    immediately instead of on first use.
    """

    def __init__(self, path: Path, handle: BinaryIO) -> None:
        self.path = path
        self._handle = handle
        self._events = ET.iterparse(handle, events=("start", "end"))
        try:
            first = self._next_event()
        except StopIteration:
            raise CacheReadError(path, "empty document") from None
        self._pending: List[XmlEvent] = [first]
        self._consumed = False

    def _next_event(self) -> XmlEvent:
        try:
            return next(self._events)
        except ET.ParseError as exc:
            raise CacheReadError(self.path, f"malformed XML: {exc}") from exc
        except (OSError, LookupError, ValueError) as exc:
            # unknown declared encodings surface as LookupError
            raise CacheReadError(self.path, str(exc)) from exc

    @property
    def root_tag(self) -> str:
        return self._pending[0][1].tag if self._pending else ""

    def __iter__(self) -> Iterator[XmlEvent]:
        if self._consumed:
            raise RuntimeError(f"XML stream for {self.path} was already consumed")
        self._consumed = True
        while self._pending:
            yield self._pending.pop(0)
        while True:
            try:
                yield self._next_event()
            except StopIteration:
                return

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "OsmXmlStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def stream_xml_file(path: Path) -> OsmXmlStream:
    try:
        handle = Path(path).open("rb")
    except OSError as exc:
        raise CacheReadError(Path(path), str(exc)) from exc
    try:
        return OsmXmlStream(Path(path), handle)
    except BaseException:
        handle.close()
        raise


def count_elements(events: Iterable[XmlEvent], tags: Iterable[str] = OSM_ELEMENT_TAGS) -> dict[str, int]:
    wanted = set(tags)
    counts: Counter[str] = Counter({tag: 0 for tag in wanted})
    for event, elem in events:
        if event != "end" or elem.tag not in wanted:
            continue
        counts[elem.tag] += 1
        elem.clear()
    return dict(counts)
