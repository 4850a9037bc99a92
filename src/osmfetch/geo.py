from __future__ import annotations

from dataclasses import dataclass


def _slug(value: float) -> str:
    return f"{value:.6f}".replace("-", "m").replace(".", "d")


@dataclass(frozen=True, slots=True)
class BoundingBox:
    south: float
    west: float
    north: float
    east: float

    def __post_init__(self) -> None:
        for lat in (self.south, self.north):
            if not -90.0 <= lat <= 90.0:
                raise ValueError(f"Latitude out of range: {lat}")
        for lon in (self.west, self.east):
            if not -180.0 <= lon <= 180.0:
                raise ValueError(f"Longitude out of range: {lon}")
        if self.south > self.north:
            raise ValueError(f"South edge {self.south} lies north of north edge {self.north}")
        if self.west > self.east:
            raise ValueError(f"West edge {self.west} lies east of east edge {self.east}")

    @property
    def cache_file_base_name(self) -> str:
        parts = (self.south, self.west, self.north, self.east)
        return "bbox_" + "_".join(_slug(p) for p in parts)

    def __str__(self) -> str:
        # Overpass QL bbox order
        return f"{self.south},{self.west},{self.north},{self.east}"
