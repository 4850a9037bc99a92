import pytest

from osmfetch.geo import BoundingBox


def test_bbox_renders_overpass_order():
    bbox = BoundingBox(south=-33.9, west=151.1, north=-33.8, east=151.3)
    assert str(bbox) == "-33.9,151.1,-33.8,151.3"


def test_cache_file_base_name_is_filesystem_safe():
    bbox = BoundingBox(south=-33.9, west=151.1, north=-33.8, east=151.3)
    assert bbox.cache_file_base_name == "bbox_m33d900000_151d100000_m33d800000_151d300000"


@pytest.mark.parametrize(
    "coords",
    [
        (91.0, 0.0, 92.0, 1.0),
        (0.0, -181.0, 1.0, 0.0),
        (2.0, 0.0, 1.0, 1.0),
        (0.0, 2.0, 1.0, 1.0),
    ],
)
def test_invalid_bbox_is_rejected(coords):
    south, west, north, east = coords
    with pytest.raises(ValueError):
        BoundingBox(south=south, west=west, north=north, east=east)
