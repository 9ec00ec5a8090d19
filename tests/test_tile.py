import pytest

from geovt.tile import InternalTile, Tile, empty_tile
from geovt.types import (
    BBox,
    GeometryKind,
    Point2D,
    VtFeature,
    VtGeometry,
    VtLinearRing,
    VtLineString,
    VtPoint,
    make_feature,
)

EXTENT = 4096


def _point_feature(x, y, props=None, feature_id=None):
    return make_feature(VtGeometry(GeometryKind.POINT, VtPoint(x, y)), props or {}, feature_id)


def _line(points, dist, seg_start=0.0, seg_end=None):
    return VtLineString(
        elements=points,
        dist=dist,
        seg_start=seg_start,
        seg_end=dist if seg_end is None else seg_end,
    )


def _build(features, z=0, x=0, y=0, tolerance=0.0, line_metrics=False, extent=EXTENT):
    return InternalTile(features, z, x, y, extent, tolerance, line_metrics)


def test_empty_tile_has_nothing():
    tile = empty_tile()
    assert tile == Tile([], 0, 0)
    assert tile.features == []


def test_empty_tiles_are_independent():
    first = empty_tile()
    first.features.append({"type": "Feature"})
    assert empty_tile().features == []


def test_point_feature_transformed_to_tile_coordinates():
    tile = _build([_point_feature(0.0, 1.0)])
    assert len(tile.tile.features) == 1
    feature = tile.tile.features[0]
    assert feature["geometry"] == {"type": "Point", "coordinates": [0.0, float(EXTENT)]}
    assert feature["properties"] is None
    assert "id" not in feature
    assert tile.tile.num_points == 1
    assert tile.tile.num_simplified == 1


def test_properties_and_id_are_kept():
    tile = _build([_point_feature(0.0, 0.0, {"name": "a"}, "f1")])
    feature = tile.tile.features[0]
    assert feature["properties"] == {"name": "a"}
    assert feature["id"] == "f1"


def test_tile_offset_applies_to_coordinates():
    tile = _build([_point_feature(1.0, 1.0)], z=1, x=1, y=1)
    assert tile.tile.features[0]["geometry"]["coordinates"] == [float(EXTENT), float(EXTENT)]


@pytest.mark.parametrize(
    "x, expected",
    [(0.5, 1.0), (2.5, 3.0), (-0.5, -1.0)],
)
def test_rounding_is_half_away_from_zero(x, expected):
    feature = VtFeature(VtGeometry(GeometryKind.POINT, VtPoint(x, 0.0)), {}, None, BBox(), 1)
    tile = _build([feature], extent=1)
    assert tile.tile.features[0]["geometry"]["coordinates"][0] == expected


def test_multi_point_with_one_point_becomes_point():
    geometry = VtGeometry(GeometryKind.MULTI_POINT, [VtPoint(0.0, 0.0)])
    tile = _build([make_feature(geometry, {}, None)])
    assert tile.tile.features[0]["geometry"]["type"] == "Point"


def test_multi_point_with_several_points():
    geometry = VtGeometry(GeometryKind.MULTI_POINT, [VtPoint(0.0, 0.0), VtPoint(1.0, 1.0)])
    tile = _build([make_feature(geometry, {}, None)])
    geom = tile.tile.features[0]["geometry"]
    assert geom["type"] == "MultiPoint"
    assert geom["coordinates"] == [[0.0, 0.0], [float(EXTENT), float(EXTENT)]]
    assert tile.tile.num_simplified == 2


def test_line_string_drops_unimportant_points():
    points = [VtPoint(0.0, 0.0, 1.0), VtPoint(0.5, 0.5, 0.0), VtPoint(1.0, 1.0, 1.0)]
    line = _line(points, dist=1.0)
    tile = _build([make_feature(VtGeometry(GeometryKind.LINE_STRING, line), {}, None)])
    geom = tile.tile.features[0]["geometry"]
    assert geom["type"] == "LineString"
    assert geom["coordinates"] == [[0.0, 0.0], [float(EXTENT), float(EXTENT)]]
    assert tile.tile.num_points == 3
    assert tile.tile.num_simplified == 2


def test_short_line_is_dropped():
    points = [VtPoint(0.0, 0.0, 1.0), VtPoint(0.0, 0.0, 1.0)]
    line = _line(points, dist=0.0)
    tile = _build(
        [make_feature(VtGeometry(GeometryKind.LINE_STRING, line), {}, None)], tolerance=0.1
    )
    assert tile.tile.features == []
    assert tile.tile.num_points == 2
    assert tile.tile.num_simplified == 0


def test_line_metrics_whole_line():
    points = [VtPoint(0.0, 0.0, 1.0), VtPoint(1.0, 0.0, 1.0)]
    line = _line(points, dist=1.0)
    tile = _build(
        [make_feature(VtGeometry(GeometryKind.LINE_STRING, line), {"k": "v"}, None)],
        line_metrics=True,
    )
    props = tile.tile.features[0]["properties"]
    assert props["k"] == "v"
    assert props["mapbox_clip_start"] == 0
    assert isinstance(props["mapbox_clip_start"], int)
    assert props["mapbox_clip_end"] == 1
    assert isinstance(props["mapbox_clip_end"], int)


def test_line_metrics_fractional():
    points = [VtPoint(0.0, 0.0, 1.0), VtPoint(1.0, 0.0, 1.0)]
    line = _line(points, dist=2.0, seg_start=1.0, seg_end=2.0)
    tile = _build(
        [make_feature(VtGeometry(GeometryKind.LINE_STRING, line), {}, None)],
        line_metrics=True,
    )
    props = tile.tile.features[0]["properties"]
    assert props["mapbox_clip_start"] == pytest.approx(0.5)
    assert props["mapbox_clip_end"] == 1


def test_line_metrics_do_not_leak_into_source_properties():
    points = [VtPoint(0.0, 0.0, 1.0), VtPoint(1.0, 0.0, 1.0)]
    source_props = {"k": "v"}
    line = _line(points, dist=1.0)
    feature = make_feature(VtGeometry(GeometryKind.LINE_STRING, line), source_props, None)
    _build([feature], line_metrics=True)
    assert feature.properties == {"k": "v"}


def test_multi_line_string_with_one_kept_line_becomes_line_string():
    kept = _line([VtPoint(0.0, 0.0, 1.0), VtPoint(1.0, 0.0, 1.0)], dist=1.0)
    dropped = _line([VtPoint(0.0, 0.0, 1.0), VtPoint(0.0, 0.0, 1.0)], dist=0.0)
    geometry = VtGeometry(GeometryKind.MULTI_LINE_STRING, [kept, dropped])
    tile = _build([make_feature(geometry, {}, None)], tolerance=0.1)
    geom = tile.tile.features[0]["geometry"]
    assert geom["type"] == "LineString"
    assert len(geom["coordinates"]) == 2


def _square(area):
    points = [
        VtPoint(0.0, 0.0, 1.0),
        VtPoint(1.0, 0.0, 1.0),
        VtPoint(1.0, 1.0, 1.0),
        VtPoint(0.0, 0.0, 1.0),
    ]
    return VtLinearRing(points, area)


def test_polygon_ring_kept_and_closed():
    geometry = VtGeometry(GeometryKind.POLYGON, [_square(0.5)])
    tile = _build([make_feature(geometry, {}, None)])
    geom = tile.tile.features[0]["geometry"]
    assert geom["type"] == "Polygon"
    assert len(geom["coordinates"]) == 1
    ring = geom["coordinates"][0]
    assert ring[0] == ring[-1]
    assert len(ring) == 4


def test_small_polygon_is_dropped():
    geometry = VtGeometry(GeometryKind.POLYGON, [_square(0.0)])
    tile = _build([make_feature(geometry, {}, None)], tolerance=0.1)
    assert tile.tile.features == []


def test_multi_polygon_variants():
    one = VtGeometry(GeometryKind.MULTI_POLYGON, [[_square(0.5)], [_square(0.0)]])
    two = VtGeometry(GeometryKind.MULTI_POLYGON, [[_square(0.5)], [_square(0.5)]])
    tile = _build(
        [make_feature(one, {}, None), make_feature(two, {}, None)], tolerance=0.1
    )
    kinds = [f["geometry"]["type"] for f in tile.tile.features]
    assert kinds == ["Polygon", "MultiPolygon"]


def test_geometry_collection_adds_each_member():
    geometry = VtGeometry(
        GeometryKind.GEOMETRY_COLLECTION,
        [
            VtGeometry(GeometryKind.POINT, VtPoint(0.0, 0.0)),
            VtGeometry(GeometryKind.POINT, VtPoint(1.0, 1.0)),
        ],
    )
    tile = _build([make_feature(geometry, {"a": 1}, 7)])
    assert len(tile.tile.features) == 2
    assert all(f["id"] == 7 for f in tile.tile.features)
    assert all(f["properties"] == {"a": 1} for f in tile.tile.features)
    assert tile.tile.features[0]["properties"] is not tile.tile.features[1]["properties"]


def test_empty_geometry_raises():
    feature = VtFeature(VtGeometry(GeometryKind.EMPTY), {}, None, BBox(), 1)
    with pytest.raises(ValueError):
        _build([feature])


def test_bbox_starts_from_origin_and_grows():
    features = [_point_feature(0.25, 0.5), _point_feature(0.75, 0.25)]
    tile = _build(features)
    assert tile.bbox.min == Point2D(0.0, 0.0)
    assert tile.bbox.max == Point2D(0.75, 0.5)


def test_source_features_start_empty_and_counts_sum():
    features = [_point_feature(0.25, 0.5), _point_feature(0.75, 0.25)]
    tile = _build(features, z=3, x=2, y=5)
    assert tile.source_features == []
    assert (tile.z, tile.x, tile.y) == (3, 2, 5)
    assert tile.tile.num_points == sum(f.num_points for f in features)


def test_no_source_gives_empty_tile():
    tile = _build([])
    assert tile.tile == empty_tile()