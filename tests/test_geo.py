"""
Tests for sphere geometry.

Tests cover:
- Quaternion algebra and Euler conversion
- Great-circle interpolation
- Orthographic projection forward/inverse
- Topology decoding
- SVG path rendering
"""

import math
import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from geo import quaternion
from geo.path import SvgPathRenderer, graticule
from geo.projection import OrthographicProjection
from geo.rotation import GreatCircleInterpolator, interpolate_number
from geo.topology import TopologyError, feature, features


# ============== Fixtures ==============

@pytest.fixture
def projection():
    return OrthographicProjection(rotation=(0, 0, 0), scale=190, translate=(200, 200))


@pytest.fixture
def random_quaternions():
    rng = np.random.default_rng(7)
    qs = rng.normal(size=(3, 4))
    return [q / np.linalg.norm(q) for q in qs]


@pytest.fixture
def topology():
    """Quantized topology: one square ring and one open arc."""
    return {
        "type": "Topology",
        "transform": {"scale": [1, 1], "translate": [0, 0]},
        "arcs": [
            [[0, 0], [10, 0], [0, 10], [-10, 0], [0, -10]],
            [[10, 10], [5, 5]],
        ],
        "objects": {
            "countries": {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Polygon", "id": "SQR", "properties": {"name": "Square"}, "arcs": [[0]]},
                ],
            },
            "trips": {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "LineString", "properties": {"name": "Out"}, "arcs": [0, 1]},
                    {"type": "LineString", "properties": {"name": "Back"}, "arcs": [-2]},
                ],
            },
            "capital": {"type": "Point", "coordinates": [3, 4]},
        },
    }


# ============== Quaternion Tests ==============

class TestQuaternion:
    """Tests for quaternion helpers."""

    def test_euler_round_trip(self):
        rotation = (30.0, 20.0, 10.0)
        result = quaternion.to_euler(quaternion.from_euler(rotation))
        np.testing.assert_allclose(result, rotation, atol=1e-9)

    def test_missing_gamma_is_zero(self):
        np.testing.assert_allclose(
            quaternion.from_euler((15, -25)),
            quaternion.from_euler((15, -25, 0)),
        )

    def test_from_euler_is_unit(self):
        assert quaternion.norm(quaternion.from_euler((-40, -30, 5))) == pytest.approx(1.0)

    def test_multiply_associative(self, random_quaternions):
        a, b, c = random_quaternions
        left = quaternion.multiply(quaternion.multiply(a, b), c)
        right = quaternion.multiply(a, quaternion.multiply(b, c))
        np.testing.assert_allclose(left, right, atol=1e-12)

    def test_multiply_preserves_norm(self, random_quaternions):
        a, b, _ = random_quaternions
        assert quaternion.norm(quaternion.multiply(a, b)) == pytest.approx(1.0)

    def test_identity(self, random_quaternions):
        a = random_quaternions[0]
        np.testing.assert_allclose(quaternion.multiply(a, [1, 0, 0, 0]), a)

    def test_between_missing_vector(self):
        v = quaternion.cartesian((10, 20))
        assert quaternion.between(None, v) is None
        assert quaternion.between(v, None) is None

    def test_between_same_vector(self):
        v = quaternion.cartesian((10, 20))
        assert quaternion.between(v, v) is None

    def test_between_is_unit(self):
        q = quaternion.between(quaternion.cartesian((0, 0)), quaternion.cartesian((40, 10)))
        assert quaternion.norm(q) == pytest.approx(1.0)

    def test_slerp_endpoints(self, random_quaternions):
        a, b, _ = random_quaternions
        interp = quaternion.slerp(a, b)
        np.testing.assert_allclose(np.abs(np.dot(interp(0), a)), 1.0, atol=1e-9)
        np.testing.assert_allclose(np.abs(np.dot(interp(1), b)), 1.0, atol=1e-9)


# ============== Great Circle Tests ==============

class TestGreatCircleInterpolator:
    """Tests for GreatCircleInterpolator."""

    def test_endpoints(self):
        interp = GreatCircleInterpolator((-40, -30), (77, 60))
        np.testing.assert_allclose(interp(0), (-40, -30), atol=1e-9)
        np.testing.assert_allclose(interp(1), (77, 60), atol=1e-9)

    def test_midpoint_on_equator(self):
        interp = GreatCircleInterpolator((0, 0), (90, 0))
        assert interp.distance() == pytest.approx(math.pi / 2)
        np.testing.assert_allclose(interp(0.5), (45, 0), atol=1e-9)

    def test_zero_distance(self):
        interp = GreatCircleInterpolator((12, 34), (12, 34))
        assert interp.distance() == 0
        assert interp(0.7) == (12, 34)

    def test_same_rotation_is_zero_distance(self):
        rng = random.Random(7)
        rotations = [(-1.64, -9.09)] + [
            (rng.uniform(-180, 180), rng.uniform(-90, 90)) for _ in range(500)
        ]
        interp = GreatCircleInterpolator()
        for r in rotations:
            interp.source = r
            interp.target = list(r)
            assert interp.distance() == 0
            assert interp(0.5) == interp.source

    def test_one_ulp_apart_is_zero_distance(self):
        rng = random.Random(11)
        for _ in range(200):
            lam, phi = rng.uniform(-180, 180), rng.uniform(-89, 89)
            interp = GreatCircleInterpolator((lam, phi), (lam, math.nextafter(phi, 90)))
            assert interp.distance() == 0

    def test_distance_cached_until_endpoint_changes(self):
        interp = GreatCircleInterpolator((0, 0), (90, 0))
        first = interp.distance()
        assert interp._distance == first
        interp.target = (0, 0)
        assert interp._distance is None
        assert interp.distance() == 0

    def test_antipodal_falls_back_to_angles(self):
        interp = GreatCircleInterpolator((0, 0), (180, 0))
        assert interp.distance() == pytest.approx(math.pi)
        np.testing.assert_allclose(interp(0.5), (90, 0), atol=1e-9)

    def test_interpolate_number(self):
        f = interpolate_number(190, 380)
        assert f(0) == 190
        assert f(0.5) == 285
        assert f(1) == 380


# ============== Projection Tests ==============

class TestOrthographicProjection:
    """Tests for OrthographicProjection."""

    def test_centre(self, projection):
        assert projection.project(0, 0) == pytest.approx((200, 200))

    def test_north_is_up(self, projection):
        x, y = projection.project(0, 90 - 1e-9)
        assert x == pytest.approx(200)
        assert y == pytest.approx(10)

    def test_far_side_clipped(self, projection):
        assert projection.project(180, 0) is None
        assert not projection.visible(120, 0)
        assert projection.visible(60, 0)

    def test_invert_outside_silhouette(self, projection):
        assert projection.invert(0, 0) is None

    def test_round_trip(self):
        proj = OrthographicProjection(rotation=(-40, -30, 0), scale=190, translate=(200, 200))
        lon_lat = (35.0, 40.0)
        xy = proj.project(*lon_lat)
        assert xy is not None
        np.testing.assert_allclose(proj.invert(*xy), lon_lat, atol=1e-9)

    def test_round_trip_with_gamma(self):
        proj = OrthographicProjection(rotation=(20, 10, 15), scale=100, translate=(0, 0))
        xy = proj.project(-10, 5)
        np.testing.assert_allclose(proj.invert(*xy), (-10, 5), atol=1e-9)

    def test_rotation_centres_negated_point(self):
        proj = OrthographicProjection(rotation=(-77, -60), scale=190, translate=(200, 200))
        assert proj.project(77, 60) == pytest.approx((200, 200))

    def test_rotate_pads_gamma(self, projection):
        projection.rotate((10, 20))
        assert projection.rotation == (10.0, 20.0, 0.0)

    def test_copy_is_independent(self, projection):
        other = projection.copy().rotate((50, 0))
        assert projection.rotation == (0.0, 0.0, 0.0)
        assert other.rotation == (50.0, 0.0, 0.0)


# ============== Topology Tests ==============

class TestTopology:
    """Tests for topology decoding."""

    def test_delta_decoding(self, topology):
        square = features(topology, "countries")[0]
        assert square["id"] == "SQR"
        assert square["properties"]["name"] == "Square"
        assert square["geometry"]["coordinates"][0] == [
            [0, 0], [10, 0], [10, 10], [0, 10], [0, 0],
        ]

    def test_shared_point_dropped(self, topology):
        out = features(topology, "trips")[0]
        coords = out["geometry"]["coordinates"]
        # 5 from arc 0, then arc 1 minus its first position
        assert len(coords) == 6
        assert coords[-1] == [15, 15]

    def test_reversed_arc(self, topology):
        back = features(topology, "trips")[1]
        assert back["geometry"]["coordinates"] == [[15, 15], [10, 10]]

    def test_lone_geometry(self, topology):
        capital = feature(topology, "capital")
        assert capital["type"] == "Feature"
        assert capital["geometry"] == {"type": "Point", "coordinates": [3.0, 4.0]}

    def test_position_transform(self):
        topo = {
            "type": "Topology",
            "transform": {"scale": [0.5, 0.5], "translate": [-180, -90]},
            "arcs": [],
            "objects": {"p": {"type": "Point", "coordinates": [2, 4]}},
        }
        assert feature(topo, "p")["geometry"]["coordinates"] == [-179.0, -88.0]

    def test_missing_object(self, topology):
        with pytest.raises(TopologyError):
            feature(topology, "lakes")

    def test_not_a_topology(self):
        with pytest.raises(TopologyError):
            feature({"type": "FeatureCollection", "objects": {"x": {}}}, "x")

    def test_bad_arc_index(self, topology):
        topology["objects"]["trips"]["geometries"].append(
            {"type": "LineString", "arcs": [9]}
        )
        with pytest.raises(TopologyError):
            features(topology, "trips")


# ============== Path Rendering Tests ==============

class TestSvgPathRenderer:
    """Tests for SvgPathRenderer."""

    def test_sphere(self, projection):
        d = SvgPathRenderer().path_data({"type": "Sphere"}, projection)
        assert d == "M200,10A190,190 0 1,1 200,390A190,190 0 1,1 200,10Z"

    def test_visible_point(self, projection):
        d = SvgPathRenderer().path_data({"type": "Point", "coordinates": [0, 0]}, projection)
        assert d.startswith("M200,195.5")

    def test_hidden_point(self, projection):
        d = SvgPathRenderer().path_data({"type": "Point", "coordinates": [180, 0]}, projection)
        assert d == ""

    def test_visible_polygon_closed(self, projection):
        polygon = {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 0]]]}
        d = SvgPathRenderer().path_data(polygon, projection)
        assert d.startswith("M200,200")
        assert d.endswith("Z")

    def test_line_split_at_horizon(self, projection):
        line = {
            "type": "LineString",
            "coordinates": [[-60, 0], [0, 0], [60, 0], [120, 0], [-30, 0]],
        }
        d = SvgPathRenderer().path_data(line, projection)
        assert d.count("M") == 2
        assert "Z" not in d

    def test_feature_unwrapped(self, projection):
        renderer = SvgPathRenderer()
        geometry = {"type": "Point", "coordinates": [0, 0]}
        wrapped = {"type": "Feature", "properties": {}, "geometry": geometry}
        assert renderer.path_data(wrapped, projection) == renderer.path_data(geometry, projection)

    def test_redraw_sets_d(self, projection):
        class Element:
            geometry = {"type": "Sphere"}
            d = ""

        element = Element()
        renderer = SvgPathRenderer()
        renderer.redraw([element], projection)
        assert element.d.startswith("M200,10")
        assert renderer.n_redraws == 1

    def test_graticule(self):
        lines = graticule()["coordinates"]
        # 36 meridians, 17 parallels
        assert len(lines) == 53
        assert lines[0][0] == [-180.0, -80.0]
        assert lines[0][-1] == [-180.0, 80.0]
