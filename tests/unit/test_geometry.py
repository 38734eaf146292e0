"""
Tests for geometry functions.
"""
import pytest
from coverage_checker.core.geometry import (
    haversine_distance,
    BoundingBox,
    ring_offsets,
    ring_reach_m,
    BOXES_PER_RING,
)


class TestHaversineDistance:
    """Tests for haversine_distance function."""

    def test_same_point(self):
        """Distance from a point to itself should be zero."""
        distance = haversine_distance(42.3626, -71.0843, 42.3626, -71.0843)
        assert distance == pytest.approx(0.0, abs=0.1)

    def test_north_south_distance(self):
        """1 degree of latitude is about 111.2 km everywhere."""
        distance = haversine_distance(42, -71, 43, -71)
        assert distance == pytest.approx(111190, rel=0.01)

    def test_box_step_distance(self):
        """The default 0.008 degree ring step is a little under 1 km."""
        distance = haversine_distance(42.3626, -71.0843, 42.3706, -71.0843)
        assert 850 < distance < 930


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_around(self):
        box = BoundingBox.around(42.0, -71.0, 0.008)

        assert box.min_lat == pytest.approx(41.992)
        assert box.max_lat == pytest.approx(42.008)
        assert box.min_lon == pytest.approx(-71.008)
        assert box.max_lon == pytest.approx(-70.992)
        assert box.half_width == pytest.approx(0.008)

    def test_to_param_order_and_precision(self):
        """Provider order is minLat,minLon,maxLat,maxLon with 6 decimals."""
        box = BoundingBox.around(42.3626, -71.0843, 0.004)
        assert box.to_param() == "42.358600,-71.088300,42.366600,-71.080300"

    def test_non_positive_half_width(self):
        with pytest.raises(ValueError):
            BoundingBox.around(0, 0, 0)


class TestRingOffsets:
    """Tests for ring_offsets."""

    def test_ring_zero_is_centre(self):
        assert ring_offsets(0, 0.008) == [(0.0, 0.0)]

    def test_ring_has_eight_border_boxes(self):
        """Every ring samples corners and edge midpoints only."""
        for ring in range(1, 9):
            offsets = ring_offsets(ring, 0.008)
            assert len(offsets) == BOXES_PER_RING
            for dy, dx in offsets:
                # On the border of the ring's square
                assert max(abs(dy), abs(dx)) == pytest.approx(ring * 0.008)

    def test_ring_offsets_unique_and_exclude_centre(self):
        offsets = ring_offsets(2, 0.01)
        assert len(set(offsets)) == len(offsets)
        assert (0.0, 0.0) not in offsets
        assert any(dy == pytest.approx(0.02) and dx == pytest.approx(0.02) for dy, dx in offsets)

    def test_requests_grow_linearly(self):
        """Total boxes through ring r is 1 + 8r."""
        total = sum(len(ring_offsets(r, 0.008)) for r in range(0, 9))
        assert total == 1 + 8 * 8

    def test_negative_ring(self):
        with pytest.raises(ValueError):
            ring_offsets(-1, 0.008)


def test_ring_reach_grows_with_ring():
    near = ring_reach_m(42.0, -71.0, 0, 0.008)
    far = ring_reach_m(42.0, -71.0, 8, 0.008)
    assert far == pytest.approx(near * 9, rel=0.01)
