"""
Tests for the ring fan-out sampler.
"""
import pytest
from coverage_checker.core.geometry import BOXES_PER_RING
from coverage_checker.core.sampler import RingFanOutSampler, FanOutResult
from coverage_checker.utils.config import SamplerConfig
from tests.fixtures.fakes import FakeAreaQuery, cell


class TestRingFanOutSampler:
    """Tests for ring traversal, stop conditions and deduplication."""

    def test_zero_results_visits_every_ring(self, cambridge):
        area_query = FakeAreaQuery()
        sampler = RingFanOutSampler(area_query, SamplerConfig(max_rings=3, max_requests=100))

        result = sampler.sample(cambridge, "LTE")

        assert len(area_query.calls) == 1 + BOXES_PER_RING * 3
        assert result.requests_issued == 1 + BOXES_PER_RING * 3
        assert result.rings_visited == 4
        assert result.stop_reason == "rings_exhausted"
        assert result.records == []

    def test_default_budget_stays_under_ceiling(self, cambridge):
        area_query = FakeAreaQuery()
        sampler = RingFanOutSampler(area_query)

        result = sampler.sample(cambridge, "LTE")

        assert result.requests_issued == 1 + BOXES_PER_RING * 8
        assert result.requests_issued <= sampler.config.max_requests
        assert result.requests_issued == sampler.planned_requests

    def test_first_call_is_centre_box(self, cambridge):
        area_query = FakeAreaQuery()
        sampler = RingFanOutSampler(area_query, SamplerConfig(max_rings=1))

        sampler.sample(cambridge, "LTE")

        lat, lon, radio, half_width = area_query.calls[0]
        assert lat == pytest.approx(cambridge.latitude)
        assert lon == pytest.approx(cambridge.longitude)
        assert radio == "LTE"
        assert half_width == pytest.approx(0.008)

    def test_request_ceiling(self, cambridge):
        area_query = FakeAreaQuery()
        sampler = RingFanOutSampler(area_query, SamplerConfig(max_rings=8, max_requests=5))

        result = sampler.sample(cambridge, "LTE")

        assert len(area_query.calls) == 5
        assert result.stop_reason == "request_ceiling"

    def test_result_threshold_stops_early(self, cambridge):
        counter = iter(range(1000))

        def handler(lat, lon, radio):
            return [cell(310, 410, next(counter)) for _ in range(3)]

        area_query = FakeAreaQuery(handler)
        sampler = RingFanOutSampler(area_query, SamplerConfig(result_threshold=6))

        result = sampler.sample(cambridge, "LTE")

        assert len(area_query.calls) == 2
        assert len(result) == 6
        assert result.stop_reason == "result_threshold"
        assert result.rings_visited == 2

    def test_overlapping_boxes_deduplicated(self, cambridge):
        shared = [cell(310, 410, 1), cell(310, 260, 2)]
        area_query = FakeAreaQuery(lambda lat, lon, radio: shared)
        sampler = RingFanOutSampler(area_query, SamplerConfig(max_rings=1))

        result = sampler.sample(cambridge, "LTE")

        assert len(area_query.calls) == 9
        assert len(result.records) == 2

    def test_same_cell_different_radio_kept(self, cambridge):
        records = [cell(310, 410, 1, "LTE"), cell(310, 410, 1, "GSM")]
        sampler = RingFanOutSampler(FakeAreaQuery(lambda *a: records), SamplerConfig(max_rings=0))

        result = sampler.sample(cambridge, "LTE")

        assert len(result.records) == 2

    def test_radio_passed_through(self, cambridge):
        area_query = FakeAreaQuery()
        RingFanOutSampler(area_query, SamplerConfig(max_rings=0)).sample(cambridge, "GSM")

        assert area_query.calls[0][2] == "GSM"


def test_fanout_result_len():
    result = FanOutResult(radio="LTE", records=[cell(310, 410, 1)])
    assert len(result) == 1


def test_planned_requests_capped_by_ceiling():
    assert RingFanOutSampler(FakeAreaQuery(), SamplerConfig(max_rings=2)).planned_requests == 1 + BOXES_PER_RING * 2
    assert RingFanOutSampler(FakeAreaQuery(), SamplerConfig(max_rings=8, max_requests=20)).planned_requests == 20
