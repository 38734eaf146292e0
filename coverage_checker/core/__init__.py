"""
Core pipeline stages: location resolution, adaptive area query,
ring fan-out sampling and multi-tier classification.
"""
from coverage_checker.core.geometry import (
    BoundingBox,
    ring_offsets,
    haversine_distance,
    EARTH_RADIUS_M,
)
from coverage_checker.core.area_query import AdaptiveAreaQuery
from coverage_checker.core.sampler import RingFanOutSampler, FanOutResult
from coverage_checker.core.classifier import CoverageClassifier
from coverage_checker.core.location import LocationResolver

__all__ = [
    'BoundingBox',
    'ring_offsets',
    'haversine_distance',
    'EARTH_RADIUS_M',
    'AdaptiveAreaQuery',
    'RingFanOutSampler',
    'FanOutResult',
    'CoverageClassifier',
    'LocationResolver',
]
