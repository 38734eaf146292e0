"""
Ring fan-out sampler.

Approximates a radius search with repeated small-box queries because the
provider caps the area of a single request. Rings are visited outwards from
the centre, one box at a time, until enough records are collected, the
request ceiling is hit, or the ring budget runs out. Rural searches may
legitimately return nothing even though towers exist farther out.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from coverage_checker.core.geometry import BOXES_PER_RING, ring_offsets, ring_reach_m
from coverage_checker.data.schemas import CellRecord, GeoPoint
from coverage_checker.utils.config import SamplerConfig
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class FanOutResult:
    """Deduplicated records for one radio technology plus sampling stats."""
    radio: str
    records: List[CellRecord] = field(default_factory=list)
    requests_issued: int = 0
    rings_visited: int = 0
    stop_reason: str = "rings_exhausted"

    def __len__(self):
        return len(self.records)


class RingFanOutSampler:
    """
    Sequential ring-by-ring sampler over an area query.

    Args:
        area_query: Object exposing ``query(lat, lon, radio, half_width)``
        config: Ring spacing, ring budget, request ceiling, result threshold

    Example:
        >>> sampler = RingFanOutSampler(AdaptiveAreaQuery(client))
        >>> result = sampler.sample(point, "LTE")
        >>> result.requests_issued <= sampler.config.max_requests
        True
    """

    def __init__(self, area_query, config: Optional[SamplerConfig] = None):
        self.area_query = area_query
        self.config = config or SamplerConfig()

    @property
    def planned_requests(self) -> int:
        """Requests a search with no early stop issues: the centre box plus every ring, capped."""
        return min(self.config.max_requests, 1 + BOXES_PER_RING * self.config.max_rings)

    def sample(self, point: GeoPoint, radio: str) -> FanOutResult:
        step = self.config.box_step
        result = FanOutResult(radio=radio)
        seen: Dict[Tuple, CellRecord] = {}

        for ring in range(self.config.max_rings + 1):
            result.rings_visited = ring + 1

            for dlat, dlon in ring_offsets(ring, step):
                if result.requests_issued >= self.config.max_requests:
                    result.stop_reason = "request_ceiling"
                    break

                result.requests_issued += 1
                records = self.area_query.query(
                    point.latitude + dlat,
                    point.longitude + dlon,
                    radio,
                    half_width=step,
                )
                for record in records:
                    key = record.dedup_key
                    if key not in seen:
                        seen[key] = record
                        result.records.append(record)

                if len(result.records) >= self.config.result_threshold:
                    result.stop_reason = "result_threshold"
                    break

            if result.stop_reason != "rings_exhausted":
                break

        logger.info(
            "fanout_complete",
            radio=radio,
            records=len(result.records),
            requests=result.requests_issued,
            planned_requests=self.planned_requests,
            rings=result.rings_visited,
            stop_reason=result.stop_reason,
            reach_m=round(ring_reach_m(point.latitude, point.longitude, result.rings_visited - 1, step)),
        )
        return result
