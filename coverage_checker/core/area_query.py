"""
Adaptive bounding-box query.

Fetches cell records for one box, halving the box when the provider says the
area is too large. Malformed payloads, transport errors and timeouts degrade
to an empty result for that box; only credential problems propagate.
"""
from typing import Any, List, Optional

from coverage_checker.core.geometry import BoundingBox
from coverage_checker.data.schemas import CellRecord
from coverage_checker.utils.config import AreaQueryConfig
from coverage_checker.utils.exceptions import UpstreamUnavailable
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)

AREA_TOO_LARGE_MARKERS = ("bbox too big", "too large")


def is_area_too_large(payload: Any) -> bool:
    """True when the payload is the provider's 'area too large' error."""
    if not isinstance(payload, dict) or not payload.get('error'):
        return False
    message = str(payload['error']).lower()
    return any(marker in message for marker in AREA_TOO_LARGE_MARKERS)


def extract_cells(payload: Any) -> List[Any]:
    """Raw cell entries from ``{"cells": [...]}`` or a bare list; anything else is empty."""
    if isinstance(payload, dict) and isinstance(payload.get('cells'), list):
        return payload['cells']
    if isinstance(payload, list):
        return payload
    return []


class AdaptiveAreaQuery:
    """
    One logical box query with shrink-on-oversize retries.

    Args:
        client: Object exposing ``fetch_area(bbox, radio)`` (see OpenCellIdClient)
        config: Half-width start/floor and attempt ceiling
    """

    def __init__(self, client, config: Optional[AreaQueryConfig] = None):
        self.client = client
        self.config = config or AreaQueryConfig()

    def query(
        self,
        latitude: float,
        longitude: float,
        radio: str,
        half_width: Optional[float] = None,
    ) -> List[CellRecord]:
        """
        Return the records in the box around (latitude, longitude).

        Args:
            latitude: Box centre latitude
            longitude: Box centre longitude
            radio: Radio technology filter (e.g. "LTE")
            half_width: Starting half-width in degrees (default from config)

        Returns:
            Records carrying both MCC and MNC, tagged with ``radio``
        """
        width = half_width if half_width is not None else self.config.start_half_width
        floor = min(self.config.min_half_width, width)

        for attempt in range(1, self.config.max_attempts + 1):
            bbox = BoundingBox.around(latitude, longitude, width)

            try:
                payload = self.client.fetch_area(bbox, radio)
            except UpstreamUnavailable as e:
                logger.warning(
                    "area_query_unavailable",
                    radio=radio,
                    bbox=bbox.to_param(),
                    error=str(e),
                )
                return []

            if payload is None:
                return []

            if is_area_too_large(payload):
                new_width = max(floor, width / 2)
                logger.debug(
                    "area_too_large",
                    radio=radio,
                    attempt=attempt,
                    half_width=width,
                    next_half_width=new_width,
                )
                width = new_width
                continue

            records = []
            for raw in extract_cells(payload):
                record = CellRecord.from_payload(raw, radio)
                if record is not None:
                    records.append(record)
            return records

        logger.warning(
            "area_query_gave_up",
            radio=radio,
            attempts=self.config.max_attempts,
            half_width=width,
        )
        return []
