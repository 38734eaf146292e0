"""
Location resolver: ZIP code or explicit coordinate to a GeoPoint.
"""
from coverage_checker.data.schemas import GeoPoint
from coverage_checker.utils.logging_config import get_logger
from coverage_checker.validation.validators import LocationQuery

logger = get_logger(__name__)

COORDINATE_PLACE_NAME = "Custom location"


class LocationResolver:
    """
    Resolve a validated LocationQuery.

    ZIP queries go to the geocoder; coordinate queries make no external call.

    Args:
        geocoder: Object exposing ``lookup(zip_code) -> GeoPoint``
    """

    def __init__(self, geocoder):
        self.geocoder = geocoder

    def resolve(self, query: LocationQuery) -> GeoPoint:
        """
        Raises:
            LocationNotFound: Geocoder had no match
            UpstreamUnavailable: Geocoder could not be reached
        """
        if query.is_zip:
            return self.geocoder.lookup(query.zip_code)

        logger.debug("coordinates_supplied", latitude=query.latitude, longitude=query.longitude)
        return GeoPoint(
            latitude=query.latitude,
            longitude=query.longitude,
            display_name=COORDINATE_PLACE_NAME,
        )
