"""
ZIP-to-coordinate client for the Zippopotam.us API.
"""
from typing import Optional

import requests

from coverage_checker.clients.sessions import SessionProvider
from coverage_checker.data.schemas import GeoPoint
from coverage_checker.utils.exceptions import LocationNotFound, UpstreamUnavailable
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "geocoder"


class ZipGeocoder:
    """
    Resolve US ZIP codes to a point using the first place the service returns.

    Args:
        base_url: Service root, e.g. https://api.zippopotam.us/us
        timeout_seconds: Per-call timeout
        session: Optional requests session shared by all calls (one per thread if omitted)
    """

    def __init__(
        self,
        base_url: str = "https://api.zippopotam.us/us",
        timeout_seconds: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.sessions = SessionProvider(session)

    def lookup(self, zip_code: str) -> GeoPoint:
        """
        Geocode a validated ZIP or ZIP+4; only the 5-digit prefix is sent.

        Raises:
            LocationNotFound: Non-success status or no places for the ZIP
            UpstreamUnavailable: Transport error, timeout or unreadable body
        """
        zip5 = zip_code[:5]
        url = f"{self.base_url}/{zip5}"

        try:
            response = self.sessions.get().get(url, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.warning("geocoder_request_failed", zip_code=zip5, error=str(e))
            raise UpstreamUnavailable(f"ZIP lookup failed: {e}", service=SERVICE_NAME) from e

        if response.status_code != 200:
            logger.info("geocoder_no_match", zip_code=zip5, status=response.status_code)
            raise LocationNotFound(
                f"ZIP lookup failed ({response.status_code})", query=zip5
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(
                "ZIP lookup returned an unreadable response",
                service=SERVICE_NAME,
                status_code=response.status_code,
            ) from e

        places = payload.get('places') if isinstance(payload, dict) else None
        if not places:
            raise LocationNotFound("ZIP not found", query=zip5)

        try:
            place = places[0]
            point = GeoPoint(
                latitude=float(place['latitude']),
                longitude=float(place['longitude']),
                display_name=f"{place['place name']}, {place['state abbreviation']}",
                postal_code=zip5,
                state_code=place['state abbreviation'],
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamUnavailable(
                f"ZIP lookup returned an incomplete place: {e}",
                service=SERVICE_NAME,
                status_code=response.status_code,
            ) from e

        logger.info(
            "zip_geocoded",
            zip_code=zip5,
            place=point.display_name,
            latitude=point.latitude,
            longitude=point.longitude,
        )
        return point
