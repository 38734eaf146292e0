"""
OpenCellID area query client.

Issues one ``cell/getInArea`` request per bounding box. The provider reports
problems such as an oversized box in the JSON body, so non-success statuses
still have their body parsed; only rejected credentials are raised.
"""
from typing import Any, Optional

import requests

from coverage_checker.clients.sessions import SessionProvider
from coverage_checker.core.geometry import BoundingBox
from coverage_checker.utils.exceptions import InvalidCredentials, UpstreamUnavailable
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "opencellid"
AREA_ENDPOINT = "/cell/getInArea"


class OpenCellIdClient:
    """
    Thin HTTP wrapper around the OpenCellID area endpoint.

    Args:
        api_key: OpenCellID API key
        base_url: Provider root URL
        timeout_seconds: Per-call timeout
        session: Optional requests session shared by all calls (one per thread if omitted)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://opencellid.org",
        timeout_seconds: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.url = base_url.rstrip('/') + AREA_ENDPOINT
        self.timeout_seconds = timeout_seconds
        self.sessions = SessionProvider(session)

    def fetch_area(self, bbox: BoundingBox, radio: str) -> Optional[Any]:
        """
        Fetch cells inside ``bbox`` for one radio technology.

        Returns:
            Parsed JSON payload, or None when the body is not JSON

        Raises:
            UpstreamUnavailable: Transport error or timeout
            InvalidCredentials: The provider answered 401/403
        """
        params = {
            'key': self.api_key,
            'BBOX': bbox.to_param(),
            'radio': radio,
            'format': 'json',
        }

        try:
            response = self.sessions.get().get(self.url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"Area query failed: {e}", service=SERVICE_NAME) from e

        if response.status_code in (401, 403):
            logger.error("opencellid_credentials_rejected", status=response.status_code)
            raise InvalidCredentials(
                f"OpenCellID rejected the API key ({response.status_code})",
                setting="opencellid.api_key",
            )

        try:
            return response.json()
        except ValueError:
            logger.debug(
                "opencellid_unparseable_body",
                status=response.status_code,
                bbox=bbox.to_param(),
                radio=radio,
            )
            return None
