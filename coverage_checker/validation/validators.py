"""
Request parameter validation.

Rejects malformed ZIP codes and unusable coordinates before any network call.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from coverage_checker.utils.exceptions import InvalidInput

ZIP_PATTERN = re.compile(r'^\d{5}(-\d{4})?$')

ZIP_MESSAGE = "Please provide a valid US ZIP (5 digits, optionally ZIP+4)."


@dataclass(frozen=True)
class LocationQuery:
    """A validated request: either a ZIP or a coordinate pair."""
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def is_zip(self) -> bool:
        return self.zip_code is not None

    @property
    def label(self) -> str:
        """How the location is described in explanations."""
        if self.is_zip:
            return self.zip_code
        return f"{self.latitude:.5f},{self.longitude:.5f}"


def validate_zip(zip_code: Any) -> str:
    """
    Validate a US ZIP or ZIP+4.

    Raises:
        InvalidInput: If the value does not match NNNNN or NNNNN-NNNN

    Example:
        >>> validate_zip(" 02139 ")
        '02139'
    """
    value = str(zip_code if zip_code is not None else '').strip()
    if not ZIP_PATTERN.match(value):
        raise InvalidInput(ZIP_MESSAGE, field='zip')
    return value


def _coerce_coordinate(value: Any, name: str, limit: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number, got {value!r}", field=name) from None
    if not math.isfinite(number):
        raise InvalidInput(f"{name} must be finite, got {value!r}", field=name)
    if abs(number) > limit:
        raise InvalidInput(f"{name} must be between -{limit:g} and {limit:g}, got {number}", field=name)
    return number


def validate_coordinates(latitude: Any, longitude: Any) -> tuple:
    """
    Validate a latitude/longitude pair.

    Raises:
        InvalidInput: If either value is missing, non-numeric, non-finite or out of range
    """
    lat = _coerce_coordinate(latitude, 'lat', 90.0)
    lon = _coerce_coordinate(longitude, 'lon', 180.0)
    return lat, lon


def validate_location_query(
    zip_code: Any = None,
    latitude: Any = None,
    longitude: Any = None,
) -> LocationQuery:
    """
    Validate a request carrying either ``zip`` or both ``lat`` and ``lon``.

    Blank strings count as absent.

    Raises:
        InvalidInput: If neither or both forms are given, or a value is malformed
    """
    def present(value):
        return value is not None and str(value).strip() != ''

    has_zip = present(zip_code)
    has_lat, has_lon = present(latitude), present(longitude)

    if has_zip and (has_lat or has_lon):
        raise InvalidInput("Provide either zip or lat/lon, not both.", field='zip')

    if has_zip:
        return LocationQuery(zip_code=validate_zip(zip_code))

    if has_lat or has_lon:
        if not (has_lat and has_lon):
            raise InvalidInput("Both lat and lon are required.", field='lat' if not has_lat else 'lon')
        lat, lon = validate_coordinates(latitude, longitude)
        return LocationQuery(latitude=lat, longitude=lon)

    raise InvalidInput(ZIP_MESSAGE, field='zip')
