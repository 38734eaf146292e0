"""
Request validation.
"""
from .validators import (
    LocationQuery,
    validate_zip,
    validate_coordinates,
    validate_location_query,
)

__all__ = [
    'LocationQuery',
    'validate_zip',
    'validate_coordinates',
    'validate_location_query',
]
