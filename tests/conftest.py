"""
Shared fixtures for coverage checker tests.
"""
import pytest

from coverage_checker.data.reference import ReferenceDataStore
from coverage_checker.data.schemas import GeoPoint


@pytest.fixture
def cambridge():
    """Resolved point for ZIP 02139."""
    return GeoPoint(
        latitude=42.3626,
        longitude=-71.0843,
        display_name="Cambridge, MA",
        postal_code="02139",
        state_code="MA",
    )


@pytest.fixture
def reference_store():
    """Small allowlist: AT&T and T-Mobile allowed, Verizon and US Cellular mapped but not allowed."""
    return ReferenceDataStore(
        allowed_operators={"AT&T Mobility", "T-Mobile USA"},
        network_map={
            "310410": "AT&T Mobility",
            "310260": "T-Mobile USA",
            "311480": "Verizon Wireless",
            "311580": "US Cellular",
        },
    )
