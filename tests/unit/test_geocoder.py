"""
Tests for the ZIP geocoder client.
"""
import pytest
import requests
from unittest.mock import MagicMock
from coverage_checker.clients.geocoder import ZipGeocoder
from coverage_checker.utils.exceptions import LocationNotFound, UpstreamUnavailable

CAMBRIDGE_BODY = {
    "post code": "02139",
    "country": "United States",
    "places": [
        {
            "place name": "Cambridge",
            "longitude": "-71.1042",
            "state": "Massachusetts",
            "state abbreviation": "MA",
            "latitude": "42.3647",
        }
    ],
}


def make_response(status_code=200, body=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


def make_geocoder(response=None, side_effect=None):
    session = MagicMock(spec=requests.Session)
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    return ZipGeocoder(base_url="https://zip.example/us/", timeout_seconds=2.5, session=session), session


def test_lookup_success():
    geocoder, session = make_geocoder(make_response(body=CAMBRIDGE_BODY))

    point = geocoder.lookup("02139")

    assert point.latitude == pytest.approx(42.3647)
    assert point.longitude == pytest.approx(-71.1042)
    assert point.display_name == "Cambridge, MA"
    assert point.postal_code == "02139"
    assert point.state_code == "MA"
    session.get.assert_called_once_with("https://zip.example/us/02139", timeout=2.5)


def test_zip_plus_four_sends_prefix():
    geocoder, session = make_geocoder(make_response(body=CAMBRIDGE_BODY))

    geocoder.lookup("02139-4307")

    assert session.get.call_args[0][0].endswith("/02139")


def test_not_found_status():
    geocoder, _ = make_geocoder(make_response(status_code=404, body={}))

    with pytest.raises(LocationNotFound, match="404"):
        geocoder.lookup("00000")


def test_empty_places():
    geocoder, _ = make_geocoder(make_response(body={"places": []}))

    with pytest.raises(LocationNotFound, match="ZIP not found"):
        geocoder.lookup("00000")


@pytest.mark.parametrize("error", [
    requests.Timeout("read timed out"),
    requests.ConnectionError("refused"),
])
def test_transport_errors(error):
    geocoder, _ = make_geocoder(side_effect=error)

    with pytest.raises(UpstreamUnavailable) as exc_info:
        geocoder.lookup("02139")
    assert exc_info.value.service == "geocoder"


def test_unreadable_body():
    geocoder, _ = make_geocoder(make_response(json_error=True))

    with pytest.raises(UpstreamUnavailable):
        geocoder.lookup("02139")


def test_incomplete_place():
    geocoder, _ = make_geocoder(make_response(body={"places": [{"place name": "Nowhere"}]}))

    with pytest.raises(UpstreamUnavailable):
        geocoder.lookup("02139")


@pytest.mark.parametrize("places", [{"x": 1}, "Cambridge", [None]])
def test_malformed_places(places):
    geocoder, _ = make_geocoder(make_response(body={"places": places}))

    with pytest.raises(UpstreamUnavailable):
        geocoder.lookup("02139")
