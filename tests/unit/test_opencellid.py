"""
Tests for the OpenCellID area client.
"""
import pytest
import requests
from unittest.mock import MagicMock
from coverage_checker.clients.opencellid import OpenCellIdClient
from coverage_checker.core.geometry import BoundingBox
from coverage_checker.utils.exceptions import (
    ConfigurationMissing,
    InvalidCredentials,
    UpstreamUnavailable,
)

BOX = BoundingBox.around(42.3626, -71.0843, 0.008)


def make_client(status_code=200, body=None, json_error=False, side_effect=None):
    session = MagicMock(spec=requests.Session)
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        response = MagicMock()
        response.status_code = status_code
        if json_error:
            response.json.side_effect = ValueError("not json")
        else:
            response.json.return_value = body
        session.get.return_value = response
    client = OpenCellIdClient("test-key", base_url="https://cells.example/", timeout_seconds=3, session=session)
    return client, session


def test_request_parameters():
    client, session = make_client(body={"cells": []})

    assert client.fetch_area(BOX, "LTE") == {"cells": []}

    args, kwargs = session.get.call_args
    assert args[0] == "https://cells.example/cell/getInArea"
    assert kwargs["params"] == {
        "key": "test-key",
        "BBOX": BOX.to_param(),
        "radio": "LTE",
        "format": "json",
    }
    assert kwargs["timeout"] == 3


def test_error_body_returned_for_caller():
    client, _ = make_client(status_code=400, body={"error": "bbox too big"})

    assert client.fetch_area(BOX, "LTE") == {"error": "bbox too big"}


def test_non_json_body_is_none():
    client, _ = make_client(json_error=True)

    assert client.fetch_area(BOX, "LTE") is None


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials(status):
    client, _ = make_client(status_code=status, body={"error": "Invalid key"})

    with pytest.raises(InvalidCredentials) as exc_info:
        client.fetch_area(BOX, "LTE")
    assert isinstance(exc_info.value, ConfigurationMissing)
    assert exc_info.value.setting == "opencellid.api_key"


def test_timeout_wrapped():
    client, _ = make_client(side_effect=requests.Timeout("slow"))

    with pytest.raises(UpstreamUnavailable) as exc_info:
        client.fetch_area(BOX, "LTE")
    assert exc_info.value.service == "opencellid"
