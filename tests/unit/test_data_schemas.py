"""
Tests for Pydantic schemas.
"""
import math
import pytest
from pydantic import ValidationError
from coverage_checker.data.schemas import (
    GeoPoint,
    CellRecord,
    DetectionDetail,
    CoverageResult,
)


class TestGeoPoint:
    """Tests for GeoPoint schema."""

    def test_valid_point(self):
        point = GeoPoint(latitude=42.36, longitude=-71.08, display_name="Cambridge, MA")
        assert point.postal_code is None
        assert point.state_code is None

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            GeoPoint(latitude=95.0, longitude=0.0, display_name="x")

    def test_non_finite(self):
        with pytest.raises(ValidationError):
            GeoPoint(latitude=math.nan, longitude=0.0, display_name="x")

    def test_immutable(self):
        point = GeoPoint(latitude=1.0, longitude=2.0, display_name="x")
        with pytest.raises(ValidationError):
            point.latitude = 3.0


class TestCellRecord:
    """Tests for CellRecord schema."""

    def test_dedup_key_pads_mnc(self):
        record = CellRecord(mcc=310, mnc=12, cell_id=555, radio="lte")

        assert record.radio == "LTE"
        assert record.cell_id == "555"
        assert record.dedup_key == (310, "012", "555", "LTE")

    def test_missing_cell_id_is_empty_in_key(self):
        record = CellRecord(mcc=310, mnc=410, radio="GSM")
        assert record.dedup_key == (310, "410", "", "GSM")

    def test_empty_radio_rejected(self):
        with pytest.raises(ValidationError):
            CellRecord(mcc=310, mnc=410, radio="")

    def test_from_payload_prefers_cid(self):
        record = CellRecord.from_payload({"mcc": 310, "mnc": 410, "cid": 7, "cellid": 9}, "LTE")
        assert record.cell_id == "7"

    def test_from_payload_falls_back_to_cellid(self):
        record = CellRecord.from_payload({"mcc": "310", "mnc": "260", "cellid": 12345}, "LTE")

        assert record.mcc == 310
        assert record.mnc == 260
        assert record.cell_id == "12345"
        assert record.radio == "LTE"

    @pytest.mark.parametrize("raw", [
        {"mnc": 410, "cellid": 1},
        {"mcc": 310, "cellid": 1},
        {"mcc": None, "mnc": 410},
        {"mcc": "abc", "mnc": 410},
        "not-a-dict",
        None,
    ])
    def test_from_payload_discards_incomplete(self, raw):
        assert CellRecord.from_payload(raw, "LTE") is None

    def test_from_payload_discards_empty_radio(self):
        assert CellRecord.from_payload({"mcc": 310, "mnc": 410}, "") is None


class TestCoverageResult:
    """Tests for CoverageResult serialization."""

    def test_camel_case_keys(self):
        result = CoverageResult(
            connects=True,
            matched_operators=["AT&T Mobility"],
            all_detected_operators=["AT&T Mobility"],
            detection_details=[DetectionDetail(technology="LTE", operator="AT&T Mobility")],
            records_inspected_count=3,
            resolved_place_name="Cambridge, MA",
        )

        data = result.to_dict()
        assert set(data) == {
            "connects",
            "matchedOperators",
            "explanation",
            "allDetectedOperators",
            "detectionDetails",
            "recordsInspectedCount",
            "resolvedPlaceName",
        }
        assert data["explanation"] is None
        assert data["detectionDetails"] == [{"technology": "LTE", "operator": "AT&T Mobility"}]

    def test_accepts_camel_case_input(self):
        result = CoverageResult.model_validate({
            "connects": False,
            "matchedOperators": [],
            "explanation": "none",
            "resolvedPlaceName": "x",
        })
        assert result.resolved_place_name == "x"
