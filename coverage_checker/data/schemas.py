"""
Pydantic schemas for pipeline values and the service response.

Defines the resolved location, observed cell records and the coverage
verdict returned to callers.
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel


class GeoPoint(BaseModel):
    """
    A resolved location.

    Example:
        >>> point = GeoPoint(latitude=42.3626, longitude=-71.0843,
        ...                  display_name='Cambridge, MA', postal_code='02139', state_code='MA')
    """
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    display_name: str = Field(..., description="Human-readable place name")
    postal_code: Optional[str] = Field(None, description="5-digit ZIP, when resolved from one")
    state_code: Optional[str] = Field(None, description="State abbreviation, when known")

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class CellRecord(BaseModel):
    """
    One observed tower/cell entry from the crowdsourced database.

    Example:
        >>> record = CellRecord(mcc=310, mnc=410, cell_id='26372', radio='LTE')
        >>> record.dedup_key
        (310, '410', '26372', 'LTE')
    """
    mcc: int = Field(..., ge=0, description="Mobile country code")
    mnc: int = Field(..., ge=0, description="Mobile network code")
    cell_id: Optional[str] = Field(None, description="Cell identifier, used for deduplication")
    radio: str = Field(..., min_length=1, description="Radio technology (LTE, NR, GSM, ...)")

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator('radio')
    @classmethod
    def upper_radio(cls, v: str) -> str:
        return v.upper()

    @field_validator('cell_id', mode='before')
    @classmethod
    def stringify_cell_id(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @property
    def mnc_padded(self) -> str:
        return f"{self.mnc:03d}"

    @property
    def dedup_key(self) -> Tuple[int, str, str, str]:
        """Two records with the same key are the same physical cell."""
        return (self.mcc, self.mnc_padded, self.cell_id or "", self.radio)

    @classmethod
    def from_payload(cls, raw: Any, radio: str) -> Optional['CellRecord']:
        """
        Build a record from one provider payload entry.

        The entry is tagged with the requested radio. Entries missing an MCC or
        MNC, or whose codes are not numeric, yield None.
        """
        if not isinstance(raw, dict):
            return None
        if raw.get('mcc') is None or raw.get('mnc') is None:
            return None

        cell_id = raw.get('cid')
        if cell_id is None:
            cell_id = raw.get('cellid')

        try:
            return cls(mcc=raw['mcc'], mnc=raw['mnc'], cell_id=cell_id, radio=radio)
        except ValidationError:
            return None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DetectionDetail(_CamelModel):
    """An operator seen on a given radio technology."""
    technology: str
    operator: str


class CoverageResult(_CamelModel):
    """
    Final verdict for one coverage query.

    Serialized with camelCase keys (``matchedOperators``, ``resolvedPlaceName``, ...).
    ``explanation`` is None only when the primary tier connects.
    """
    connects: bool
    matched_operators: List[str] = Field(default_factory=list)
    explanation: Optional[str] = None
    all_detected_operators: List[str] = Field(default_factory=list)
    detection_details: List[DetectionDetail] = Field(default_factory=list)
    records_inspected_count: int = Field(0, ge=0)
    resolved_place_name: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    """Error body returned by the service."""
    error: str
