"""
Secondary provider lookups for the any-technology fallback tier.

Provides a unified interface for finding operators near a point across a list
of radio technologies:
- OpenCellID ring fan-out, one pass per technology (default)
- Static provider catalog keyed by ZIP or state
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from coverage_checker.data.loaders import load_provider_catalog
from coverage_checker.data.reference import OperatorNameRules, ReferenceDataStore
from coverage_checker.data.schemas import DetectionDetail, GeoPoint
from coverage_checker.utils.exceptions import ConfigurationError
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SecondaryScan:
    """Operators found per technology, in discovery order."""
    detections: List[DetectionDetail] = field(default_factory=list)
    records_inspected: int = 0

    def add(self, technology: str, operator: str) -> None:
        """Record a (technology, operator) pair once."""
        for existing in self.detections:
            if existing.technology == technology and existing.operator == operator:
                return
        self.detections.append(DetectionDetail(technology=technology, operator=operator))


class SecondaryProviderLookup(ABC):
    """Abstract base class for fallback operator lookups."""

    name = "abstract"

    @abstractmethod
    def scan(self, point: GeoPoint, technologies: Sequence[str]) -> SecondaryScan:
        """Find operators near ``point`` for each technology, in the given order."""
        pass


class OpenCellIdFanOutLookup(SecondaryProviderLookup):
    """Runs the ring fan-out sampler once per technology."""

    name = "opencellid"

    def __init__(self, sampler, reference: ReferenceDataStore):
        """
        Args:
            sampler: RingFanOutSampler (or anything exposing ``sample(point, radio)``)
            reference: Operator name resolution
        """
        self.sampler = sampler
        self.reference = reference

    def scan(self, point: GeoPoint, technologies: Sequence[str]) -> SecondaryScan:
        scan = SecondaryScan()
        for technology in technologies:
            result = self.sampler.sample(point, technology)
            scan.records_inspected += len(result.records)
            for record in result.records:
                operator = self.reference.resolve_operator(record.mcc, record.mnc)
                scan.add(record.radio, operator)

        logger.info(
            "secondary_scan_complete",
            provider=self.name,
            technologies=list(technologies),
            records=scan.records_inspected,
            detections=len(scan.detections),
        )
        return scan


class ProviderCatalogLookup(SecondaryProviderLookup):
    """
    Looks operators up in a static catalog.

    Rows match on the resolved ZIP; rows with a blank ZIP apply to the whole
    state. Raw operator text is canonicalised with the name rules.
    """

    name = "catalog"

    def __init__(self, catalog: pd.DataFrame, rules: Optional[OperatorNameRules] = None):
        self.catalog = catalog
        self.rules = rules or OperatorNameRules()

    @classmethod
    def from_file(cls, path: Path, rules: Optional[OperatorNameRules] = None) -> 'ProviderCatalogLookup':
        return cls(load_provider_catalog(path), rules)

    def _rows_for(self, point: GeoPoint) -> pd.DataFrame:
        df = self.catalog
        mask = pd.Series(False, index=df.index)
        if point.postal_code:
            mask |= df['zip'] == point.postal_code
        if point.state_code:
            mask |= (df['zip'] == '') & (df['state'] == point.state_code.upper())
        return df[mask]

    def scan(self, point: GeoPoint, technologies: Sequence[str]) -> SecondaryScan:
        scan = SecondaryScan()
        rows = self._rows_for(point)

        for technology in technologies:
            tech_rows = rows[rows['technology'] == technology.upper()]
            scan.records_inspected += len(tech_rows)
            for raw in tech_rows['operator']:
                scan.add(technology.upper(), self.rules.normalize(raw))

        logger.info(
            "secondary_scan_complete",
            provider=self.name,
            technologies=list(technologies),
            records=scan.records_inspected,
            detections=len(scan.detections),
        )
        return scan


def get_secondary_provider(
    provider_type: str,
    sampler=None,
    reference: Optional[ReferenceDataStore] = None,
    catalog_path: Optional[Path] = None,
    rules: Optional[OperatorNameRules] = None,
) -> SecondaryProviderLookup:
    """
    Build the configured secondary lookup.

    Args:
        provider_type: 'opencellid' or 'catalog'
        sampler: Ring sampler (opencellid)
        reference: Reference store (opencellid)
        catalog_path: Catalog file (catalog)
        rules: Operator name rules (catalog)

    Raises:
        ConfigurationError: Unknown type or missing collaborators

    Example:
        >>> lookup = get_secondary_provider('opencellid', sampler=sampler, reference=store)
    """
    if provider_type == OpenCellIdFanOutLookup.name:
        if sampler is None or reference is None:
            raise ConfigurationError("opencellid secondary provider needs a sampler and reference data")
        return OpenCellIdFanOutLookup(sampler, reference)

    if provider_type == ProviderCatalogLookup.name:
        if catalog_path is None:
            raise ConfigurationError("catalog secondary provider needs catalog_path")
        return ProviderCatalogLookup.from_file(catalog_path, rules)

    raise ConfigurationError(f"Unknown secondary provider: {provider_type!r}")
