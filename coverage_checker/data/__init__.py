"""
Data module.

Pydantic schemas for pipeline values, reference table loading and the
secondary provider lookups.
"""
from coverage_checker.data.schemas import GeoPoint, CellRecord, DetectionDetail, CoverageResult
from coverage_checker.data.reference import ReferenceDataStore, OperatorNameRules, OperatorNameRule
from coverage_checker.data.sources import (
    SecondaryProviderLookup,
    OpenCellIdFanOutLookup,
    ProviderCatalogLookup,
    get_secondary_provider,
)

__all__ = [
    'GeoPoint',
    'CellRecord',
    'DetectionDetail',
    'CoverageResult',
    'ReferenceDataStore',
    'OperatorNameRules',
    'OperatorNameRule',
    'SecondaryProviderLookup',
    'OpenCellIdFanOutLookup',
    'ProviderCatalogLookup',
    'get_secondary_provider',
]
