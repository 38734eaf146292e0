"""
Coverage-decision pipeline wiring.

validate -> resolve location -> classify. One pipeline instance serves many
requests; it holds no per-request state.
"""
from typing import Any, Optional

import requests

from coverage_checker.clients.geocoder import ZipGeocoder
from coverage_checker.clients.opencellid import OpenCellIdClient
from coverage_checker.core.area_query import AdaptiveAreaQuery
from coverage_checker.core.classifier import CoverageClassifier
from coverage_checker.core.location import LocationResolver
from coverage_checker.core.sampler import RingFanOutSampler
from coverage_checker.data.reference import OperatorNameRules, ReferenceDataStore
from coverage_checker.data.schemas import CoverageResult
from coverage_checker.data.sources import get_secondary_provider
from coverage_checker.utils.config import CheckerConfig, require_api_key
from coverage_checker.utils.logging_config import get_logger
from coverage_checker.validation.validators import validate_location_query

logger = get_logger(__name__)


class CoveragePipeline:
    """
    Answer "does a FloLive EU2/US2 LTE operator cover this location?".

    Args:
        resolver: LocationResolver
        classifier: CoverageClassifier
    """

    def __init__(self, resolver: LocationResolver, classifier: CoverageClassifier):
        self.resolver = resolver
        self.classifier = classifier

    def run(
        self,
        zip_code: Any = None,
        latitude: Any = None,
        longitude: Any = None,
    ) -> CoverageResult:
        """
        Run one coverage check.

        Raises:
            InvalidInput: Malformed ZIP or coordinates (no network call is made)
            LocationNotFound: Geocoder had no match
            UpstreamUnavailable: Geocoder unreachable
            ConfigurationMissing: Provider rejected the API key
        """
        query = validate_location_query(zip_code, latitude, longitude)
        logger.info("coverage_check_started", query=query.label)

        point = self.resolver.resolve(query)
        result = self.classifier.classify(point, query.label)

        logger.info(
            "coverage_check_finished",
            query=query.label,
            place=result.resolved_place_name,
            connects=result.connects,
            records=result.records_inspected_count,
        )
        return result


def load_reference_data(config: CheckerConfig) -> ReferenceDataStore:
    """Load the reference tables named in ``config``; raises DataLoadError."""
    return ReferenceDataStore.from_files(
        config.reference.allowlist_path,
        config.reference.network_map_path,
        config.reference.service_tiers,
    )


def build_pipeline(
    config: CheckerConfig,
    reference: Optional[ReferenceDataStore] = None,
    session: Optional[requests.Session] = None,
) -> CoveragePipeline:
    """
    Wire clients, sampler, secondary lookup and classifier from ``config``.

    Args:
        config: Validated configuration
        reference: Pre-loaded reference data (loaded from config if None)
        session: Session shared by every call (tests); if None each client keeps one session per thread

    Raises:
        ConfigurationMissing: No OpenCellID API key configured
        DataLoadError: Reference tables could not be loaded
        ConfigurationError: Unknown secondary provider
    """
    api_key = require_api_key(config)
    if reference is None:
        reference = load_reference_data(config)

    geocoder = ZipGeocoder(
        base_url=config.geocoder.base_url,
        timeout_seconds=config.geocoder.timeout_seconds,
        session=session,
    )
    client = OpenCellIdClient(
        api_key=api_key,
        base_url=config.opencellid.base_url,
        timeout_seconds=config.opencellid.timeout_seconds,
        session=session,
    )
    sampler = RingFanOutSampler(AdaptiveAreaQuery(client, config.area_query), config.sampler)

    secondary = get_secondary_provider(
        config.secondary_provider.type,
        sampler=sampler,
        reference=reference,
        catalog_path=config.secondary_provider.catalog_path,
        rules=OperatorNameRules.from_config(config.operator_name_rules),
    )
    classifier = CoverageClassifier(sampler, reference, secondary, config.classifier)

    logger.info(
        "pipeline_ready",
        primary_technology=config.classifier.primary_technology,
        secondary_provider=secondary.name,
        max_rings=config.sampler.max_rings,
        max_requests=config.sampler.max_requests,
    )
    return CoveragePipeline(LocationResolver(geocoder), classifier)
