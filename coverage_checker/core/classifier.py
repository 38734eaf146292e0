"""
Multi-tier coverage classifier.

Tiers, evaluated in order:
1. Primary: sample the primary technology (LTE) and intersect the detected
   operators with the allowlist. Any match means the device connects.
2. Secondary: primary-technology operators exist but none are allowed.
3. Tertiary: nothing of the primary technology was found, so the secondary
   provider lookup scans the broader technology list and the explanation
   lists what was found per technology (or that nothing was).
"""
from collections import OrderedDict
from typing import Dict, List, Optional

from coverage_checker.data.reference import ReferenceDataStore
from coverage_checker.data.schemas import CoverageResult, DetectionDetail, GeoPoint
from coverage_checker.data.sources import SecondaryProviderLookup
from coverage_checker.utils.config import ClassifierConfig
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)


def _unique(values) -> List[str]:
    return list(OrderedDict.fromkeys(values))


class CoverageClassifier:
    """
    Produce the connects / does-not-connect verdict for a resolved point.

    Args:
        sampler: Ring fan-out sampler for the primary technology
        reference: Allowlist and operator name lookup
        secondary: Lookup used when no primary-technology records exist
        config: Primary technology, fallback list and tier label
    """

    def __init__(
        self,
        sampler,
        reference: ReferenceDataStore,
        secondary: SecondaryProviderLookup,
        config: Optional[ClassifierConfig] = None,
    ):
        self.sampler = sampler
        self.reference = reference
        self.secondary = secondary
        self.config = config or ClassifierConfig()

    def classify(self, point: GeoPoint, query_label: Optional[str] = None) -> CoverageResult:
        """
        Classify coverage at ``point``.

        Args:
            point: Resolved location
            query_label: How the caller asked (ZIP or coordinates), used in explanations

        Returns:
            CoverageResult
        """
        primary = self.config.primary_technology
        label = query_label or point.display_name
        place = point.display_name

        sampled = self.sampler.sample(point, primary)
        operators = _unique(
            self.reference.resolve_operator(r.mcc, r.mnc) for r in sampled.records
        )
        matched = [op for op in operators if self.reference.is_allowed(op)]
        details = [DetectionDetail(technology=primary, operator=op) for op in operators]

        if matched:
            logger.info("coverage_connects", technology=primary, matched=matched)
            return CoverageResult(
                connects=True,
                matched_operators=matched,
                explanation=None,
                all_detected_operators=operators,
                detection_details=details,
                records_inspected_count=len(sampled.records),
                resolved_place_name=place,
            )

        if operators:
            logger.info("coverage_not_allowed", technology=primary, detected=operators)
            return CoverageResult(
                connects=False,
                matched_operators=[],
                explanation=(
                    f"No {self.config.tier_label} networks in {label} ({place}), "
                    f"but {primary} towers were detected for: {', '.join(operators)}."
                ),
                all_detected_operators=operators,
                detection_details=details,
                records_inspected_count=len(sampled.records),
                resolved_place_name=place,
            )

        return self._classify_fallback(point, label)

    def _classify_fallback(self, point: GeoPoint, label: str) -> CoverageResult:
        primary = self.config.primary_technology
        place = point.display_name

        scan = self.secondary.scan(point, self.config.fallback_technologies)

        by_technology: Dict[str, List[str]] = OrderedDict()
        for detail in scan.detections:
            by_technology.setdefault(detail.technology, [])
            if detail.operator not in by_technology[detail.technology]:
                by_technology[detail.technology].append(detail.operator)

        if by_technology:
            parts = sorted(f"{tech}: {', '.join(ops)}" for tech, ops in by_technology.items())
            explanation = (
                f"No {primary} towers found near {label} ({place}). "
                f"Detected other towers: {'; '.join(parts)}."
            )
        else:
            explanation = (
                f"No towers of any radio type found near {label} ({place}). "
                f"Crowd data may be sparse in this area."
            )

        all_operators = _unique(d.operator for d in scan.detections)
        logger.info(
            "coverage_fallback",
            technologies=list(by_technology.keys()),
            operators=all_operators,
            records=scan.records_inspected,
        )
        return CoverageResult(
            connects=False,
            matched_operators=[],
            explanation=explanation,
            all_detected_operators=all_operators,
            detection_details=list(scan.detections),
            records_inspected_count=scan.records_inspected,
            resolved_place_name=place,
        )
