"""
Reference data store: allowed operators and network-id to operator names.

Built once per process from static tables and passed by injection into the
pipeline. Both tables are immutable after construction.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence

from coverage_checker.data.loaders import (
    build_allowed_operators,
    load_allowlist_table,
    load_network_map,
)
from coverage_checker.utils.exceptions import DataLoadError
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)


def network_key(mcc, mnc) -> str:
    """Combined lookup key: MCC followed by the 3-digit zero-padded MNC."""
    return f"{mcc}{str(mnc).zfill(3)}"


def placeholder_operator(mcc, mnc) -> str:
    """Label for networks missing from the map, e.g. 'MCC310-MNC999'."""
    return f"MCC{mcc}-MNC{str(mnc).zfill(3)}"


class ReferenceDataStore:
    """
    Read-only allowlist and MCC/MNC operator map.

    Example:
        >>> store = ReferenceDataStore(
        ...     allowed_operators={'AT&T Mobility'},
        ...     network_map={'310410': 'AT&T Mobility'},
        ... )
        >>> store.resolve_operator(310, 410)
        'AT&T Mobility'
        >>> store.resolve_operator(310, 999)
        'MCC310-MNC999'
        >>> store.is_allowed('AT&T Mobility')
        True
    """

    __slots__ = ('_allowed', '_network_map')

    def __init__(self, allowed_operators: Iterable[str], network_map: Mapping[str, str]):
        object.__setattr__(self, '_allowed', frozenset(allowed_operators))
        object.__setattr__(self, '_network_map', MappingProxyType(dict(network_map)))

    def __setattr__(self, name, value):
        raise AttributeError("ReferenceDataStore is read-only")

    @property
    def allowed_operators(self) -> frozenset:
        return self._allowed

    @property
    def network_map(self) -> Mapping[str, str]:
        return self._network_map

    def is_allowed(self, operator_name: str) -> bool:
        return operator_name in self._allowed

    def resolve_operator(self, mcc, mnc) -> str:
        """Map an MCC/MNC pair to an operator name; never fails."""
        name = self._network_map.get(network_key(mcc, mnc))
        return name or placeholder_operator(mcc, mnc)

    @classmethod
    def from_files(
        cls,
        allowlist_path: Path,
        network_map_path: Path,
        service_tiers: Sequence[str] = ("EU 2", "US 2"),
    ) -> 'ReferenceDataStore':
        """
        Load both reference tables.

        Raises:
            DataLoadError: If either table is missing or malformed, or if no
                operator carries one of the service tiers
        """
        table = load_allowlist_table(allowlist_path)
        allowed = build_allowed_operators(table, list(service_tiers))
        if not allowed:
            raise DataLoadError(
                f"No operators tagged {list(service_tiers)} in {allowlist_path}"
            )

        network_map = load_network_map(network_map_path)

        logger.info(
            "reference_data_ready",
            allowed_operators=len(allowed),
            network_map_entries=len(network_map),
            service_tiers=list(service_tiers),
        )
        return cls(allowed, network_map)


@dataclass(frozen=True)
class OperatorNameRule:
    """Canonical name for raw operator text matching ``pattern``."""
    pattern: str
    name: str


class OperatorNameRules:
    """
    Ordered operator name normalisation rules.

    Patterns are case-insensitive regular expressions searched in the raw
    text. Rules are tried in order and the first match wins; text matching no
    rule is returned trimmed.

    Example:
        >>> rules = OperatorNameRules([
        ...     OperatorNameRule(r'\\bat&t\\b|cingular', 'AT&T Mobility'),
        ...     OperatorNameRule(r't-?mobile', 'T-Mobile USA'),
        ... ])
        >>> rules.normalize('AT&T Wireless (Cingular)')
        'AT&T Mobility'
    """

    def __init__(self, rules: Optional[List[OperatorNameRule]] = None):
        self.rules = tuple(rules or ())
        self._compiled = tuple(
            (re.compile(rule.pattern, re.IGNORECASE), rule.name) for rule in self.rules
        )

    def __len__(self):
        return len(self.rules)

    def normalize(self, raw: str) -> str:
        text = (raw or '').strip()
        for regex, name in self._compiled:
            if regex.search(text):
                return name
        return text

    @classmethod
    def from_config(cls, rule_configs) -> 'OperatorNameRules':
        return cls([OperatorNameRule(pattern=r.pattern, name=r.name) for r in rule_configs])
