"""
Reference table loading functions with validation.

Loads the service-tier allowlist, the MCC/MNC operator map and optional
provider catalogs. Any failure raises DataLoadError; callers treat it as a
fatal startup error.
"""
import json
from pathlib import Path
from typing import Dict, List, Iterable

import pandas as pd

from coverage_checker.utils.exceptions import DataLoadError
from coverage_checker.utils.logging_config import get_logger

logger = get_logger(__name__)

ALLOWLIST_TIER_COLUMN = 'IMSI_Provider'
ALLOWLIST_OPERATOR_COLUMN = 'Operator'

CATALOG_COLUMNS = ['zip', 'state', 'technology', 'operator']


def _read_table(file_path: Path) -> pd.DataFrame:
    """Read a JSON (list of rows) or CSV table into a DataFrame."""
    suffix = file_path.suffix.lower()
    if suffix == '.json':
        with open(file_path, 'r', encoding='utf-8') as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise DataLoadError(f"Expected a list of rows in {file_path}, got {type(rows).__name__}")
        return pd.DataFrame(rows)
    if suffix == '.csv':
        return pd.read_csv(file_path, dtype=str, keep_default_na=False)
    raise DataLoadError(f"Unsupported table format: {file_path.suffix} ({file_path})")


def _require_columns(df: pd.DataFrame, columns: Iterable[str], name: str) -> None:
    missing = set(columns) - set(df.columns)
    if missing:
        raise DataLoadError(
            f"{name} missing required columns: {sorted(missing)}. "
            f"Available columns: {sorted(df.columns.tolist())}"
        )


def load_allowlist_table(file_path: Path) -> pd.DataFrame:
    """
    Load the provider table that tags operators with a service tier.

    Args:
        file_path: Path to the JSON or CSV provider table

    Returns:
        DataFrame with at least IMSI_Provider and Operator columns

    Raises:
        DataLoadError: If the file is missing, unreadable or lacks columns

    Example:
        >>> df = load_allowlist_table(Path("data/floLive_US_EU2_US2.json"))
        >>> df['IMSI_Provider'].unique()
    """
    if not file_path.exists():
        raise DataLoadError(f"Allowlist file not found: {file_path}")

    logger.info("loading_allowlist", file=str(file_path))

    try:
        df = _read_table(file_path)
    except DataLoadError:
        raise
    except (OSError, ValueError) as e:
        raise DataLoadError(f"Failed to read allowlist table: {e}") from e

    _require_columns(df, [ALLOWLIST_TIER_COLUMN, ALLOWLIST_OPERATOR_COLUMN], "Allowlist table")
    logger.info("allowlist_loaded", rows=len(df))
    return df


def build_allowed_operators(df: pd.DataFrame, service_tiers: List[str]) -> frozenset:
    """
    Collect trimmed operator names from rows tagged with one of the tiers.

    Args:
        df: Provider table from load_allowlist_table
        service_tiers: Tier labels to keep (e.g. ["EU 2", "US 2"])

    Returns:
        Frozen set of operator names
    """
    tiers = df[ALLOWLIST_TIER_COLUMN].astype(str).str.strip()
    selected = df.loc[tiers.isin([t.strip() for t in service_tiers]), ALLOWLIST_OPERATOR_COLUMN]
    operators = selected.fillna('').astype(str).str.strip()
    return frozenset(op for op in operators if op)


def load_network_map(file_path: Path) -> Dict[str, str]:
    """
    Load the MCC+MNC to operator name map.

    Keys are the MCC followed by the 3-digit zero-padded MNC ("310410").

    Raises:
        DataLoadError: If the file is missing or is not a JSON object of strings
    """
    if not file_path.exists():
        raise DataLoadError(f"Network map file not found: {file_path}")

    logger.info("loading_network_map", file=str(file_path))

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise DataLoadError(f"Failed to read network map: {e}") from e

    if not isinstance(raw, dict):
        raise DataLoadError(f"Network map must be a JSON object, got {type(raw).__name__}")

    mapping = {}
    for key, name in raw.items():
        if not isinstance(name, str):
            raise DataLoadError(f"Network map entry {key!r} is not a string")
        name = name.strip()
        if name:
            mapping[str(key).strip()] = name

    logger.info("network_map_loaded", entries=len(mapping))
    return mapping


def load_provider_catalog(file_path: Path) -> pd.DataFrame:
    """
    Load a static provider catalog (zip, state, technology, operator).

    Blank zip means the row applies to the whole state.

    Raises:
        DataLoadError: If the file is missing, unreadable or lacks columns
    """
    if not file_path.exists():
        raise DataLoadError(f"Provider catalog not found: {file_path}")

    logger.info("loading_provider_catalog", file=str(file_path))

    try:
        df = _read_table(file_path)
    except DataLoadError:
        raise
    except (OSError, ValueError) as e:
        raise DataLoadError(f"Failed to read provider catalog: {e}") from e

    _require_columns(df, CATALOG_COLUMNS, "Provider catalog")

    df = df[CATALOG_COLUMNS].fillna('').astype(str)
    for col in CATALOG_COLUMNS:
        df[col] = df[col].str.strip()
    df['technology'] = df['technology'].str.upper()
    df['state'] = df['state'].str.upper()
    df = df[(df['operator'] != '') & (df['technology'] != '')].reset_index(drop=True)

    logger.info("provider_catalog_loaded", rows=len(df))
    return df
