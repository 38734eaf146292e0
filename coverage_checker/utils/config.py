"""
Configuration management using Pydantic for validation.

Settings are loaded from a YAML file with ``${VAR}`` environment expansion.
A local ``.env`` file is read first so credentials such as
``OPENCELLID_API_KEY`` never need to live in the YAML itself.
"""
import os
import re
from pathlib import Path
from typing import List, Optional, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from coverage_checker.utils.exceptions import ConfigurationMissing

# Reference tables shipped inside the package
PACKAGED_REFERENCE_DIR = Path(__file__).resolve().parent.parent / "data" / "reference"

DEFAULT_FALLBACK_TECHNOLOGIES = ["NR", "LTE", "UMTS", "WCDMA", "GSM", "CDMA"]


def _expand_env_vars(value: str) -> str:
    """Expand ${VAR} references; unset variables expand to an empty string."""
    pattern = r'\$\{([^}]+)\}'

    def replace_var(match):
        return os.environ.get(match.group(1), '')

    return re.sub(pattern, replace_var, value)


class OpenCellIdConfig(BaseModel):
    """Cell-tower area query provider."""
    base_url: str = "https://opencellid.org"
    api_key: Optional[str] = Field(None, description="OpenCellID API key")
    timeout_seconds: float = Field(5.0, gt=0.0, description="Per-call timeout")

    @field_validator('api_key', mode='before')
    @classmethod
    def expand_key(cls, v):
        if isinstance(v, str):
            v = _expand_env_vars(v).strip()
            return v or None
        return v


class GeocoderConfig(BaseModel):
    """ZIP-to-coordinate geocoding service."""
    base_url: str = "https://api.zippopotam.us/us"
    timeout_seconds: float = Field(5.0, gt=0.0)


class AreaQueryConfig(BaseModel):
    """Adaptive bounding-box query parameters (degrees)."""
    start_half_width: float = Field(0.008, gt=0.0, description="Initial box half-width")
    min_half_width: float = Field(0.004, gt=0.0, description="Floor when shrinking the box")
    max_attempts: int = Field(6, ge=1, description="Attempts before giving up on a box")

    @model_validator(mode='after')
    def check_floor(self):
        if self.min_half_width > self.start_half_width:
            raise ValueError("min_half_width must not exceed start_half_width")
        return self


class SamplerConfig(BaseModel):
    """Ring fan-out parameters."""
    box_step: float = Field(0.008, gt=0.0, description="Ring spacing and box half-width (degrees)")
    max_rings: int = Field(8, ge=0, description="Rings sampled beyond the centre box")
    max_requests: int = Field(72, ge=1, description="Request ceiling per technology")
    result_threshold: int = Field(80, ge=1, description="Stop once this many records are collected")


class ClassifierConfig(BaseModel):
    """Multi-tier classification settings."""
    primary_technology: str = "LTE"
    fallback_technologies: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_TECHNOLOGIES)
    )
    tier_label: str = "FloLive EU2/US2"

    @field_validator('primary_technology')
    @classmethod
    def upper_primary(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator('fallback_technologies')
    @classmethod
    def upper_fallbacks(cls, v: List[str]) -> List[str]:
        return [t.strip().upper() for t in v if t and t.strip()]


class ReferenceConfig(BaseModel):
    """Static reference tables."""
    allowlist_path: Path = PACKAGED_REFERENCE_DIR / "floLive_US_EU2_US2.json"
    network_map_path: Path = PACKAGED_REFERENCE_DIR / "us_mccmnc_to_operator.json"
    service_tiers: List[str] = Field(default_factory=lambda: ["EU 2", "US 2"])

    @field_validator('allowlist_path', 'network_map_path', mode='before')
    @classmethod
    def expand_path(cls, v):
        if isinstance(v, str):
            return Path(_expand_env_vars(v))
        return v


class SecondaryProviderConfig(BaseModel):
    """Which lookup backs the tertiary (any-technology) tier."""
    type: Literal["opencellid", "catalog"] = "opencellid"
    catalog_path: Optional[Path] = None

    @model_validator(mode='after')
    def check_catalog(self):
        if self.type == "catalog" and self.catalog_path is None:
            raise ValueError("catalog_path is required when secondary_provider.type is 'catalog'")
        return self


class OperatorNameRuleConfig(BaseModel):
    """One (pattern, canonical name) normalisation rule."""
    pattern: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator('pattern')
    @classmethod
    def compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid operator name pattern {v!r}: {e}") from e
        return v


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False


class CheckerConfig(BaseModel):
    """Complete coverage checker configuration."""
    opencellid: OpenCellIdConfig = Field(default_factory=OpenCellIdConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)
    area_query: AreaQueryConfig = Field(default_factory=AreaQueryConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    reference: ReferenceConfig = Field(default_factory=ReferenceConfig)
    secondary_provider: SecondaryProviderConfig = Field(default_factory=SecondaryProviderConfig)
    operator_name_rules: List[OperatorNameRuleConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _resolve_relative(path: Optional[Path], base: Path) -> Optional[Path]:
    if path is None or path.is_absolute():
        return path
    return base / path


def load_config(config_path: Path, env_file: Optional[Path] = None) -> CheckerConfig:
    """
    Load and validate configuration from a YAML file.

    Relative reference and catalog paths are resolved against the directory
    holding the config file.

    Args:
        config_path: Path to YAML config file
        env_file: Optional .env file (default: search from the working directory)

    Returns:
        Validated CheckerConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is malformed
        ValidationError: If config validation fails

    Example:
        >>> config = load_config(Path("config/default.yaml"))
        >>> config.sampler.max_rings
        8
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    load_dotenv(dotenv_path=env_file)

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    config = CheckerConfig(**config_dict)

    base = config_path.resolve().parent
    config.reference.allowlist_path = _resolve_relative(config.reference.allowlist_path, base)
    config.reference.network_map_path = _resolve_relative(config.reference.network_map_path, base)
    config.secondary_provider.catalog_path = _resolve_relative(
        config.secondary_provider.catalog_path, base
    )
    return config


def get_default_config() -> CheckerConfig:
    """
    Get the default configuration, taking the API key from the environment.

    Returns:
        Default CheckerConfig
    """
    load_dotenv()
    return CheckerConfig(
        opencellid=OpenCellIdConfig(api_key="${OPENCELLID_API_KEY}"),
    )


def require_api_key(config: CheckerConfig) -> str:
    """
    Return the OpenCellID API key or fail.

    Raises:
        ConfigurationMissing: If no key is configured
    """
    if not config.opencellid.api_key:
        raise ConfigurationMissing(
            "Server missing OPENCELLID_API_KEY",
            setting="opencellid.api_key",
        )
    return config.opencellid.api_key
