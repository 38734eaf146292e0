"""
Custom exception hierarchy for the coverage checker.

All custom exceptions inherit from CoverageCheckerError for easy catching.
Only resolver-stage and configuration failures abort a request; per-box
area query irregularities are absorbed inside the area query layer.
"""


class CoverageCheckerError(Exception):
    """Base exception for all coverage checker errors."""
    pass


class ConfigurationError(CoverageCheckerError):
    """Configuration-related errors.

    Raised when configuration loading or validation fails.

    Example:
        >>> raise ConfigurationError("Unknown secondary provider: 'fcc'")
    """
    pass


class ConfigurationMissing(ConfigurationError):
    """A required credential or setting is absent.

    Fatal: the pipeline must not run without it.

    Attributes:
        setting: Name of the missing setting
    """

    def __init__(self, message: str, setting: str = None):
        super().__init__(message)
        self.setting = setting

    def __str__(self):
        base = super().__str__()
        if self.setting:
            return f"{base} (setting={self.setting})"
        return base


class InvalidCredentials(ConfigurationMissing):
    """The upstream provider rejected the configured credential (HTTP 401/403)."""
    pass


class InvalidInput(CoverageCheckerError):
    """Malformed ZIP code or non-finite coordinates.

    Attributes:
        field: Name of the offending request field
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class LocationNotFound(CoverageCheckerError):
    """The geocoder had no match for the requested ZIP code.

    Attributes:
        query: The ZIP code that was looked up
    """

    def __init__(self, message: str, query: str = None):
        super().__init__(message)
        self.query = query


class UpstreamUnavailable(CoverageCheckerError):
    """Network/transport error or unusable response from an external service.

    Attributes:
        service: Name of the upstream service
        status_code: HTTP status code, if a response was received
    """

    def __init__(self, message: str, service: str = None, status_code: int = None):
        super().__init__(message)
        self.service = service
        self.status_code = status_code

    def __str__(self):
        base = super().__str__()
        details = []
        if self.service:
            details.append(f"service={self.service}")
        if self.status_code is not None:
            details.append(f"status={self.status_code}")
        if details:
            return f"{base} ({', '.join(details)})"
        return base


class DataLoadError(CoverageCheckerError):
    """Reference data loading errors.

    Raised when a reference table cannot be loaded or parsed. Fatal at startup.

    Example:
        >>> raise DataLoadError("Allowlist file not found: data/floLive_US_EU2_US2.json")
    """
    pass
