from typing import Optional


class UnifiExporterError(Exception):
    """Base exception for unifi_exporter errors."""

    pass


class UnifiAuthenticationError(UnifiExporterError):
    """Raised when authentication with the UniFi Controller fails or the session has expired."""

    pass


class UnifiAPIError(UnifiExporterError):
    """Raised when an API call to the UniFi Controller fails."""

    pass


class UnifiDataError(UnifiExporterError):
    """Raised when there is an error parsing data from the UniFi Controller."""

    pass


class UnifiMappingError(UnifiDataError):
    """Raised when an API record violates an assumption of the data models."""

    pass


class MissingInterfaceError(UnifiMappingError):
    """Raised when a device record carries no interface (MAC) record."""

    def __init__(self, device_id: Optional[str] = None):
        self.device_id = device_id
        super().__init__(f"missing interface record for device {device_id!r}")


class UnifiConfigError(UnifiExporterError):
    """Raised when the exporter configuration is invalid."""

    pass


class UnifiCollectionError(UnifiExporterError):
    """
    Raised when a collector fails to collect metrics for a site.

    Attributes:
        metric: Name of the metric being collected when the failure occurred.
        site: Description of the site being collected.
        cause: The underlying exception.
    """

    def __init__(self, metric: str, site: str, cause: Exception):
        self.metric = metric
        self.site = site
        self.cause = cause
        super().__init__(
            f"failed collecting {metric} for site {site!r}: {cause}")

    @property
    def is_authentication_failure(self) -> bool:
        return isinstance(self.cause, UnifiAuthenticationError)
