"""
Prometheus exporter for the UniFi Controller API.

This package polls a UniFi Controller for site, device and station (client)
inventory and statistics, and exposes them as Prometheus metrics.
"""

__version__ = "0.3.0"

from .api_client import UnifiController
from .models import UnifiSite, UnifiDevice, UnifiStation
from .exporter import Exporter, ExporterState, pick_sites, sites_string
from .collectors import DeviceCollector, StationCollector
from .config import ExporterConfig
from .exceptions import (
    UnifiExporterError,
    UnifiAuthenticationError,
    UnifiAPIError,
    UnifiDataError,
    UnifiMappingError,
    MissingInterfaceError,
    UnifiCollectionError,
    UnifiConfigError,
)

__all__ = [
    "__version__",
    "UnifiController",
    "UnifiSite",
    "UnifiDevice",
    "UnifiStation",
    "Exporter",
    "ExporterState",
    "pick_sites",
    "sites_string",
    "DeviceCollector",
    "StationCollector",
    "ExporterConfig",
    "UnifiExporterError",
    "UnifiAuthenticationError",
    "UnifiAPIError",
    "UnifiDataError",
    "UnifiMappingError",
    "MissingInterfaceError",
    "UnifiCollectionError",
    "UnifiConfigError",
]
