"""
Data models for UniFi Controller API responses.

.. warning::
    The dataclasses defined in this module represent the fields of the UniFi
    Controller's **undocumented** private API responses that are needed to export
    metrics. The actual data structure returned by the API varies with the
    controller version, device model and firmware version.

    Each model is built with its ``from_api`` constructor, which normalizes every
    counter to a float (controllers disagree on integer versus floating point
    encoding) and validates hardware addresses and timestamps. A record that
    cannot be mapped raises :class:`~unifi_exporter.exceptions.UnifiMappingError`
    rather than producing a partially filled object.
"""

from .device import (
    UnifiDevice,
    NIC,
    Radio,
    RadioStationStats,
    DeviceStats,
    WirelessStats,
    WiredStats,
    BAND_5GHZ,
    BAND_24GHZ,
)
from .site import UnifiSite
from .station import UnifiStation

__all__ = [
    "UnifiDevice",
    "NIC",
    "Radio",
    "RadioStationStats",
    "DeviceStats",
    "WirelessStats",
    "WiredStats",
    "BAND_5GHZ",
    "BAND_24GHZ",
    "UnifiSite",
    "UnifiStation",
]
