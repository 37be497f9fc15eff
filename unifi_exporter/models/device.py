"""
Models for UniFi devices and related objects.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MissingInterfaceError, UnifiMappingError
from ..utils import parse_mac, to_float

RADIO_NA = "na"
RADIO_NG = "ng"

BAND_5GHZ = "5GHz"
BAND_24GHZ = "2.4GHz"

RADIO_BANDS = {
    RADIO_NA: BAND_5GHZ,
    RADIO_NG: BAND_24GHZ,
}


@dataclass
class NIC:
    """A wired ethernet network interface attached to a device."""
    mac: str
    name: Optional[str] = None


@dataclass
class RadioStationStats:
    """Station counts for a single radio."""
    num_sta: float = 0.0
    user_num_sta: float = 0.0
    guest_num_sta: float = 0.0


@dataclass
class Radio:
    """
    A wireless radio attached to a device.

    ``band`` and ``stats`` are None when the controller reports a radio code
    that does not map onto a supported band.
    """
    name: str
    radio: Optional[str] = None
    band: Optional[str] = None
    stats: Optional[RadioStationStats] = None


@dataclass
class WirelessStats:
    rx_bytes: float = 0.0
    rx_packets: float = 0.0
    tx_bytes: float = 0.0
    tx_packets: float = 0.0
    tx_dropped: float = 0.0


@dataclass
class WiredStats:
    rx_bytes: float = 0.0
    rx_packets: float = 0.0
    tx_bytes: float = 0.0
    tx_packets: float = 0.0


@dataclass
class DeviceStats:
    """Network activity statistics for a device."""
    total_bytes: float = 0.0
    wireless: WirelessStats = field(default_factory=WirelessStats)
    wired: WiredStats = field(default_factory=WiredStats)


@dataclass
class UnifiDevice:
    """
    Represents a UniFi network device.

    This class models a device managed by a UniFi controller, such as an access point
    or switch. Only the fields needed to export metrics are kept; every counter is
    stored as a float regardless of how the controller encoded it.
    """
    id: str
    mac: str
    adopted: bool = False
    name: str = ""
    model: Optional[str] = None
    type: Optional[str] = None
    version: Optional[str] = None
    uptime: float = 0.0
    nics: List[NIC] = field(default_factory=list)
    radios: List[Radio] = field(default_factory=list)
    stats: DeviceStats = field(default_factory=DeviceStats)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UnifiDevice":
        """
        Build a device from a raw ``/api/s/{site}/stat/device`` record.

        The device MAC is taken from the first entry of ``ethernet_table``; devices
        that report no ethernet table fall back to their top-level ``mac`` field.

        Args:
            data: One element of the API response ``data`` list.

        Returns:
            The mapped UnifiDevice.

        Raises:
            MissingInterfaceError: If the record has no interface to take a MAC from.
            UnifiMappingError: If any field is malformed.
        """
        if not isinstance(data, dict):
            raise UnifiMappingError(f"Device record is not an object: {data!r}")

        device_id = data.get("_id")
        if not isinstance(device_id, str) or not device_id:
            raise UnifiMappingError(f"Device record without an _id: {data!r}")

        nics = [
            NIC(mac=parse_mac(et.get("mac"), "ethernet_table.mac"), name=et.get("name"))
            for et in _table(data, "ethernet_table")
        ]
        if nics:
            mac = nics[0].mac
        elif data.get("mac"):
            mac = parse_mac(data["mac"], "mac")
        else:
            raise MissingInterfaceError(device_id)

        return cls(
            id=device_id,
            mac=mac,
            adopted=bool(data.get("adopted", False)),
            name=data.get("name") or "",
            model=data.get("model"),
            type=data.get("type"),
            version=data.get("version"),
            uptime=to_float(data.get("uptime"), "uptime"),
            nics=nics,
            radios=[_map_radio(data, rt) for rt in _table(data, "radio_table")],
            stats=_map_stats(data),
        )


def _table(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    table = data.get(key) or []
    if not isinstance(table, list) or not all(isinstance(row, dict) for row in table):
        raise UnifiMappingError(f"Field {key} is not a list of objects")
    return table


def _map_radio(data: Dict[str, Any], rt: Dict[str, Any]) -> Radio:
    code = rt.get("radio")
    radio = Radio(name=rt.get("name") or "", radio=code)

    # 5GHz and 2.4GHz station counts live under different top-level keys,
    # so the radio code decides where the counts come from
    band = RADIO_BANDS.get(code) if isinstance(code, str) else None
    if band is not None:
        radio.band = band
        radio.stats = RadioStationStats(
            num_sta=to_float(data.get(f"{code}-num_sta"), f"{code}-num_sta"),
            user_num_sta=to_float(
                data.get(f"{code}-user-num_sta"), f"{code}-user-num_sta"),
            guest_num_sta=to_float(
                data.get(f"{code}-guest-num_sta"), f"{code}-guest-num_sta"),
        )
    return radio


def _map_stats(data: Dict[str, Any]) -> DeviceStats:
    stat = data.get("stat") or {}
    uplink = data.get("uplink") or {}
    if not isinstance(stat, dict):
        raise UnifiMappingError("Field stat is not an object")
    if not isinstance(uplink, dict):
        raise UnifiMappingError("Field uplink is not an object")

    def wired(key: str) -> float:
        # Newer controllers report a separate uplink object, older ones
        # flatten it into stat with an "uplink-" prefix
        if key in uplink:
            return to_float(uplink[key], f"uplink.{key}")
        return to_float(stat.get(f"uplink-{key}"), f"stat.uplink-{key}")

    return DeviceStats(
        total_bytes=to_float(stat.get("bytes"), "stat.bytes"),
        wireless=WirelessStats(
            rx_bytes=to_float(stat.get("rx_bytes"), "stat.rx_bytes"),
            rx_packets=to_float(stat.get("rx_packets"), "stat.rx_packets"),
            tx_bytes=to_float(stat.get("tx_bytes"), "stat.tx_bytes"),
            tx_packets=to_float(stat.get("tx_packets"), "stat.tx_packets"),
            tx_dropped=to_float(stat.get("tx_dropped"), "stat.tx_dropped"),
        ),
        wired=WiredStats(
            rx_bytes=wired("rx_bytes"),
            rx_packets=wired("rx_packets"),
            tx_bytes=wired("tx_bytes"),
            tx_packets=wired("tx_packets"),
        ),
    )
