"""
Models for UniFi stations (clients).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..exceptions import UnifiMappingError
from ..utils import parse_mac, parse_timestamp, to_float


@dataclass
class UnifiStation:
    """Represents a client (station) connected to the UniFi network.

    Attributes:
        id: Unique identifier for the station.
        mac: MAC address of the station.
        ap_mac: MAC address of the access point the station is associated with.
            Empty for wired or unassociated stations.
        name: Name assigned to the station on the controller.
        hostname: Hostname reported by the station itself.
        is_wired: Indicates if the station is connected via a wired connection.
        rssi: Current signal strength.
        noise: Current noise floor.
        rx_bytes: Bytes received by the station (client download).
        tx_bytes: Bytes transmitted by the station (client upload).
        rx_packets: Packets received by the station.
        tx_packets: Packets transmitted by the station.
        first_seen: When the station was first seen by the controller.
        last_seen: When the station was last seen by the controller.
        assoc_time: When the station associated with its access point.
        site_id: Identifier of the site the station belongs to.
    """
    id: str
    mac: str
    ap_mac: str = ""
    name: str = ""
    hostname: str = ""
    is_wired: bool = False
    rssi: float = 0.0
    noise: float = 0.0
    rx_bytes: float = 0.0
    tx_bytes: float = 0.0
    rx_packets: float = 0.0
    tx_packets: float = 0.0
    first_seen: Optional[datetime] = None
    last_seen: Optional[datetime] = None
    assoc_time: Optional[datetime] = None
    site_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        """The controller-assigned name if set, otherwise the station's own hostname."""
        if self.name:
            return self.name
        return self.hostname

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UnifiStation":
        """
        Build a station from a raw ``/api/s/{site}/stat/sta`` record.

        Raises:
            UnifiMappingError: If the station MAC, AP MAC or a timestamp is malformed.
        """
        if not isinstance(data, dict):
            raise UnifiMappingError(f"Station record is not an object: {data!r}")

        station_id = data.get("_id")
        if not isinstance(station_id, str) or not station_id:
            raise UnifiMappingError(f"Station record without an _id: {data!r}")

        is_wired = bool(data.get("is_wired", False))

        return cls(
            id=station_id,
            mac=parse_mac(data.get("mac"), "mac"),
            ap_mac=_map_ap_mac(data.get("ap_mac"), is_wired),
            name=data.get("name") or "",
            hostname=data.get("hostname") or "",
            is_wired=is_wired,
            rssi=to_float(data.get("rssi"), "rssi"),
            noise=to_float(data.get("noise"), "noise"),
            rx_bytes=to_float(data.get("rx_bytes"), "rx_bytes"),
            tx_bytes=to_float(data.get("tx_bytes"), "tx_bytes"),
            rx_packets=to_float(data.get("rx_packets"), "rx_packets"),
            tx_packets=to_float(data.get("tx_packets"), "tx_packets"),
            first_seen=parse_timestamp(data.get("first_seen"), "first_seen"),
            last_seen=parse_timestamp(data.get("last_seen"), "last_seen"),
            assoc_time=parse_timestamp(data.get("assoc_time"), "assoc_time"),
            site_id=data.get("site_id"),
        )


def _map_ap_mac(value: Any, is_wired: bool) -> str:
    if not value:
        return ""
    try:
        return parse_mac(value, "ap_mac")
    except UnifiMappingError:
        # Wired clients may carry a stale, malformed AP MAC
        if is_wired:
            return ""
        raise
