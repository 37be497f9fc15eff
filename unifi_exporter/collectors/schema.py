"""
Static metric descriptors for the UniFi collectors.

Every metric a collector can emit is declared here once, with its name, help text
and label names. Descriptors never depend on data fetched from the controller, so
the set a collector describes is identical for the whole life of the process.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

# Top-level namespace for all metrics of this exporter
NAMESPACE = "unifi"

GAUGE = "gauge"
COUNTER = "counter"

LABELS_SITE_ONLY = ("site",)
LABELS_DEVICE = ("site", "id", "mac", "name")
LABELS_DEVICE_RADIO = LABELS_DEVICE + ("interface", "radio")
LABELS_STATION = ("site", "id", "ap_mac", "station_mac", "hostname")
LABELS_COLLECTOR = ("collector",)

MetricFamily = Union[CounterMetricFamily, GaugeMetricFamily]


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """
    Join the non-empty parts of a metric name with underscores.

    >>> build_fq_name("unifi", "devices", "adopted")
    'unifi_devices_adopted'
    >>> build_fq_name("unifi", "", "devices")
    'unifi_devices'
    """
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class MetricDescriptor:
    """
    The static declaration of one metric.

    Attributes:
        name: Fully qualified metric name as it appears in the exposition output.
        documentation: Help text.
        labels: Label names, in the order label values are supplied.
        kind: ``gauge`` or ``counter``.
    """
    name: str
    documentation: str
    labels: Tuple[str, ...]
    kind: str = GAUGE

    def __post_init__(self):
        if self.kind not in (GAUGE, COUNTER):
            raise ValueError(f"Unsupported metric kind: {self.kind}")

    def new_family(self) -> MetricFamily:
        """Create an empty metric family for this descriptor."""
        if self.kind == COUNTER:
            return CounterMetricFamily(self.name, self.documentation, labels=self.labels)
        return GaugeMetricFamily(self.name, self.documentation, labels=self.labels)

    def check_labels(self, values: Sequence[str]) -> None:
        """
        Ensure a sample supplies exactly one value per declared label.

        Raises:
            ValueError: If the number of label values does not match.
        """
        if len(values) != len(self.labels):
            raise ValueError(
                f"{self.name} expects labels {self.labels}, got {len(values)} values: {tuple(values)}")


class DeviceMetrics:
    """Descriptors for the metrics exported about UniFi devices."""

    subsystem = "devices"

    def __init__(self, namespace: str = NAMESPACE):
        def fq(name):
            return build_fq_name(namespace, self.subsystem, name)

        self.devices = MetricDescriptor(
            fq("total"), "Total number of devices", LABELS_SITE_ONLY)
        self.adopted_devices = MetricDescriptor(
            fq("adopted"), "Number of devices which are adopted", LABELS_SITE_ONLY)
        self.unadopted_devices = MetricDescriptor(
            fq("unadopted"), "Number of devices which are not adopted", LABELS_SITE_ONLY)

        self.uptime_seconds_total = MetricDescriptor(
            fq("uptime_seconds_total"), "Device uptime in seconds",
            LABELS_DEVICE, COUNTER)

        self.bytes_total = MetricDescriptor(
            fq("bytes_total"), "Total number of bytes transferred by devices",
            LABELS_DEVICE, COUNTER)

        self.wireless_received_bytes_total = MetricDescriptor(
            fq("wireless_received_bytes_total"),
            "Number of bytes received wirelessly by devices",
            LABELS_DEVICE, COUNTER)
        self.wireless_transmitted_bytes_total = MetricDescriptor(
            fq("wireless_transmitted_bytes_total"),
            "Number of bytes transmitted wirelessly by devices",
            LABELS_DEVICE, COUNTER)
        self.wireless_received_packets_total = MetricDescriptor(
            fq("wireless_received_packets_total"),
            "Number of packets received wirelessly by devices",
            LABELS_DEVICE, COUNTER)
        self.wireless_transmitted_packets_total = MetricDescriptor(
            fq("wireless_transmitted_packets_total"),
            "Number of packets transmitted wirelessly by devices",
            LABELS_DEVICE, COUNTER)
        self.wireless_transmitted_dropped_total = MetricDescriptor(
            fq("wireless_transmitted_packets_dropped_total"),
            "Number of packets which are dropped on wireless transmission by devices",
            LABELS_DEVICE, COUNTER)

        self.wired_received_bytes_total = MetricDescriptor(
            fq("wired_received_bytes_total"),
            "Number of bytes received using wired interface by devices",
            LABELS_DEVICE, COUNTER)
        self.wired_transmitted_bytes_total = MetricDescriptor(
            fq("wired_transmitted_bytes_total"),
            "Number of bytes transmitted using wired interface by devices",
            LABELS_DEVICE, COUNTER)
        self.wired_received_packets_total = MetricDescriptor(
            fq("wired_received_packets_total"),
            "Number of packets received using wired interface by devices",
            LABELS_DEVICE, COUNTER)
        self.wired_transmitted_packets_total = MetricDescriptor(
            fq("wired_transmitted_packets_total"),
            "Number of packets transmitted using wired interface by devices",
            LABELS_DEVICE, COUNTER)

        self.stations = MetricDescriptor(
            fq("stations"),
            "Total number of stations (clients) connected to devices",
            LABELS_DEVICE_RADIO)
        self.user_stations = MetricDescriptor(
            fq("stations_user"),
            "Number of user stations (private clients) connected to devices",
            LABELS_DEVICE_RADIO)
        self.guest_stations = MetricDescriptor(
            fq("stations_guest"),
            "Number of guest stations (public clients) connected to devices",
            LABELS_DEVICE_RADIO)

    def descriptors(self) -> List[MetricDescriptor]:
        return [
            self.devices,
            self.adopted_devices,
            self.unadopted_devices,

            self.uptime_seconds_total,
            self.bytes_total,

            self.wireless_received_bytes_total,
            self.wireless_transmitted_bytes_total,

            self.wireless_received_packets_total,
            self.wireless_transmitted_packets_total,
            self.wireless_transmitted_dropped_total,

            self.wired_received_bytes_total,
            self.wired_transmitted_bytes_total,

            self.wired_received_packets_total,
            self.wired_transmitted_packets_total,

            self.stations,
            self.user_stations,
            self.guest_stations,
        ]


class StationMetrics:
    """Descriptors for the metrics exported about UniFi stations (clients)."""

    subsystem = "stations"

    def __init__(self, namespace: str = NAMESPACE):
        def fq(name):
            return build_fq_name(namespace, self.subsystem, name)

        self.stations = MetricDescriptor(
            fq("total"), "Total number of stations (clients)", LABELS_SITE_ONLY)

        self.received_bytes_total = MetricDescriptor(
            fq("received_bytes_total"),
            "Number of bytes received by stations (client download)",
            LABELS_STATION, COUNTER)
        self.transmitted_bytes_total = MetricDescriptor(
            fq("transmitted_bytes_total"),
            "Number of bytes transmitted by stations (client upload)",
            LABELS_STATION, COUNTER)

        self.received_packets_total = MetricDescriptor(
            fq("received_packets_total"),
            "Number of packets received by stations (client download)",
            LABELS_STATION, COUNTER)
        self.transmitted_packets_total = MetricDescriptor(
            fq("transmitted_packets_total"),
            "Number of packets transmitted by stations (client upload)",
            LABELS_STATION, COUNTER)

        self.rssi_dbm = MetricDescriptor(
            fq("rssi_dbm"), "Current signal strength of stations", LABELS_STATION)
        self.noise_dbm = MetricDescriptor(
            fq("noise_dbm"), "Current noise floor of stations", LABELS_STATION)

    def descriptors(self) -> List[MetricDescriptor]:
        return [
            self.stations,

            self.received_bytes_total,
            self.transmitted_bytes_total,

            self.received_packets_total,
            self.transmitted_packets_total,

            self.rssi_dbm,
            self.noise_dbm,
        ]


class ExporterMetrics:
    """Descriptors for the metrics the exporter reports about its own collectors."""

    subsystem = "collector"

    def __init__(self, namespace: str = NAMESPACE):
        self.success = MetricDescriptor(
            build_fq_name(namespace, self.subsystem, "success"),
            "Whether the collector succeeded during this scrape (1) or failed (0)",
            LABELS_COLLECTOR)
        self.duration_seconds = MetricDescriptor(
            build_fq_name(namespace, self.subsystem, "duration_seconds"),
            "Time spent by the collector during this scrape",
            LABELS_COLLECTOR)

    def descriptors(self) -> List[MetricDescriptor]:
        return [self.success, self.duration_seconds]
