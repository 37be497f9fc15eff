from typing import List

from ..models.site import UnifiSite
from ..models.station import UnifiStation
from .base import MetricBatch, SiteCollector
from .schema import StationMetrics


class StationCollector(SiteCollector):
    """Collects metrics about UniFi stations (clients)."""

    name = "stations"
    metrics_class = StationMetrics

    def collect_site(self, batch: MetricBatch, site: UnifiSite) -> None:
        stations = self._fetch(self.client.list_stations, self.metrics.stations, site)
        site_label = site.description

        batch.add(self.metrics.stations, len(stations), [site_label])

        for station in stations:
            labels = [
                site_label,
                station.id,
                station.ap_mac,
                station.mac,
                station.display_name,
            ]
            self._collect_bytes(batch, labels, station)
            self._collect_signal(batch, labels, station)

    def _collect_bytes(self, batch: MetricBatch, labels: List[str],
                       station: UnifiStation) -> None:
        m = self.metrics
        batch.add(m.received_bytes_total, station.rx_bytes, labels)
        batch.add(m.transmitted_bytes_total, station.tx_bytes, labels)
        batch.add(m.received_packets_total, station.rx_packets, labels)
        batch.add(m.transmitted_packets_total, station.tx_packets, labels)

    def _collect_signal(self, batch: MetricBatch, labels: List[str],
                        station: UnifiStation) -> None:
        # Wired and unassociated stations have no signal readings
        if not station.ap_mac:
            return

        batch.add(self.metrics.rssi_dbm, station.rssi, labels)
        batch.add(self.metrics.noise_dbm, station.noise, labels)
