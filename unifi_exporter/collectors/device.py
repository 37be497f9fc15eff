from typing import List

from ..models.device import UnifiDevice
from ..models.site import UnifiSite
from .base import MetricBatch, SiteCollector
from .schema import DeviceMetrics


class DeviceCollector(SiteCollector):
    """Collects metrics about UniFi devices (access points and switches)."""

    name = "devices"
    metrics_class = DeviceMetrics

    def collect_site(self, batch: MetricBatch, site: UnifiSite) -> None:
        devices = self._fetch(self.client.list_devices, self.metrics.devices, site)
        site_label = site.description

        batch.add(self.metrics.devices, len(devices), [site_label])

        self._collect_adoptions(batch, site_label, devices)
        for device in devices:
            labels = [site_label, device.id, device.mac, device.name]
            self._collect_uptime(batch, labels, device)
            self._collect_bytes(batch, labels, device)
            self._collect_stations(batch, labels, device)

    def _collect_adoptions(self, batch: MetricBatch, site_label: str,
                           devices: List[UnifiDevice]) -> None:
        adopted = unadopted = 0
        for device in devices:
            if device.adopted:
                adopted += 1
            else:
                unadopted += 1

        batch.add(self.metrics.adopted_devices, adopted, [site_label])
        batch.add(self.metrics.unadopted_devices, unadopted, [site_label])

    def _collect_uptime(self, batch: MetricBatch, labels: List[str],
                        device: UnifiDevice) -> None:
        batch.add(self.metrics.uptime_seconds_total, device.uptime, labels)

    def _collect_bytes(self, batch: MetricBatch, labels: List[str],
                       device: UnifiDevice) -> None:
        m = self.metrics
        wireless = device.stats.wireless
        wired = device.stats.wired

        batch.add(m.bytes_total, device.stats.total_bytes, labels)

        batch.add(m.wireless_received_bytes_total, wireless.rx_bytes, labels)
        batch.add(m.wireless_transmitted_bytes_total, wireless.tx_bytes, labels)
        batch.add(m.wireless_received_packets_total, wireless.rx_packets, labels)
        batch.add(m.wireless_transmitted_packets_total, wireless.tx_packets, labels)
        batch.add(m.wireless_transmitted_dropped_total, wireless.tx_dropped, labels)

        batch.add(m.wired_received_bytes_total, wired.rx_bytes, labels)
        batch.add(m.wired_transmitted_bytes_total, wired.tx_bytes, labels)
        batch.add(m.wired_received_packets_total, wired.rx_packets, labels)
        batch.add(m.wired_transmitted_packets_total, wired.tx_packets, labels)

    def _collect_stations(self, batch: MetricBatch, labels: List[str],
                          device: UnifiDevice) -> None:
        for radio in device.radios:
            # Unsupported radio bands carry no station counts
            if radio.stats is None:
                continue

            radio_labels = labels + [radio.name, radio.band]
            batch.add(self.metrics.stations, radio.stats.num_sta, radio_labels)
            batch.add(self.metrics.user_stations, radio.stats.user_num_sta, radio_labels)
            batch.add(self.metrics.guest_stations, radio.stats.guest_num_sta, radio_labels)
