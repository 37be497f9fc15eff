"""Fake controller, fixture records and sample helpers shared by the tests."""

import copy

from unifi_exporter.exceptions import UnifiAuthenticationError
from unifi_exporter.models import UnifiDevice, UnifiStation


DEVICE_ABC = {
    "_id": "abc",
    "adopted": True,
    "inform_ip": "192.168.1.1",
    "name": "ABC",
    "ethernet_table": [{"mac": "de:ad:be:ef:de:ad", "name": "eth0"}],
    "ng-num_sta": 3,
    "ng-user-num_sta": 2,
    "ng-guest-num_sta": 1,
    "na-num_sta": 6,
    "na-user-num_sta": 4,
    "na-guest-num_sta": 2,
    "radio_table": [
        {"name": "wifi0", "radio": "ng"},
        {"name": "wifi1", "radio": "na"},
    ],
    "stat": {
        "bytes": 100,
        "rx_bytes": 80,
        "tx_bytes": 20,
        "rx_packets": 4,
        "tx_packets": 1,
        "tx_dropped": 1,
        "uplink-rx_bytes": 20,
        "uplink-tx_bytes": 10,
        "uplink-rx_packets": 2,
        "uplink-tx_packets": 1,
    },
    "uptime": 10,
}

DEVICE_DEF = {
    "_id": "def",
    "adopted": False,
    "name": "DEF",
    "ethernet_table": [{"mac": "ab:ad:1d:ea:ab:ad"}],
    "stat": {
        "bytes": 1.5e3,
        "rx_bytes": 1000.0,
        "tx_bytes": 500.0,
    },
    "uplink": {
        "rx_bytes": 40.0,
        "tx_bytes": 30,
    },
    "uptime": 20.0,
}

STATION_WIRELESS = {
    "_id": "s1",
    "ap_mac": "de:ad:be:ef:de:ad",
    "mac": "aa:bb:cc:dd:ee:ff",
    "name": "laptop",
    "hostname": "LAPTOP-1234",
    "rssi": 42,
    "noise": -95,
    "rx_bytes": 1000,
    "tx_bytes": 2000,
    "rx_packets": 10,
    "tx_packets": 20.0,
    "first_seen": 1500000000,
    "last_seen": 1500000600,
}

STATION_WIRED = {
    "_id": "s2",
    "mac": "11:22:33:44:55:66",
    "hostname": "nas",
    "is_wired": True,
    "rx_bytes": 5.5e6,
    "tx_bytes": 1e6,
    "rx_packets": 500,
    "tx_packets": 100,
}


class FakeController:
    """
    In-memory stand-in for UnifiController.

    ``devices`` and ``stations`` map site names to lists of raw API records, or to
    an exception to raise. Records are mapped on every call, like a fresh fetch.
    """

    def __init__(self, devices=None, stations=None):
        self.devices = devices or {}
        self.stations = stations or {}
        self.calls = []

    def list_devices(self, site_name):
        self.calls.append(("list_devices", site_name))
        return self._records(self.devices, site_name, UnifiDevice)

    def list_stations(self, site_name):
        self.calls.append(("list_stations", site_name))
        return self._records(self.stations, site_name, UnifiStation)

    @staticmethod
    def _records(table, site_name, model_class):
        result = table.get(site_name, [])
        if isinstance(result, Exception):
            raise result
        return [model_class.from_api(copy.deepcopy(record)) for record in result]


class ExpiringController(FakeController):
    """A FakeController whose session is rejected after ``valid_calls`` list calls."""

    def __init__(self, valid_calls=0, **kwargs):
        super().__init__(**kwargs)
        self.valid_calls = valid_calls

    def _check_session(self):
        if self.valid_calls <= 0:
            raise UnifiAuthenticationError("api.err.LoginRequired")
        self.valid_calls -= 1

    def list_devices(self, site_name):
        self._check_session()
        return super().list_devices(site_name)

    def list_stations(self, site_name):
        self._check_session()
        return super().list_stations(site_name)


def collect_samples(families):
    """Flatten metric families into {(sample name, sorted label items): value}."""
    samples = {}
    for family in families:
        for sample in family.samples:
            key = (sample.name, tuple(sorted(sample.labels.items())))
            assert key not in samples, f"duplicate sample {key}"
            samples[key] = sample.value
    return samples


def labels(**kwargs):
    return tuple(sorted(kwargs.items()))
