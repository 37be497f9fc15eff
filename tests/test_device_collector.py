"""Tests for DeviceCollector."""

import pytest

from support import DEVICE_ABC, DEVICE_DEF, FakeController, collect_samples, labels
from unifi_exporter.collectors import DeviceCollector
from unifi_exporter.exceptions import (
    MissingInterfaceError,
    UnifiAPIError,
    UnifiAuthenticationError,
    UnifiCollectionError,
    UnifiMappingError,
)
from unifi_exporter.models import UnifiSite

ABC = dict(site="Default", id="abc", mac="de:ad:be:ef:de:ad", name="ABC")


def collect(collector):
    return collect_samples(collector.collect_metrics())


def test_single_device(default_site):
    client = FakeController(devices={"default": [DEVICE_ABC]})
    samples = collect(DeviceCollector(client, [default_site]))

    assert samples == {
        ("unifi_devices_total", labels(site="Default")): 1.0,
        ("unifi_devices_adopted", labels(site="Default")): 1.0,
        ("unifi_devices_unadopted", labels(site="Default")): 0.0,

        ("unifi_devices_uptime_seconds_total", labels(**ABC)): 10.0,
        ("unifi_devices_bytes_total", labels(**ABC)): 100.0,
        ("unifi_devices_wireless_received_bytes_total", labels(**ABC)): 80.0,
        ("unifi_devices_wireless_transmitted_bytes_total", labels(**ABC)): 20.0,
        ("unifi_devices_wireless_received_packets_total", labels(**ABC)): 4.0,
        ("unifi_devices_wireless_transmitted_packets_total", labels(**ABC)): 1.0,
        ("unifi_devices_wireless_transmitted_packets_dropped_total", labels(**ABC)): 1.0,
        ("unifi_devices_wired_received_bytes_total", labels(**ABC)): 20.0,
        ("unifi_devices_wired_transmitted_bytes_total", labels(**ABC)): 10.0,
        ("unifi_devices_wired_received_packets_total", labels(**ABC)): 2.0,
        ("unifi_devices_wired_transmitted_packets_total", labels(**ABC)): 1.0,

        ("unifi_devices_stations", labels(interface="wifi0", radio="2.4GHz", **ABC)): 3.0,
        ("unifi_devices_stations_user", labels(interface="wifi0", radio="2.4GHz", **ABC)): 2.0,
        ("unifi_devices_stations_guest", labels(interface="wifi0", radio="2.4GHz", **ABC)): 1.0,
        ("unifi_devices_stations", labels(interface="wifi1", radio="5GHz", **ABC)): 6.0,
        ("unifi_devices_stations_user", labels(interface="wifi1", radio="5GHz", **ABC)): 4.0,
        ("unifi_devices_stations_guest", labels(interface="wifi1", radio="5GHz", **ABC)): 2.0,
    }


def test_minimal_record(default_site):
    record = {
        "_id": "abc",
        "adopted": True,
        "mac": "de:ad:be:ef:de:ad",
        "stat": {
            "bytes": 100,
            "rx_bytes": 80,
            "tx_bytes": 20,
            "rx_packets": 4,
            "tx_packets": 1,
            "tx_dropped": 1,
        },
    }
    client = FakeController(devices={"default": [record]})
    samples = collect(DeviceCollector(client, [default_site]))

    device = labels(site="Default", id="abc", mac="de:ad:be:ef:de:ad", name="")
    assert samples[("unifi_devices_total", labels(site="Default"))] == 1.0
    assert samples[("unifi_devices_adopted", labels(site="Default"))] == 1.0
    assert samples[("unifi_devices_unadopted", labels(site="Default"))] == 0.0
    assert [
        samples[("unifi_devices_bytes_total", device)],
        samples[("unifi_devices_wireless_received_bytes_total", device)],
        samples[("unifi_devices_wireless_transmitted_bytes_total", device)],
        samples[("unifi_devices_wireless_received_packets_total", device)],
        samples[("unifi_devices_wireless_transmitted_packets_total", device)],
        samples[("unifi_devices_wireless_transmitted_packets_dropped_total", device)],
    ] == [100.0, 80.0, 20.0, 4.0, 1.0, 1.0]
    assert not any(name.startswith("unifi_devices_stations") for name, _ in samples)


def test_adoption_counts_partition_devices(default_site, device_records):
    client = FakeController(devices={"default": device_records})
    samples = collect(DeviceCollector(client, [default_site]))

    site = labels(site="Default")
    total = samples[("unifi_devices_total", site)]
    adopted = samples[("unifi_devices_adopted", site)]
    unadopted = samples[("unifi_devices_unadopted", site)]
    assert (total, adopted, unadopted) == (2.0, 1.0, 1.0)
    assert adopted + unadopted == total


def test_float_encoded_fields(default_site):
    client = FakeController(devices={"default": [DEVICE_DEF]})
    samples = collect(DeviceCollector(client, [default_site]))

    device = labels(site="Default", id="def", mac="ab:ad:1d:ea:ab:ad", name="DEF")
    assert samples[("unifi_devices_bytes_total", device)] == 1500.0
    assert samples[("unifi_devices_uptime_seconds_total", device)] == 20.0
    assert samples[("unifi_devices_wired_received_bytes_total", device)] == 40.0


def test_unknown_radio_is_skipped(default_site):
    record = dict(DEVICE_ABC, radio_table=[
        {"name": "wifi0", "radio": "ng"},
        {"name": "wifi2", "radio": "6e"},
    ])
    client = FakeController(devices={"default": [record]})
    samples = collect(DeviceCollector(client, [default_site]))

    interfaces = {
        dict(label_items)["interface"]
        for name, label_items in samples
        if name == "unifi_devices_stations"
    }
    assert interfaces == {"wifi0"}
    assert samples[("unifi_devices_uptime_seconds_total", labels(**ABC))] == 10.0


def test_empty_site(default_site):
    client = FakeController(devices={"default": []})
    samples = collect(DeviceCollector(client, [default_site]))

    assert samples == {
        ("unifi_devices_total", labels(site="Default")): 0.0,
        ("unifi_devices_adopted", labels(site="Default")): 0.0,
        ("unifi_devices_unadopted", labels(site="Default")): 0.0,
    }


def test_two_sites_same_device(default_site, office_site):
    client = FakeController(devices={"default": [DEVICE_ABC], "office": [DEVICE_ABC]})
    samples = collect(DeviceCollector(client, [default_site, office_site]))

    for site in ("Default", "Office"):
        device = dict(ABC, site=site)
        assert samples[("unifi_devices_total", labels(site=site))] == 1.0
        assert samples[("unifi_devices_uptime_seconds_total", labels(**device))] == 10.0
    assert client.calls == [("list_devices", "default"), ("list_devices", "office")]


def test_site_label_uses_description():
    site = UnifiSite(name="abcd1234", desc="Main Office - 2nd Floor")
    client = FakeController(devices={"abcd1234": []})
    samples = collect(DeviceCollector(client, [site]))

    assert ("unifi_devices_total", labels(site="Main Office - 2nd Floor")) in samples


def test_describe_covers_every_sample(default_site, device_records):
    client = FakeController(devices={"default": device_records})
    collector = DeviceCollector(client, [default_site])

    described = {f.name: f.type for f in collector.describe()}
    collected = {f.name: f.type for f in collector.collect_metrics() if f.samples}

    assert set(collected) == set(described)
    assert collected == {name: described[name] for name in collected}


def test_describe_makes_no_requests(default_site):
    client = FakeController()
    DeviceCollector(client, [default_site]).describe()
    assert client.calls == []


@pytest.mark.parametrize("error, cause_type", [
    (UnifiAPIError("connection refused"), UnifiAPIError),
    (UnifiAuthenticationError("api.err.LoginRequired"), UnifiAuthenticationError),
])
def test_fetch_failure(default_site, office_site, error, cause_type):
    client = FakeController(devices={"default": [DEVICE_ABC], "office": error})
    collector = DeviceCollector(client, [default_site, office_site])

    with pytest.raises(UnifiCollectionError) as exc_info:
        collector.collect_metrics()

    assert exc_info.value.metric == "unifi_devices_total"
    assert exc_info.value.site == "Office"
    assert isinstance(exc_info.value.cause, cause_type)
    assert exc_info.value.is_authentication_failure == (cause_type is UnifiAuthenticationError)


def test_mapping_failure_aborts_site(default_site):
    broken = dict(DEVICE_DEF, ethernet_table=[])
    client = FakeController(devices={"default": [DEVICE_ABC, broken]})

    with pytest.raises(UnifiCollectionError) as exc_info:
        collect(DeviceCollector(client, [default_site]))
    assert isinstance(exc_info.value.cause, UnifiMappingError)



def test_record_without_interfaces_fails_site(default_site):
    record = {
        "_id": "abc",
        "adopted": True,
        "stat": {
            "bytes": 100,
            "rx_bytes": 80,
            "tx_bytes": 20,
            "rx_packets": 4,
            "tx_packets": 1,
            "tx_dropped": 1,
        },
    }
    client = FakeController(devices={"default": [record]})

    with pytest.raises(UnifiCollectionError) as exc_info:
        collect(DeviceCollector(client, [default_site]))

    assert isinstance(exc_info.value.cause, MissingInterfaceError)
    assert "missing interface record for device 'abc'" in str(exc_info.value)
