"""Shared fixtures for the unifi_exporter test suite."""

import copy

import pytest

from support import DEVICE_ABC, DEVICE_DEF, STATION_WIRED, STATION_WIRELESS
from unifi_exporter.models import UnifiSite


@pytest.fixture
def default_site():
    return UnifiSite(name="default", desc="Default")


@pytest.fixture
def office_site():
    return UnifiSite(name="office", desc="Office")


@pytest.fixture
def device_records():
    return [copy.deepcopy(DEVICE_ABC), copy.deepcopy(DEVICE_DEF)]


@pytest.fixture
def station_records():
    return [copy.deepcopy(STATION_WIRELESS), copy.deepcopy(STATION_WIRED)]
