"""
Configuration loading and validation for the UniFi exporter.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .exceptions import UnifiConfigError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_LISTEN_ADDRESS = ":9130"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_TIMEOUT = 5.0

ENV_USERNAME = "UNIFI_EXPORTER_USERNAME"
ENV_PASSWORD = "UNIFI_EXPORTER_PASSWORD"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


@dataclass
class ExporterConfig:
    """
    Exporter configuration with validation.

    Attributes:
        controller_url: Base URL of the UniFi Controller.
        username: Local controller account used to log in.
        password: Password for ``username``.
        site: Description of the only site to export. Empty exports all sites.
        insecure: Skip TLS certificate verification.
        timeout: Request timeout in seconds.
        unifi_os: Whether the controller runs UniFi OS (UDM, UDM Pro, ...).
        listen_address: ``host:port`` to serve metrics on.
        metrics_path: URL path that serves the metrics.
        reauth_on_any_error: Log in again after any collection failure, not only
                             authentication failures.
    """
    controller_url: str
    username: str
    password: str
    site: str = ""
    insecure: bool = False
    timeout: float = DEFAULT_TIMEOUT
    unifi_os: bool = False
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    metrics_path: str = DEFAULT_METRICS_PATH
    reauth_on_any_error: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.controller_url:
            raise UnifiConfigError(
                "address of UniFi Controller API must be specified")
        if not self.controller_url.startswith(("http://", "https://")):
            raise UnifiConfigError(
                "address of UniFi Controller API must start with http:// or https://")
        if not self.username:
            raise UnifiConfigError(
                "username to authenticate to UniFi Controller API must be specified")
        if not self.password:
            raise UnifiConfigError(
                "password to authenticate to UniFi Controller API must be specified")
        if self.timeout <= 0:
            raise UnifiConfigError(f"timeout must be positive, got {self.timeout}")

        self.controller_url = self.controller_url.rstrip("/")
        self.site = (self.site or "").strip()
        self.listen_address = self.listen_address or DEFAULT_LISTEN_ADDRESS
        self.metrics_path = self.metrics_path or DEFAULT_METRICS_PATH
        if not self.metrics_path.startswith("/"):
            self.metrics_path = "/" + self.metrics_path

        # Fail early on a malformed listen address
        parse_listen_address(self.listen_address)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExporterConfig":
        """
        Build a configuration from the parsed YAML document.

        The document has a ``listen`` section (``address``, ``metricspath``) and a
        ``unifi`` section (``address``, ``username``, ``password``, ``site``,
        ``insecure``, ``timeout``, ``unifi_os``, ``reauth_on_any_error``).
        The ``UNIFI_EXPORTER_USERNAME`` and ``UNIFI_EXPORTER_PASSWORD`` environment
        variables override the credentials in the document.

        Raises:
            UnifiConfigError: If the document is malformed or a value is invalid.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise UnifiConfigError("configuration must be a mapping")

        listen = _section(data, "listen")
        unifi = _section(data, "unifi")

        return cls(
            controller_url=str(unifi.get("address") or ""),
            username=os.environ.get(ENV_USERNAME) or str(unifi.get("username") or ""),
            password=os.environ.get(ENV_PASSWORD) or str(unifi.get("password") or ""),
            site=str(unifi.get("site") or ""),
            insecure=parse_bool(unifi.get("insecure"), "insecure"),
            timeout=parse_duration(unifi.get("timeout"), DEFAULT_TIMEOUT),
            unifi_os=parse_bool(unifi.get("unifi_os"), "unifi_os"),
            listen_address=str(listen.get("address") or DEFAULT_LISTEN_ADDRESS),
            metrics_path=str(listen.get("metricspath") or DEFAULT_METRICS_PATH),
            reauth_on_any_error=parse_bool(
                unifi.get("reauth_on_any_error"), "reauth_on_any_error"),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExporterConfig":
        """
        Load configuration from a YAML file.

        Raises:
            UnifiConfigError: If the file cannot be read or parsed, or is invalid.
        """
        config_path = Path(path).expanduser()
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise UnifiConfigError(
                f"failed to read config file {str(config_path)!r}: {e}") from e
        except yaml.YAMLError as e:
            raise UnifiConfigError(
                f"failed to read YAML from config file {str(config_path)!r}: {e}") from e

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(data)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise UnifiConfigError(f"section {name!r} must be a mapping")
    return section


def parse_bool(value: Any, name: str = "value") -> bool:
    """
    Interpret a YAML boolean or a boolean-like string.

    Raises:
        UnifiConfigError: If the value is not boolean-like.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise UnifiConfigError(f"failed to parse bool {name}={value!r}")


def parse_duration(value: Any, default: Optional[float] = None) -> float:
    """
    Parse a duration into seconds.

    Accepts plain numbers (seconds) and duration strings such as ``500ms``,
    ``5s`` or ``1m30s``.

    Raises:
        UnifiConfigError: If the value cannot be parsed.
    """
    if value is None or value == "":
        if default is None:
            raise UnifiConfigError("duration must be specified")
        return default
    if isinstance(value, bool):
        raise UnifiConfigError(f"failed to parse duration {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(text):
        raise UnifiConfigError(f"failed to parse duration {value!r}")
    return total


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    An empty host (``:9130``) listens on all interfaces. IPv6 hosts may be given
    in brackets (``[::1]:9130``).

    Raises:
        UnifiConfigError: If the address has no valid port.
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise UnifiConfigError(f"listen address {address!r} has no port")
    try:
        port = int(port_text)
    except ValueError as e:
        raise UnifiConfigError(f"listen address {address!r} has an invalid port") from e
    if not 0 <= port <= 65535:
        raise UnifiConfigError(f"listen address {address!r} has an invalid port")
    return host.strip("[]"), port
