"""
Utility functions for mapping UniFi Controller API records onto the data models.
"""

import inspect
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Type

from .exceptions import UnifiMappingError

_MAC_HEX = re.compile(r"^[0-9a-f]{12}$")


def map_api_data_to_model(
    data: Dict[str, Any], model_class: Type
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Maps API data to model fields, separating model fields from extra fields.

    Args:
        data: Input dictionary from API response
        model_class: The dataclass model to map data to

    Returns:
        Tuple containing (model_fields, extra_fields) where:
            - model_fields: Dictionary of fields that map to the model's attributes
            - extra_fields: Dictionary of extra fields that don't directly map to the model
    """
    signature = inspect.signature(model_class.__init__)
    valid_params = set(signature.parameters.keys())
    valid_params.discard("self")

    model_fields = {}
    extra_fields = {}

    for api_key, value in data.items():
        if api_key in valid_params:
            model_fields[api_key] = value
        else:
            extra_fields[api_key] = value

    return model_fields, extra_fields


def to_float(value: Any, field_name: str = "value") -> float:
    """
    Normalize a numeric API field to a float.

    Controller versions disagree on whether counters are encoded as JSON
    integers or floats, and some older releases send numeric strings.

    Args:
        value: Raw value from the API response.
        field_name: Name of the field, used in error messages.

    Returns:
        The value as a float. Missing (None) values map to 0.0.

    Raises:
        UnifiMappingError: If the value is not numeric.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise UnifiMappingError(
            f"Field {field_name} has non-numeric value {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as e:
            raise UnifiMappingError(
                f"Field {field_name} has non-numeric value {value!r}") from e
    raise UnifiMappingError(
        f"Field {field_name} has unsupported type {type(value).__name__}")


def normalize_mac(mac_address: str) -> str:
    """
    Normalize MAC address to colon-separated format.

    Args:
        mac_address: MAC address string in any format (with or without separators).

    Returns:
        str: MAC address with colons between each pair of characters.
    """
    mac_clean = (
        mac_address.replace(":", "").replace(
            "-", "").replace(".", "").lower()
    )

    return ":".join(mac_clean[i: i + 2] for i in range(0, len(mac_clean), 2))


def parse_mac(mac_address: Any, field_name: str = "mac") -> str:
    """
    Validate and normalize an EUI-48 hardware address.

    Args:
        mac_address: Raw MAC address from the API.
        field_name: Name of the field, used in error messages.

    Returns:
        The lower-case, colon-separated MAC address.

    Raises:
        UnifiMappingError: If the value is not a valid MAC address.
    """
    if not isinstance(mac_address, str):
        raise UnifiMappingError(
            f"Field {field_name} is not a MAC address: {mac_address!r}")

    normalized = normalize_mac(mac_address.strip())
    if not _MAC_HEX.match(normalized.replace(":", "")):
        raise UnifiMappingError(
            f"Field {field_name} is not a MAC address: {mac_address!r}")
    return normalized


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Convert a UNIX timestamp in seconds to an aware UTC datetime.

    Args:
        value: Raw timestamp from the API. None maps to None.
        field_name: Name of the field, used in error messages.

    Raises:
        UnifiMappingError: If the value cannot be interpreted as a timestamp.
    """
    if value is None:
        return None
    seconds = to_float(value, field_name)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise UnifiMappingError(
            f"Field {field_name} is not a valid timestamp: {value!r}") from e
