"""
Models for UniFi sites.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..exceptions import UnifiMappingError
from ..logging import get_logger, log_extra_fields
from ..utils import map_api_data_to_model

logger = get_logger(__name__)


@dataclass
class UnifiSite:
    """
    Represents a UniFi site.

    A site in UniFi represents a logical grouping of devices and network segments,
    typically representing a physical location or organization. The ``name`` is the
    short key used in API paths; ``desc`` is the human readable label exported as
    the ``site`` metric label.
    """
    # Basic site identification
    name: str
    desc: Optional[str] = None

    # Additional site fields from API
    _id: Optional[str] = None
    role: Optional[str] = None
    num_ap: Optional[int] = None
    num_sta: Optional[int] = None

    # Store any extra fields that aren't explicitly defined
    _extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UnifiSite":
        """
        Build a site from a raw ``/api/self/sites`` record.

        Raises:
            UnifiMappingError: If the record has no site name.
        """
        if not isinstance(data, dict) or not data.get("name"):
            raise UnifiMappingError(f"Site record without a name: {data!r}")

        model_fields, extra_fields = map_api_data_to_model(data, cls)
        model_fields.pop("_extra_fields", None)
        site = cls(**model_fields)
        site._extra_fields = extra_fields
        log_extra_fields(logger, "Site", site.name, extra_fields)
        return site

    @property
    def description(self) -> str:
        """The site label used in metrics, falling back to the site name."""
        return self.desc or self.name
