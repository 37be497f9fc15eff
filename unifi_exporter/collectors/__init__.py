"""
Prometheus collectors for UniFi Controller inventory and statistics.
"""

from .base import MetricBatch, SiteCollector
from .device import DeviceCollector
from .station import StationCollector
from .schema import (
    NAMESPACE,
    MetricDescriptor,
    DeviceMetrics,
    StationMetrics,
    ExporterMetrics,
    build_fq_name,
)

__all__ = [
    "MetricBatch",
    "SiteCollector",
    "DeviceCollector",
    "StationCollector",
    "NAMESPACE",
    "MetricDescriptor",
    "DeviceMetrics",
    "StationMetrics",
    "ExporterMetrics",
    "build_fq_name",
]
