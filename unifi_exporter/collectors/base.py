from typing import Iterable, List, Sequence

from ..exceptions import UnifiCollectionError, UnifiExporterError
from ..logging import get_logger
from ..models.site import UnifiSite
from .schema import MetricDescriptor, MetricFamily

logger = get_logger(__name__)


class MetricBatch:
    """
    Metric families for one collection pass of one collector.

    Samples may only be added against the descriptors the batch was created with,
    and must carry exactly the declared labels.
    """

    def __init__(self, descriptors: Iterable[MetricDescriptor]):
        self._families = {d: d.new_family() for d in descriptors}

    def add(self, descriptor: MetricDescriptor, value: float, labels: Sequence[str]) -> None:
        family = self._families.get(descriptor)
        if family is None:
            raise ValueError(f"{descriptor.name} is not declared by this collector")
        descriptor.check_labels(labels)
        family.add_metric(list(labels), float(value))

    def families(self) -> List[MetricFamily]:
        return list(self._families.values())


class SiteCollector:
    """
    Base class for collectors that export one set of metrics per UniFi site.

    Subclasses set ``name`` and ``metrics_class`` and implement
    :meth:`collect_site`. A collector is bound to one authenticated client for
    its whole life; when the session expires the exporter builds new collectors
    around a new client.

    Args:
        client: An authenticated :class:`~unifi_exporter.api_client.UnifiController`
                (or any object with the same ``list_devices``/``list_stations`` methods).
        sites: The sites to collect, in collection order.
    """

    name = ""
    metrics_class = None

    def __init__(self, client, sites: Iterable[UnifiSite]):
        self.client = client
        self.sites = list(sites)
        self.metrics = self.metrics_class()

    def describe(self) -> List[MetricFamily]:
        """Return one empty family per metric this collector can emit."""
        return [d.new_family() for d in self.metrics.descriptors()]

    def collect_metrics(self) -> List[MetricFamily]:
        """
        Collect metrics for every site.

        Either every site is collected and all families are returned, or nothing
        is returned and the first failure is raised.

        Raises:
            UnifiCollectionError: If fetching or mapping the data of a site fails.
        """
        batch = MetricBatch(self.metrics.descriptors())
        for site in self.sites:
            logger.debug(f"Collecting {self.name} metrics for site {site.description!r}")
            self.collect_site(batch, site)
        return batch.families()

    def collect_site(self, batch: MetricBatch, site: UnifiSite) -> None:
        raise NotImplementedError

    def _fetch(self, fetch, descriptor: MetricDescriptor, site: UnifiSite):
        """Call ``fetch(site.name)``, wrapping client failures with metric and site context."""
        try:
            return fetch(site.name)
        except UnifiExporterError as e:
            raise UnifiCollectionError(descriptor.name, site.description, e) from e
