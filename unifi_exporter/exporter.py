"""
The Exporter: a single Prometheus collector wrapping all UniFi collectors.

The Exporter serializes scrapes, and recovers from expired or revoked controller
sessions by logging in again and rebuilding its collectors.
"""

import enum
import threading
import time
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Type

from .collectors.base import MetricBatch, SiteCollector
from .collectors.device import DeviceCollector
from .collectors.schema import ExporterMetrics, MetricFamily
from .collectors.station import StationCollector
from .exceptions import UnifiCollectionError
from .logging import get_logger
from .models.site import UnifiSite

logger = get_logger(__name__)

# A callable returning a freshly authenticated client. It is invoked whenever
# authentication against the controller fails, such as when the session times
# out or the user's privileges are revoked.
ClientFactory = Callable[[], object]

DEFAULT_COLLECTORS = (DeviceCollector, StationCollector)


class ExporterState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class Exporter:
    """
    Prometheus collector for UniFi Controller API metrics.

    The Exporter owns the authenticated client and the site collectors built on
    it. ``collect`` may be called from several server threads at once; every call
    holds a single lock for its whole duration, so scrapes never interleave and a
    rebuild of the collector set is never observed half done.

    Args:
        sites: The sites to export, in collection order. Fixed for the Exporter's life.
        client_factory: Returns an authenticated client, or raises.
        reauth_on_any_error: When True, any collection failure triggers a new login.
                             When False (default), only authentication failures do.
        collector_classes: The SiteCollector subclasses to build for each client.

    Raises:
        Exception: Whatever ``client_factory`` raises for the initial login.
    """

    def __init__(
        self,
        sites: Iterable[UnifiSite],
        client_factory: ClientFactory,
        reauth_on_any_error: bool = False,
        collector_classes: Sequence[Type[SiteCollector]] = DEFAULT_COLLECTORS,
    ):
        self.sites = list(sites)
        self.client_factory = client_factory
        self.reauth_on_any_error = reauth_on_any_error
        self.collector_classes = tuple(collector_classes)
        self.metrics = ExporterMetrics()
        self.logins = 0

        self._lock = threading.Lock()
        self._state = ExporterState.UNAUTHENTICATED
        self._collectors: List[SiteCollector] = []

        with self._lock:
            self._init_client()

    @property
    def state(self) -> ExporterState:
        return self._state

    @property
    def collectors(self) -> List[SiteCollector]:
        with self._lock:
            return list(self._collectors)

    def describe(self) -> List[MetricFamily]:
        """Return the descriptors of every collector, plus the exporter's own."""
        with self._lock:
            families = []
            for collector in self._collectors:
                families.extend(collector.describe())
        families.extend(d.new_family() for d in self.metrics.descriptors())
        return families

    def collect(self) -> Iterator[MetricFamily]:
        """
        Collect metrics from every collector.

        A collector that fails emits nothing for this scrape and is reported with
        ``unifi_collector_success`` 0. An authentication failure (or any failure
        when ``reauth_on_any_error`` is set) triggers one login and collector rebuild
        per scrape; collectors not yet run in this scrape then use the rebuilt set.
        If the login fails, the remaining collectors are skipped until the next scrape.
        """
        with self._lock:
            status = MetricBatch(self.metrics.descriptors())
            relogin_attempted = False

            if self._state is ExporterState.UNAUTHENTICATED:
                relogin_attempted = True
                if not self._reinit_client():
                    for collector in self._collectors:
                        status.add(self.metrics.success, 0, [collector.name])
                    yield from status.families()
                    return

            collectors = self._collectors
            for index in range(len(collectors)):
                collector = collectors[index]
                start = time.perf_counter()
                try:
                    families = collector.collect_metrics()
                except UnifiCollectionError as e:
                    self._record(status, collector, start, success=False)
                    logger.error(f"Failed collecting {collector.name} metric {e.metric}: {e}")

                    if relogin_attempted or not self._should_reauthenticate(e):
                        continue

                    relogin_attempted = True
                    self._state = ExporterState.UNAUTHENTICATED
                    if not self._reinit_client():
                        break
                    collectors = self._collectors
                    continue

                self._record(status, collector, start, success=True)
                yield from families

            yield from status.families()

    def _should_reauthenticate(self, error: UnifiCollectionError) -> bool:
        return self.reauth_on_any_error or error.is_authentication_failure

    def _record(self, status: MetricBatch, collector: SiteCollector,
                start: float, success: bool) -> None:
        status.add(self.metrics.success, 1 if success else 0, [collector.name])
        status.add(self.metrics.duration_seconds,
                   time.perf_counter() - start, [collector.name])

    def _reinit_client(self) -> bool:
        """Log in again, keeping the previous collectors if that fails. Lock must be held."""
        try:
            self._init_client()
        except Exception as e:
            logger.error(f"Could not initialize UniFi client: {e}")
            return False
        return True

    def _init_client(self) -> None:
        """
        Authenticate with a fresh session and build the collectors on it.

        Must be called with the lock held.
        """
        client = self.client_factory()
        self._collectors = [cls(client, self.sites) for cls in self.collector_classes]
        self._state = ExporterState.AUTHENTICATED
        self.logins += 1
        logger.info("Successfully authenticated to UniFi controller")


def sites_string(sites: Iterable[UnifiSite]) -> str:
    """Return a comma-separated string of site descriptions, for display to users."""
    return ", ".join(site.description for site in sites)


def pick_sites(choose: Optional[str], sites: Sequence[UnifiSite]) -> List[UnifiSite]:
    """
    Select the sites to export.

    Args:
        choose: Description of the single site to export. Empty or None selects all sites.
        sites: All sites known to the controller.

    Raises:
        LookupError: If no site has the requested description.
    """
    if not choose:
        return list(sites)

    for site in sites:
        if site.description == choose:
            return [site]

    raise LookupError(
        f"site with description {choose!r} was not found in UniFi Controller")
