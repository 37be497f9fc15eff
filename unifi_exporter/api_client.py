import requests
import urllib3

from typing import Any, Dict, List, Optional, Union

from .models.site import UnifiSite
from .models.device import UnifiDevice
from .models.station import UnifiStation
from .logging import get_logger, log_api_response
from .exceptions import (
    UnifiAuthenticationError,
    UnifiAPIError,
    UnifiDataError,
    UnifiMappingError,
)

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "unifi_exporter"

# Status codes the controller answers with once a session has expired or been revoked
AUTH_FAILURE_STATUS_CODES = (401, 403)
LOGIN_REQUIRED_MESSAGE = "api.err.LoginRequired"


class UnifiController:
    """
    Client for reading inventory and statistics from the Unifi Controller API.

    This class provides the read operations the exporter needs: listing sites, and
    listing the devices and stations (clients) of one site. A client is unusable
    until :meth:`login` has succeeded.

    The client never retries a request. A request made with an expired session
    raises :class:`UnifiAuthenticationError`; recovering from it (logging in
    again with a fresh client) is up to the caller.

    Note:
        This client interacts with the UniFi Controller's **undocumented** private API.
        Response structures and endpoint behavior may change without notice between
        controller versions.
    """

    def __init__(
        self,
        controller_url: str,
        is_udm_pro: bool = False,
        verify_ssl: Union[bool, str] = True,
        timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize the Unifi Controller client. Does not authenticate.

        Args:
            controller_url: Base URL of the Unifi Controller.
            is_udm_pro: Whether the controller is a UniFi OS device (UDM, UDM Pro, UDR,
                        Cloud Key Gen2 2.0.24+, UX, UCG-Ultra, ...). Defaults to False.
            verify_ssl: Whether to verify SSL certificates. Can be:
                       - True: Verify SSL certificates (default, recommended)
                       - False: Disable verification (insecure, not recommended)
                       - str: Path to a CA bundle file or directory with certificates of trusted CAs
            timeout: Timeout in seconds applied to every request. None waits forever.
            user_agent: User-Agent header sent with every request.
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")

        logger.debug(
            f"Initializing UnifiController with URL: {controller_url}, is_udm_pro: {is_udm_pro}"
        )
        self.controller_url = controller_url.rstrip("/")
        self.is_udm_pro = is_udm_pro
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self._authenticated = False

        if is_udm_pro:
            self.api_url = f"{self.controller_url}/proxy/network"
        else:
            self.api_url = self.controller_url

        if not verify_ssl:
            logger.warning(
                "SSL certificate verification is disabled. This is not recommended for production use."
            )
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def login(self, username: str, password: str) -> None:
        """
        Authenticate with the Unifi Controller.

        For UniFi OS devices (UDM, UDM Pro, UDR, etc.), uses /api/auth/login and
        sends subsequent API calls through /proxy/network. For legacy controllers,
        uses /api/login directly.

        Args:
            username: Username for authentication. Must be a local account, not a cloud account.
            password: Password for authentication.

        Raises:
            UnifiAuthenticationError: If authentication fails.
        """
        self._authenticated = False

        if self.is_udm_pro:
            login_uri = f"{self.controller_url}/api/auth/login"
            logger.debug(f"Using UDM Pro authentication endpoint: {login_uri}")
        else:
            login_uri = f"{self.controller_url}/api/login"
            logger.debug(f"Using legacy authentication endpoint: {login_uri}")

        logger.debug(f"Attempting authentication with username: {username}")
        try:
            response = self.session.post(
                login_uri,
                json={"username": username, "password": password},
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            error_msg = f"Authentication failed: {e}"
            logger.error(error_msg)
            raise UnifiAuthenticationError(error_msg) from e

        # UniFi OS answers with the user object, legacy controllers with a meta block
        try:
            body = response.json()
        except ValueError:
            body = {}
        meta = body.get("meta") if isinstance(body, dict) else None
        if isinstance(meta, dict) and meta.get("rc") != "ok":
            error_msg = f"Failed to connect: Response code not ok ({meta.get('msg')})."
            logger.warning(error_msg)
            raise UnifiAuthenticationError(error_msg)

        self._authenticated = True
        logger.info("Successfully connected to Unifi controller.")

    def invoke_get_rest_api_call(self, url: str) -> requests.Response:
        """
        Make a GET request to the UniFi Controller REST API.

        Args:
            url: The URL to send the GET request to.

        Returns:
            The response object on success.

        Raises:
            UnifiAuthenticationError: If the client is not logged in or the session
                                      has expired.
            UnifiAPIError: If the API request fails for any other reason.
        """
        if not self._authenticated:
            raise UnifiAuthenticationError(
                f"Cannot request {url}: not logged in to the Unifi controller")

        try:
            response = self.session.get(
                url, verify=self.verify_ssl, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            error_msg = f"API GET request to {url} failed: {e}"
            logger.error(error_msg)
            raise UnifiAPIError(error_msg) from e

        if response.status_code in AUTH_FAILURE_STATUS_CODES:
            self._authenticated = False
            raise UnifiAuthenticationError(
                f"Session rejected by controller for {url} (Status: {response.status_code})")

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            error_msg = f"API GET request to {url} failed: {e}"
            logger.error(error_msg)
            raise UnifiAPIError(error_msg) from e

        logger.debug(f"API GET request to {url} successful")
        return response

    def _process_api_response(
        self, response: requests.Response, uri: str
    ) -> List[Dict[str, Any]]:
        """
        Process API response and handle common error cases.

        Args:
            response: Response from API call
            uri: URI that was called

        Returns:
            List of data items from the response

        Raises:
            UnifiAuthenticationError: If the controller reports that login is required
            UnifiDataError: If the API response cannot be parsed
        """
        try:
            raw_data = response.json()
        except ValueError as e:
            error_msg = f"Failed to parse API response from {uri}: {e}"
            logger.error(error_msg)
            raise UnifiDataError(error_msg) from e

        log_api_response(logger, uri, raw_data, response.status_code)

        if not isinstance(raw_data, dict):
            raise UnifiDataError(f"Unexpected API response format for {uri}")

        meta = raw_data.get("meta")
        if isinstance(meta, dict) and meta.get("rc") == "error":
            if meta.get("msg") == LOGIN_REQUIRED_MESSAGE:
                self._authenticated = False
                raise UnifiAuthenticationError(
                    f"Controller requires login for {uri}")
            raise UnifiDataError(
                f"Controller returned an error for {uri}: {meta.get('msg')}")

        raw_results = raw_data.get("data")
        if not isinstance(raw_results, list):
            error_msg = f"Unexpected API response format for {uri}"
            logger.warning(error_msg)
            raise UnifiDataError(error_msg)
        return raw_results

    def list_sites(self) -> List[UnifiSite]:
        """
        Get the Unifi sites visible to the authenticated user.

        Fetches site data from `/api/self/sites`.

        Returns:
            List[UnifiSite]: The sites, in the order returned by the controller.

        Raises:
            UnifiAPIError: If the API request fails (e.g., network issue, 4xx/5xx error).
            UnifiDataError: If the API response cannot be parsed or a site cannot be mapped.
            UnifiAuthenticationError: If the session is missing or has expired.
        """
        uri = f"{self.api_url}/api/self/sites"
        response = self.invoke_get_rest_api_call(uri)
        raw_results = self._process_api_response(response, uri)
        return [UnifiSite.from_api(site_data) for site_data in raw_results]

    def list_devices(self, site_name: str) -> List[UnifiDevice]:
        """
        Get the devices of a specific Unifi site.

        Fetches detailed device data from `/api/s/{site_name}/stat/device`. A single
        record that cannot be mapped fails the whole call.

        Args:
            site_name (str): The short name (ID) of the site to fetch devices from.

        Returns:
            List[UnifiDevice]: The devices, in the order returned by the controller.

        Raises:
            UnifiAPIError: If the API request fails (e.g., network issue, 4xx/5xx error).
            UnifiDataError: If the API response cannot be parsed.
            UnifiMappingError: If a device record violates the model's assumptions.
            UnifiAuthenticationError: If the session is missing or has expired.
        """
        uri = f"{self.api_url}/api/s/{site_name}/stat/device"
        logger.debug(f"Fetching devices for site '{site_name}' from {uri}")
        response = self.invoke_get_rest_api_call(uri)
        raw_results = self._process_api_response(response, uri)
        return self._map_records(raw_results, UnifiDevice, uri)

    def list_stations(self, site_name: str) -> List[UnifiStation]:
        """
        Get the active clients (stations) of a specific Unifi site.

        Uses the `/api/s/{site_name}/stat/sta` endpoint, which provides data for
        currently connected clients. A single record that cannot be mapped fails
        the whole call.

        Args:
            site_name (str): The short name (ID) of the site to fetch clients from.

        Returns:
            List[UnifiStation]: The stations, in the order returned by the controller.

        Raises:
            UnifiAPIError: If the API request fails (e.g., network issue, 4xx/5xx error).
            UnifiDataError: If the API response cannot be parsed.
            UnifiMappingError: If a station record violates the model's assumptions.
            UnifiAuthenticationError: If the session is missing or has expired.
        """
        uri = f"{self.api_url}/api/s/{site_name}/stat/sta"
        logger.debug(f"Fetching active clients for site '{site_name}' from {uri}")
        response = self.invoke_get_rest_api_call(uri)
        raw_results = self._process_api_response(response, uri)
        return self._map_records(raw_results, UnifiStation, uri)

    @staticmethod
    def _map_records(raw_results, model_class, uri):
        records = []
        for index, record in enumerate(raw_results):
            try:
                records.append(model_class.from_api(record))
            except UnifiMappingError as e:
                logger.error(
                    f"Error creating {model_class.__name__} from record {index} of {uri}: {e}")
                raise
        logger.debug(f"Returning {len(records)} mapped {model_class.__name__} objects.")
        return records
