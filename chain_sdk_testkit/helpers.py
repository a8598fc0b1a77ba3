"""Constructors and assertions shared by SDK test suites."""

from typing import Callable

import requests

from chain_sdk_testkit.client import Client, NetworkType, config_from_settings, new_config
from chain_sdk_testkit.logging_config import get_logger
from chain_sdk_testkit.mock_server import MockServer

logger = get_logger(__name__)


def setup_with_address(address: str, network_type: int = NetworkType.TEST_NET) -> Client:
    """Client pointed at an explicit gateway address.

    Raises:
        ConfigError: If the address or network is invalid.
    """
    return Client(None, new_config(address, network_type))


def setup() -> tuple[Client, str]:
    """Client for the gateway named in the ``client`` config section.

    Returns:
        Tuple of (client, base URL).
    """
    config = config_from_settings()
    return Client(None, config), config.base_url


def setup_mock_server() -> tuple[Client, MockServer, str, Callable[[], None]]:
    """Start an empty mock server and a client bound to it.

    Returns:
        Tuple of (client, server, server URL, teardown callable).
    """
    server = MockServer()
    return server.client, server, server.url, server.close


def validate_resp(resp: requests.Response | None) -> bool:
    """Check that a gateway call produced a 200 response.

    Logs the response body when it did not, so the failing test shows what
    the mock server rejected.
    """
    if resp is None:
        logger.error("No response received")
        return False
    if resp.status_code != 200:
        logger.error(f"Unexpected status {resp.status_code}: {resp.text!r}")
        return False
    return True
