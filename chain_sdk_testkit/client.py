"""Thin REST client used as the collaborator under test.

The mock server substitutes for the remote gateway by handing its own URL to
``new_config``; everything above the HTTP layer lives in the real SDK.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import requests

from chain_sdk_testkit.config_manager import get_config_manager
from chain_sdk_testkit.exceptions import ClientError, ConfigError
from chain_sdk_testkit.logging_config import get_logger, log_with_context
from chain_sdk_testkit.validators import validate_base_url, validate_network

logger = get_logger(__name__)


class NetworkType(IntEnum):
    """Network identifiers understood by the gateway."""

    MAIN_NET = 184
    TEST_NET = 168
    MIJIN = 96
    MIJIN_TEST = 144
    NOT_SUPPORTED = 0

    @classmethod
    def from_name(cls, name: str) -> "NetworkType":
        """Look up a network by name, e.g. ``"TEST_NET"`` or ``"testnet"``."""
        key = name.strip().upper()
        aliases = {"MAINNET": "MAIN_NET", "TESTNET": "TEST_NET", "MIJINTEST": "MIJIN_TEST"}
        key = aliases.get(key, key)
        if key not in cls.__members__ or key == "NOT_SUPPORTED":
            raise ConfigError(
                f"Unknown network name: {name}",
                ConfigError.ERR_INVALID_NETWORK,
                hint="Use MAIN_NET, TEST_NET, MIJIN or MIJIN_TEST",
            )
        return cls[key]


SUPPORTED_NETWORKS = {
    NetworkType.MAIN_NET,
    NetworkType.TEST_NET,
    NetworkType.MIJIN,
    NetworkType.MIJIN_TEST,
}


@dataclass(frozen=True)
class Config:
    """Client configuration: gateway URL and network."""

    base_url: str
    network_type: NetworkType


def new_config(address: str, network_type: int) -> Config:
    """Build a validated client configuration.

    Args:
        address: Gateway base URL.
        network_type: One of the ``NetworkType`` values.

    Returns:
        Config instance.

    Raises:
        ConfigError: If the URL or network is invalid.
    """
    base_url = validate_base_url(address)
    network = validate_network(network_type, SUPPORTED_NETWORKS)
    return Config(base_url=base_url, network_type=NetworkType(network))


def config_from_settings() -> Config:
    """Build a Config from the ``client`` section of the global config."""
    manager = get_config_manager()
    return new_config(
        manager.get("client", "base_url"),
        NetworkType.from_name(manager.get("client", "network")),
    )


class Client:
    """HTTP client bound to a gateway config."""

    def __init__(
        self,
        session: requests.Session | None,
        config: Config,
        timeout: float | None = None,
    ):
        """Initialize client.

        Args:
            session: Session to reuse (a new one is created if None).
            config: Gateway configuration.
            timeout: Per-request timeout in seconds (config default if None).
        """
        self.config = config
        self.session = session or requests.Session()
        self.timeout = timeout or get_config_manager().get("client", "timeout")
        self._closed = False

    @property
    def network_type(self) -> NetworkType:
        return self.config.network_type

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Send a request to the gateway.

        HTTP error statuses are returned, not raised, so callers can inspect
        gateway error bodies.

        Raises:
            ClientError: If the client is closed or the gateway is unreachable.
        """
        if self._closed:
            raise ClientError("Client is closed", ClientError.ERR_CLOSED)

        url = self.url_for(path)
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as e:
            raise ClientError(
                f"Request to {url} timed out",
                ClientError.ERR_TIMEOUT,
                hint="Increase client.timeout or check the gateway",
            ) from e
        except requests.ConnectionError as e:
            raise ClientError(
                f"Gateway unreachable: {url}",
                ClientError.ERR_UNREACHABLE,
                hint="Check client.base_url",
            ) from e

        log_with_context(
            logger,
            logging.DEBUG,
            f"{method} {path}",
            {"status": response.status_code, "network": self.network_type.name},
        )
        return response

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, **kwargs: Any) -> requests.Response:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs: Any) -> requests.Response:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        if not self._closed:
            self.session.close()
            self._closed = True

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def new_client(session: requests.Session | None, config: Config) -> Client:
    return Client(session, config)
