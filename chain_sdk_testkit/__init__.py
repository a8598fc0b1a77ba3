"""Test kit for blockchain SDK clients: mock gateway and encoding helpers."""

from chain_sdk_testkit.client import Client, Config, NetworkType, new_client, new_config
from chain_sdk_testkit.encoding import big_integer_to_hex, decimal_to_hex
from chain_sdk_testkit.exceptions import (
    ClientError,
    ConfigError,
    EncodingError,
    RoutingError,
    TestkitException,
)
from chain_sdk_testkit.mock_server import (
    ROUTE_NEED_BODY,
    MockServer,
    ParamDescriptor,
    Route,
    check_params,
    new_mock_server,
    new_mock_server_with_routers,
)

__all__ = [
    "Client",
    "ClientError",
    "Config",
    "ConfigError",
    "EncodingError",
    "MockServer",
    "NetworkType",
    "ParamDescriptor",
    "ROUTE_NEED_BODY",
    "Route",
    "RoutingError",
    "TestkitException",
    "big_integer_to_hex",
    "check_params",
    "decimal_to_hex",
    "new_client",
    "new_config",
    "new_mock_server",
    "new_mock_server_with_routers",
]
