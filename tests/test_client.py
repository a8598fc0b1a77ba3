from unittest.mock import MagicMock, patch

import pytest
import requests

from chain_sdk_testkit.client import Client, NetworkType, new_client, new_config
from chain_sdk_testkit.exceptions import ClientError, ConfigError
from chain_sdk_testkit.helpers import (
    setup,
    setup_mock_server,
    setup_with_address,
    validate_resp,
)
from chain_sdk_testkit.mock_server import MockServer, ParamDescriptor, Route


class TestNewConfig:
    def test_valid_config(self):
        """Test config keeps URL and network."""
        conf = new_config("http://10.32.150.136:3000/", NetworkType.TEST_NET)
        assert conf.base_url == "http://10.32.150.136:3000"
        assert conf.network_type is NetworkType.TEST_NET

    @pytest.mark.parametrize("address", ["", "10.32.150.136:3000", "ftp://host", "http://"])
    def test_invalid_url(self, address):
        """Test malformed base URLs are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            new_config(address, NetworkType.TEST_NET)
        assert exc_info.value.code == ConfigError.ERR_INVALID_URL

    def test_unsupported_network(self):
        """Test unknown network ids are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            new_config("http://localhost:3000", NetworkType.NOT_SUPPORTED)
        assert exc_info.value.code == ConfigError.ERR_INVALID_NETWORK

    def test_network_from_name(self):
        """Test network lookup by name and alias."""
        assert NetworkType.from_name("testnet") is NetworkType.TEST_NET
        assert NetworkType.from_name("MIJIN_TEST") is NetworkType.MIJIN_TEST
        with pytest.raises(ConfigError):
            NetworkType.from_name("not_supported")


class TestClient:
    def test_request_builds_url(self):
        """Test request joins base URL and path."""
        session = MagicMock()
        session.request.return_value = MagicMock(status_code=200)
        client = new_client(session, new_config("http://gateway:3000", NetworkType.MIJIN))

        client.get("/account/info", params={"address": "SA"})

        session.request.assert_called_once_with(
            "GET",
            "http://gateway:3000/account/info",
            params={"address": "SA"},
            timeout=10,
        )

    def test_unreachable_gateway(self):
        """Test connection errors become ClientError."""
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("refused")
        client = Client(session, new_config("http://gateway:3000", NetworkType.TEST_NET))

        with pytest.raises(ClientError) as exc_info:
            client.get("/chain/height")
        assert exc_info.value.code == ClientError.ERR_UNREACHABLE

    def test_timeout(self):
        """Test timeouts become ClientError."""
        session = MagicMock()
        session.request.side_effect = requests.Timeout("slow")
        client = Client(session, new_config("http://gateway:3000", NetworkType.TEST_NET))

        with pytest.raises(ClientError) as exc_info:
            client.post("/transaction", json={})
        assert exc_info.value.code == ClientError.ERR_TIMEOUT

    def test_closed_client(self):
        """Test closed client refuses requests."""
        session = MagicMock()
        with Client(session, new_config("http://gateway:3000", NetworkType.TEST_NET)) as client:
            pass

        session.close.assert_called_once()
        with pytest.raises(ClientError) as exc_info:
            client.get("/chain/height")
        assert exc_info.value.code == ClientError.ERR_CLOSED


class TestHelpers:
    def test_setup_with_address(self):
        """Test client built from explicit address."""
        client = setup_with_address("http://10.32.150.136:3000")
        assert client.config.base_url == "http://10.32.150.136:3000"
        assert client.network_type is NetworkType.TEST_NET

    def test_setup_reads_config(self, monkeypatch):
        """Test setup uses the configured gateway."""
        monkeypatch.setenv("TESTKIT_BASE_URL", "http://10.32.150.136:3000")
        monkeypatch.setenv("TESTKIT_NETWORK", "MAIN_NET")

        client, address = setup()

        assert address == "http://10.32.150.136:3000"
        assert client.network_type is NetworkType.MAIN_NET

    def test_setup_mock_server(self):
        """Test mock server setup returns a bound client and teardown."""
        client, server, url, teardown = setup_mock_server()
        try:
            assert client.config.base_url == url
            resp = client.get("/chain/height")
            assert resp.status_code == 404
            assert resp.text == "/chain/height not found in mock routers"
        finally:
            teardown()
        assert server.closed

    def test_validate_resp(self):
        """Test validate_resp accepts only 200 responses."""
        routes = {
            "/chain/height": Route(
                '{"height": [11, 0]}',
                {"id": ParamDescriptor("block id", required=True)},
            )
        }
        with MockServer(routes) as server:
            assert validate_resp(server.client.get("/chain/height", params={"id": "1"}))
            assert not validate_resp(server.client.get("/chain/height"))
        assert not validate_resp(None)

    def test_validate_resp_logs_body(self):
        """Test rejected responses are logged."""
        resp = MagicMock(status_code=400, text="bad params - id")
        with patch("chain_sdk_testkit.helpers.logger") as mock_logger:
            assert not validate_resp(resp)
        assert "bad params - id" in mock_logger.error.call_args[0][0]
