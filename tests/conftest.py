import pytest

from chain_sdk_testkit.config_manager import reset_config_manager

TESTKIT_ENV = (
    "TESTKIT_BASE_URL",
    "TESTKIT_NETWORK",
    "TESTKIT_TIMEOUT",
    "TESTKIT_MOCK_LIFETIME",
    "TESTKIT_LOG_LEVEL",
    "TESTKIT_LOG_FILE",
)


@pytest.fixture(autouse=True)
def reset_state(monkeypatch, tmp_path):
    """Isolate global config from the environment and local files."""
    for name in TESTKIT_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TESTKIT_CONFIG_PATH", str(tmp_path / "testkit_config.yaml"))
    reset_config_manager()
    yield
    reset_config_manager()
