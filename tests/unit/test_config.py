import pytest

from indigo_ai.core.config import Settings
from indigo_ai.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("INDIGO_AUTH", "INDIGO_IP", "INDIGO_PORT"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.INDIGO_URL == "http://10.10.0.140:8176"
    assert settings.DEVICE_SELECTION_TEMPLATE == "prompt3.txt"
    assert settings.DESIRED_STATE_TEMPLATE == "prompt2.txt"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("INDIGO_AUTH", "admin:pw")
    monkeypatch.setenv("INDIGO_IP", "192.168.1.20")
    settings = Settings(_env_file=None)
    assert settings.credentials() == ("admin", "pw")
    assert settings.INDIGO_URL == "http://192.168.1.20:8176"


def test_password_may_contain_colons():
    assert Settings(_env_file=None, INDIGO_AUTH="admin:a:b").credentials() == ("admin", "a:b")


def test_missing_auth():
    with pytest.raises(ConfigError, match="INDIGO_AUTH environment variable not set"):
        Settings(_env_file=None).credentials()


def test_auth_without_separator():
    with pytest.raises(ConfigError, match="username:password"):
        Settings(_env_file=None, INDIGO_AUTH="admin").credentials()
