import json
from pathlib import Path

import pytest

from proxmox_ve.config import (
    Configuration,
    configure,
    get_configuration,
    load_config,
    reset_configuration,
)
from proxmox_ve.errors import ProxmoxAuthError, ProxmoxValidationError


def _write_config(tmp_path: Path, auth: dict) -> Path:
    config = {
        "proxmox": {"host": "pve.local", "port": 8007, "verify_ssl": False},
        "auth": auth,
        "logging": {"level": "DEBUG", "format": "%(message)s"},
    }
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps(config))
    return cfg_path


def test_defaults():
    config = Configuration.from_env()

    assert config.host is None
    assert config.port == 8006
    assert config.verify_ssl is True
    assert config.timeout == 30


def test_from_env(monkeypatch):
    monkeypatch.setenv("PROXMOX_HOST", "test.example.com")
    monkeypatch.setenv("PROXMOX_PORT", "8007")
    monkeypatch.setenv("PROXMOX_VERIFY_SSL", "false")
    monkeypatch.setenv("PROXMOX_TIMEOUT", "60")

    config = Configuration.from_env()

    assert config.host == "test.example.com"
    assert config.port == 8007
    assert config.verify_ssl is False
    assert config.timeout == 60


def test_from_env_rejects_non_numeric_port(monkeypatch):
    monkeypatch.setenv("PROXMOX_PORT", "eighty")

    with pytest.raises(ProxmoxValidationError):
        Configuration.from_env()

    reset_configuration()
    with pytest.raises(ProxmoxValidationError, match="PROXMOX_PORT"):
        get_configuration()


def test_merge_prefers_overrides_and_keeps_original():
    config = Configuration(host="default.example.com", port=8006)

    merged = config.merge(host="override.example.com", timeout=60, port=None)

    assert merged.host == "override.example.com"
    assert merged.port == 8006
    assert merged.timeout == 60
    assert config.host == "default.example.com"


def test_merge_rejects_unknown_keys():
    with pytest.raises(ProxmoxValidationError):
        Configuration().merge(hostname="x")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({}, "Host"),
        ({"host": "h", "port": 0}, "Port"),
        ({"host": "h", "timeout": -1}, "Timeout"),
    ],
)
def test_validate(kwargs, message):
    with pytest.raises(ProxmoxValidationError, match=message):
        Configuration(**kwargs).validate()


def test_configure_and_reset():
    configure(host="configured.example.com", verify_ssl=False)
    assert get_configuration().host == "configured.example.com"
    assert get_configuration().verify_ssl is False

    reset_configuration()
    assert get_configuration().host is None


def test_load_config_with_token(tmp_path):
    cfg_path = _write_config(tmp_path, {"user": "api@pve", "token_name": "ci", "token_value": "abc123"})

    config, credentials = load_config(str(cfg_path))

    assert config.host == "pve.local"
    assert config.port == 8007
    assert config.verify_ssl is False
    assert config.log_level == "DEBUG"
    assert credentials.token_auth
    assert credentials.token_id == "api@pve!ci"


def test_load_config_resolves_token_env_var(tmp_path, monkeypatch):
    monkeypatch.setenv("PVE_TOKEN", "from-env")
    cfg_path = _write_config(tmp_path, {"user": "api@pve", "token_name": "ci", "token_env_var": "PVE_TOKEN"})

    _, credentials = load_config(str(cfg_path))

    assert credentials.token_value == "from-env"


def test_load_config_missing_token_env_var(tmp_path):
    cfg_path = _write_config(tmp_path, {"user": "api@pve", "token_name": "ci", "token_env_var": "PVE_TOKEN"})

    with pytest.raises(ProxmoxValidationError, match="PVE_TOKEN"):
        load_config(str(cfg_path))


def test_load_config_without_credentials(tmp_path):
    cfg_path = _write_config(tmp_path, {})

    with pytest.raises(ProxmoxAuthError):
        load_config(str(cfg_path))


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))
