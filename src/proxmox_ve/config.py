"""
Configuration for the Proxmox VE client.

Settings come from three places, highest priority first:

- explicit keyword arguments passed to :class:`~proxmox_ve.client.Client`
- the process-wide default set with :func:`configure`
- ``PROXMOX_*`` environment variables

:func:`load_config` additionally reads the JSON config file used by the CLI
helper, which keeps the connection, credentials and logging settings together.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

from .auth import Credentials
from .errors import ProxmoxValidationError

DEFAULT_PORT = 8006
DEFAULT_TIMEOUT = 30
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ProxmoxValidationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass
class Configuration:
    """Connection settings shared by every client."""

    host: Optional[str] = None
    port: int = DEFAULT_PORT
    verify_ssl: bool = True
    timeout: int = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls) -> "Configuration":
        return cls(
            host=os.getenv("PROXMOX_HOST"),
            port=_env_int("PROXMOX_PORT", DEFAULT_PORT),
            verify_ssl=os.getenv("PROXMOX_VERIFY_SSL", "true") == "true",
            timeout=_env_int("PROXMOX_TIMEOUT", DEFAULT_TIMEOUT),
        )

    def merge(self, **overrides: Any) -> "Configuration":
        """Return a copy with ``overrides`` applied; ``None`` values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ProxmoxValidationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def validate(self) -> None:
        if not self.host:
            raise ProxmoxValidationError("Host is required")
        if self.port <= 0:
            raise ProxmoxValidationError("Port must be a positive integer")
        if self.timeout <= 0:
            raise ProxmoxValidationError("Timeout must be a positive integer")


_configuration: Optional[Configuration] = None


def get_configuration() -> Configuration:
    """Return the process default, building it from the environment on first use."""
    global _configuration
    if _configuration is None:
        _configuration = Configuration.from_env()
    return _configuration


def configure(**settings: Any) -> Configuration:
    """Update the process default configuration."""
    global _configuration
    _configuration = get_configuration().merge(**settings)
    return _configuration


def reset_configuration() -> None:
    """Drop any :func:`configure` overrides; the environment is re-read on next use."""
    global _configuration
    _configuration = None


def load_config(config_path: str) -> Tuple[Configuration, Credentials]:
    """Load connection settings and credentials from a JSON config file.

    Expected layout::

        {
          "proxmox": {"host": "pve.local", "port": 8006, "verify_ssl": false},
          "auth": {"user": "api@pve", "token_name": "ci", "token_env_var": "PVE_TOKEN"},
          "logging": {"level": "INFO", "format": "%(message)s"}
        }

    ``auth.token_value`` may be replaced by ``auth.token_env_var`` naming an
    environment variable that holds the secret.
    """
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    prox_cfg = data.get("proxmox", {})
    auth_cfg = data.get("auth", {})
    log_cfg = data.get("logging", {})

    token_value: Optional[str] = auth_cfg.get("token_value")
    if not token_value and auth_cfg.get("token_env_var"):
        env_var = auth_cfg["token_env_var"]
        token_value = os.getenv(env_var)
        if not token_value:
            raise ProxmoxValidationError(f"Environment variable {env_var} is not set")

    config = get_configuration().merge(
        host=prox_cfg.get("host"),
        port=prox_cfg.get("port"),
        verify_ssl=prox_cfg.get("verify_ssl"),
        timeout=prox_cfg.get("timeout"),
        log_level=log_cfg.get("level"),
        log_format=log_cfg.get("format"),
    )
    config.validate()

    credentials = Credentials(
        username=auth_cfg.get("user"),
        password=auth_cfg.get("password"),
        token_name=auth_cfg.get("token_name"),
        token_value=token_value,
    )
    return config, credentials


def setup_logging(config: Configuration) -> None:
    """Configure root logging from the ``logging`` section of the config."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=config.log_format,
    )
