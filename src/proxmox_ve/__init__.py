"""
proxmox_ve - a synchronous client for the Proxmox Virtual Environment REST API.
"""

from .disks import (
    DISK_LIMITS,
    SlotKey,
    VolumeDescriptor,
    build_mountpoint,
    build_volume,
    next_free_slot,
    parse_volume,
)
from .errors import (
    AllocationExhausted,
    ProxmoxAPIError,
    ProxmoxAuthError,
    ProxmoxConnectionError,
    ProxmoxError,
    ProxmoxNotFoundError,
    ProxmoxSSLError,
    ProxmoxTimeoutError,
    ProxmoxValidationError,
)

__version__ = "0.1.0"
__all__ = [
    "AllocationExhausted",
    "Client",
    "DISK_LIMITS",
    "ProxmoxAPIError",
    "ProxmoxAuthError",
    "ProxmoxConnectionError",
    "ProxmoxError",
    "ProxmoxNotFoundError",
    "ProxmoxSSLError",
    "ProxmoxTimeoutError",
    "ProxmoxValidationError",
    "SlotKey",
    "VolumeDescriptor",
    "build_mountpoint",
    "build_volume",
    "configure",
    "next_free_slot",
    "parse_volume",
]


def __getattr__(name):
    """Lazily expose the HTTP layer so the disk helpers import without requests."""
    if name == "Client":
        from .client import Client

        return Client
    if name == "configure":
        from .config import configure

        return configure
    raise AttributeError(f"module 'proxmox_ve' has no attribute {name!r}")
