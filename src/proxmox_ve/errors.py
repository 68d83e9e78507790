"""Exception hierarchy for Proxmox VE API interactions."""
from __future__ import annotations

from typing import Any, Optional


class ProxmoxError(Exception):
    """Base error for all client failures."""

    def __init__(
        self,
        message: str,
        response: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.response = response
        self.status_code = status_code


class ProxmoxAuthError(ProxmoxError):
    """Raised when authentication fails or credentials are missing."""


class ProxmoxConnectionError(ProxmoxError):
    """Raised when connectivity to the API fails."""


class ProxmoxTimeoutError(ProxmoxError):
    """Raised when a request times out."""


class ProxmoxSSLError(ProxmoxError):
    """Raised when TLS certificate verification fails."""


class ProxmoxNotFoundError(ProxmoxError):
    """Raised for 404 responses and failed lookups."""


class ProxmoxValidationError(ProxmoxError):
    """Raised for client errors and invalid local parameters."""


class ProxmoxAPIError(ProxmoxError):
    """Raised for server-side (5xx) errors."""


class AllocationExhausted(ProxmoxError):
    """Raised when every slot of an interface family is occupied."""

    def __init__(self, family: str, capacity: int) -> None:
        super().__init__(f"No available {family} slots (capacity {capacity})")
        self.family = family
        self.capacity = capacity
