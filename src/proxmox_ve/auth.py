"""Credential handling for API token and ticket authentication."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import ProxmoxAuthError


@dataclass
class AuthToken:
    """Holds either ticket (cookie) or API-token credentials."""

    ticket: Optional[str] = None
    csrf: Optional[str] = None
    token_header: Optional[str] = None

    def apply(self, headers: Dict[str, str]) -> None:
        """Apply authentication headers to a request."""
        if self.token_header:
            headers["Authorization"] = self.token_header
        if self.ticket:
            headers["Cookie"] = f"PVEAuthCookie={self.ticket}"
        if self.csrf:
            headers["CSRFPreventionToken"] = self.csrf


class Credentials:
    """Username/password or API-token credentials.

    Arguments left as ``None`` fall back to ``PROXMOX_USERNAME``,
    ``PROXMOX_PASSWORD``, ``PROXMOX_TOKEN_NAME`` and ``PROXMOX_TOKEN_VALUE``.
    Token credentials win when both kinds are present.
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token_name: Optional[str] = None,
        token_value: Optional[str] = None,
    ) -> None:
        self.username = username if username is not None else os.getenv("PROXMOX_USERNAME")
        self.password = password if password is not None else os.getenv("PROXMOX_PASSWORD")
        self.token_name = token_name if token_name is not None else os.getenv("PROXMOX_TOKEN_NAME")
        self.token_value = token_value if token_value is not None else os.getenv("PROXMOX_TOKEN_VALUE")
        self.validate()

    @property
    def token_auth(self) -> bool:
        return self.token_name is not None and self.token_value is not None

    @property
    def password_auth(self) -> bool:
        return self.username is not None and self.password is not None

    @property
    def token_id(self) -> str:
        """Full token id (``user@realm!name``)."""
        if "!" in self.token_name:
            return self.token_name
        if not self.username or "@" not in self.username:
            raise ProxmoxAuthError("username must include realm (e.g. 'user@pve')")
        return f"{self.username}!{self.token_name}"

    def validate(self) -> None:
        if not self.token_auth and not self.password_auth:
            raise ProxmoxAuthError("Either token credentials or username/password must be provided")
        if self.token_auth and (not self.token_name or not self.token_value):
            raise ProxmoxAuthError("Token name and value cannot be empty")
        if self.password_auth and (not self.username or not self.password):
            raise ProxmoxAuthError("Username and password cannot be empty")

    def token(self) -> AuthToken:
        """Token for header-based auth; empty when only a password is set."""
        if self.token_auth:
            return AuthToken(token_header=f"PVEAPIToken={self.token_id}={self.token_value}")
        return AuthToken()

    def __repr__(self) -> str:
        kind = "token" if self.token_auth else "password"
        return f"Credentials(username={self.username!r}, kind={kind!r})"
