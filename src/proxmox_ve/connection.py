"""
HTTP transport for the Proxmox VE API.

The connector owns a ``requests`` session, builds ``/api2/json`` URLs and
translates transport failures into :mod:`proxmox_ve.errors` exceptions. Status
code handling lives in :class:`~proxmox_ve.client.Client`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .auth import AuthToken
from .errors import (
    ProxmoxAuthError,
    ProxmoxConnectionError,
    ProxmoxError,
    ProxmoxSSLError,
    ProxmoxTimeoutError,
)
from .response import Response

LOG = logging.getLogger(__name__)

_SECRET_PARAMS = frozenset({"password", "new_password"})


def _redact(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return params
    return {k: ("***" if k in _SECRET_PARAMS else v) for k, v in params.items()}


class Connector:
    """Base transport layer for all API requests."""

    def __init__(
        self,
        hostname: str,
        port: int = 8006,
        verify_ssl: bool = True,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.host = hostname
        self.port = port
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.baseurl = f"https://{self.host}:{self.port}/api2/json"
        self.session = session or requests.Session()
        self._ticket: Optional[AuthToken] = None
        LOG.debug("API endpoint base url: %s", self.baseurl)

    def url(self, path: str) -> str:
        return f"{self.baseurl}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Response:
        method = method.upper()
        request_headers: Dict[str, str] = {"Accept": "application/json"}
        request_headers.update(headers or {})
        LOG.debug("%s %s (params=%s)", method, path, _redact(params))

        try:
            raw = self.session.request(
                method=method,
                url=self.url(path),
                params=params if method == "GET" else None,
                data=params if method != "GET" else None,
                files=files,
                headers=request_headers,
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise ProxmoxTimeoutError(f"Request timeout: {exc}") from exc
        except requests.exceptions.SSLError as exc:
            raise ProxmoxSSLError(f"SSL verification failed: {exc}") from exc
        except requests.ConnectionError as exc:
            raise ProxmoxConnectionError(f"Connection failed: {exc}") from exc
        except requests.RequestException as exc:
            raise ProxmoxError(f"Request failed: {exc}") from exc

        return Response(raw)

    def authenticate(self, username: str, password: str) -> AuthToken:
        """Exchange a username and password for a ticket and CSRF token."""
        LOG.info("Requesting ticket for %s on %s", username, self.host)
        response = self.request(
            "POST",
            "access/ticket",
            params={"username": username, "password": password},
        )
        if not response.success:
            raise ProxmoxAuthError(
                f"Authentication failed: {response.error_message}",
                response=response,
                status_code=response.status,
            )

        data = response.data
        if not data or "ticket" not in data:
            raise ProxmoxAuthError("Failed to obtain access ticket", response=response)

        self._ticket = AuthToken(ticket=data["ticket"], csrf=data.get("CSRFPreventionToken"))
        return self._ticket

    @property
    def authenticated(self) -> bool:
        return self._ticket is not None

    def auth_headers(self, fallback: Optional[AuthToken] = None) -> Dict[str, str]:
        """Headers for the next request: the ticket if one is held, else ``fallback``."""
        headers: Dict[str, str] = {}
        token = self._ticket or fallback
        if token:
            token.apply(headers)
        return headers
