"""Wrapper around raw HTTP responses returned by the API."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

import requests

from .errors import ProxmoxError


class Response:
    """Parsed API response.

    Proxmox wraps payloads as ``{"data": ...}`` and reports parameter problems
    under ``errors`` (a mapping of parameter name to message).
    """

    def __init__(self, raw: requests.Response) -> None:
        self.raw = raw
        self.status: int = raw.status_code
        self.headers: Mapping[str, str] = raw.headers
        self.body: Any = self._parse_body(raw)

    @staticmethod
    def _parse_body(raw: requests.Response) -> Any:
        if not raw.text:
            return {}
        try:
            return raw.json()
        except ValueError as exc:
            raise ProxmoxError(
                f"Invalid JSON response: {exc}", response=raw, status_code=raw.status_code
            ) from exc

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def data(self) -> Any:
        if isinstance(self.body, dict):
            return self.body.get("data")
        return self.body

    @property
    def errors(self) -> Any:
        if not isinstance(self.body, dict):
            return []
        return self.body.get("errors") or []

    @property
    def error_message(self) -> Optional[str]:
        if self.success:
            return None
        if not isinstance(self.body, dict):
            return f"HTTP {self.status}"

        errors = self.body.get("errors")
        if isinstance(errors, list):
            return ", ".join(str(e) for e in errors)
        if isinstance(errors, dict):
            parts: List[str] = [f"{key}: {value}" for key, value in errors.items()]
            return ", ".join(parts)
        return self.body.get("message") or f"HTTP {self.status}"

    def __repr__(self) -> str:
        return f"<Response status={self.status}>"
