import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from proxmox_ve import config as config_module
from proxmox_ve.client import Client

API_ROOT = "/api2/json/"


class _DummyResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.headers = {"Content-Type": "application/json"}
        if text is not None:
            self.text = text
        else:
            self.text = "" if payload is None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class _DummySession:
    """Stands in for ``requests.Session``; replies from a route table."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def add(self, method: str, path: str, data: Any = None, status: int = 200, text: Optional[str] = None):
        if text is not None or status >= 300:
            response = _DummyResponse(status, data, text)
        else:
            response = _DummyResponse(status, {"data": data})
        self.routes[(method, path)] = response

    def add_error(self, method: str, path: str, exc: Exception):
        self.routes[(method, path)] = exc

    def request(self, method, url, params=None, data=None, files=None, headers=None, verify=True, timeout=None):
        path = url.split(API_ROOT, 1)[1] if API_ROOT in url else url
        self.calls.append(
            {
                "method": method,
                "path": path,
                "params": params,
                "data": data,
                "files": files,
                "headers": headers,
                "verify": verify,
                "timeout": timeout,
            }
        )
        reply = self.routes.get((method, path))
        if reply is None:
            return _DummyResponse(404, {"data": None})
        if isinstance(reply, Exception):
            raise reply
        return reply

    def last(self, method: Optional[str] = None, path: Optional[str] = None) -> Dict[str, Any]:
        for call in reversed(self.calls):
            if (method is None or call["method"] == method) and (path is None or call["path"] == path):
                return call
        raise AssertionError(f"no {method} {path} request recorded")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "PROXMOX_HOST",
        "PROXMOX_PORT",
        "PROXMOX_VERIFY_SSL",
        "PROXMOX_TIMEOUT",
        "PROXMOX_USERNAME",
        "PROXMOX_PASSWORD",
        "PROXMOX_TOKEN_NAME",
        "PROXMOX_TOKEN_VALUE",
        "PROXMOX_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)
    config_module.reset_configuration()
    yield
    config_module.reset_configuration()


@pytest.fixture
def session():
    return _DummySession()


@pytest.fixture
def client(session):
    return Client(
        host="proxmox.example.com",
        token_name="user@pam!mytoken",
        token_value="secret-token-value",
        session=session,
    )
