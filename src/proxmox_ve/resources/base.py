"""Shared behaviour for API resource wrappers."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Type

from ..errors import ProxmoxValidationError
from ..models import ClusterEntry, Record
from ..response import Response

if TYPE_CHECKING:
    from ..client import Client


class Resource:
    """Base class for all resource wrappers.

    ``attributes`` holds the raw payload the resource was built from; ``info``
    exposes it as the typed record declared by ``record_type``.
    """

    record_type: Type[Record] = ClusterEntry

    def __init__(self, client: "Client", attributes: Optional[Mapping[str, Any]] = None) -> None:
        self.client = client
        self.attributes: Dict[str, Any] = dict(attributes or {})

    @property
    def info(self) -> Record:
        return self.record_type.from_dict(self.attributes)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.attributes)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)

    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in self.attributes.items())
        return f"<{type(self).__name__} {attrs}>"

    # --- HTTP helpers ------------------------------------------------------
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.request("GET", path, params=params).data

    def _post(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.request("POST", path, params=params).data

    def _put(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.request("PUT", path, params=params).data

    def _delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.request("DELETE", path, params=params).data

    def _request(self, method: str, path: str, **kwargs: Any) -> Response:
        return self.client.request(method, path, **kwargs)

    @staticmethod
    def _require(params: Mapping[str, Any], *keys: str) -> None:
        missing = [key for key in keys if params.get(key) is None or str(params.get(key)) == ""]
        if missing:
            raise ProxmoxValidationError(f"Missing required parameters: {', '.join(missing)}")


class GenericResource(Resource):
    """Cluster entry with no dedicated wrapper (tasks, HA resources, ...)."""
