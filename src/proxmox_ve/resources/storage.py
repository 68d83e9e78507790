"""Storage resource wrapper."""
from __future__ import annotations

import logging
import os
from typing import IO, TYPE_CHECKING, Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from ..models import StorageInfo
from .base import Resource

if TYPE_CHECKING:
    from ..client import Client
    from .node import Node

LOG = logging.getLogger(__name__)


class Storage(Resource):
    record_type = StorageInfo

    def __init__(
        self,
        client: "Client",
        node: str,
        storage: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(client, attributes)
        self.node_name = node
        self.storage = storage

    @property
    def path(self) -> str:
        return f"nodes/{self.node_name}/storage/{self.storage}"

    @property
    def node(self) -> "Node":
        from .node import Node

        return Node(self.client, node=self.node_name)

    def status(self) -> Dict[str, Any]:
        return self._get(f"{self.path}/status")

    def content(self, type: Optional[str] = None) -> List[Dict[str, Any]]:
        """List volumes, optionally restricted to a content type (``images``, ``iso``, ...)."""
        return self._get(f"{self.path}/content", {"content": type} if type else None) or []

    def upload(self, filename: str, content: IO[bytes], content_type: str = "iso") -> str:
        """Upload a file (ISO image or container template) as multipart form data."""
        LOG.info("Uploading %s to %s on %s", filename, self.storage, self.node_name)
        response = self._request(
            "POST",
            f"{self.path}/upload",
            params={"content": content_type},
            files={"filename": (os.path.basename(filename), content)},
        )
        return response.data

    def delete_volume(self, volume: str) -> Any:
        return self._delete(f"{self.path}/content/{quote(volume, safe='')}")

    def allocate_disk(self, vmid: int, filename: str, size: str, format: str = "raw") -> str:
        params = {"vmid": vmid, "filename": filename, "size": size, "format": format}
        return self._post(f"{self.path}/content", params)

    def volume_info(self, volume: str) -> Dict[str, Any]:
        return self._get(f"{self.path}/content/{quote(volume, safe='')}")

    def vm_volumes(self, vmid: int) -> List[Dict[str, Any]]:
        return [item for item in self.content(type="images") if str(item.get("vmid")) == str(vmid)]
