"""Node resource wrapper."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..errors import ProxmoxValidationError
from ..models import NodeInfo
from .base import Resource
from .container import Container
from .storage import Storage
from .vm import VM

if TYPE_CHECKING:
    from ..client import Client
    from .cluster import Cluster


class Node(Resource):
    record_type = NodeInfo

    def __init__(
        self,
        client: "Client",
        node: Optional[str] = None,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(client, attributes)
        self._node_name = node or self.attributes.get("node")

    @property
    def name(self) -> Optional[str]:
        return self._node_name

    def _validate_node(self) -> str:
        if not self._node_name:
            raise ProxmoxValidationError("Node name is required")
        return self._node_name

    @staticmethod
    def _validate_upid(upid: str) -> None:
        if not upid:
            raise ProxmoxValidationError("UPID is required")

    def load_details(self) -> "Node":
        """Merge the node's current status into ``attributes``."""
        stat = self.status()
        if isinstance(stat, dict):
            self.attributes.update(stat)
        return self

    @property
    def online(self) -> bool:
        return self.attributes.get("status") == "online"

    @property
    def offline(self) -> bool:
        return self.attributes.get("status") == "offline"

    @property
    def cluster(self) -> "Cluster":
        from .cluster import Cluster

        return Cluster(self.client)

    def ip(self) -> Optional[str]:
        """Node address as reported by the cluster status endpoint."""
        if self.attributes.get("ip"):
            return self.attributes["ip"]
        for entry in self.cluster.status():
            if isinstance(entry, Node) and entry.name == self.name and entry.get("ip"):
                self.attributes["ip"] = entry.get("ip")
                return entry.get("ip")
        return None

    def list(self) -> List["Node"]:
        return [Node(self.client, attributes=item) for item in self._get("nodes") or []]

    def status(self) -> Dict[str, Any]:
        return self._get(f"nodes/{self._validate_node()}/status")

    def version(self) -> Dict[str, Any]:
        return self._get(f"nodes/{self._validate_node()}/version")

    def network_interfaces(self) -> List[Dict[str, Any]]:
        return self._get(f"nodes/{self._validate_node()}/network")

    def vms(self) -> List[VM]:
        name = self._validate_node()
        return [
            VM(self.client, node=name, vmid=item["vmid"], attributes=item)
            for item in self._get(f"nodes/{name}/qemu") or []
        ]

    def containers(self) -> List[Container]:
        name = self._validate_node()
        return [
            Container(self.client, node=name, vmid=item["vmid"], attributes=item)
            for item in self._get(f"nodes/{name}/lxc") or []
        ]

    def storage(self) -> List[Storage]:
        name = self._validate_node()
        return [
            Storage(self.client, node=name, storage=item["storage"], attributes=item)
            for item in self._get(f"nodes/{name}/storage") or []
        ]

    # --- Tasks -------------------------------------------------------------
    def tasks(
        self,
        limit: Optional[int] = None,
        start: Optional[int] = None,
        source: Optional[str] = None,
        errors: Optional[bool] = None,
        userfilter: Optional[str] = None,
        vmid: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if limit:
            params["limit"] = limit
        if start:
            params["start"] = start
        if source:
            params["source"] = source
        if errors is not None:
            params["errors"] = 1 if errors else 0
        if userfilter:
            params["userfilter"] = userfilter
        if vmid:
            params["vmid"] = vmid
        return self._get(f"nodes/{self._validate_node()}/tasks", params or None)

    def task_status(self, upid: str) -> Dict[str, Any]:
        name = self._validate_node()
        self._validate_upid(upid)
        return self._get(f"nodes/{name}/tasks/{upid}/status")

    def task_log(self, upid: str, limit: Optional[int] = None, start: Optional[int] = None) -> List[Dict[str, Any]]:
        name = self._validate_node()
        self._validate_upid(upid)
        params: Dict[str, Any] = {}
        if limit:
            params["limit"] = limit
        if start:
            params["start"] = start
        return self._get(f"nodes/{name}/tasks/{upid}/log", params or None)

    def stop_task(self, upid: str) -> Any:
        name = self._validate_node()
        self._validate_upid(upid)
        return self._delete(f"nodes/{name}/tasks/{upid}")
