"""LXC container resource wrapper."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..disks import MOUNTPOINT_LIMIT, build_mountpoint, iter_mountpoints, next_free_slot, parse_volume
from ..models import ConfigSnapshot, GuestInfo
from .base import Resource
from .disk import Disk

if TYPE_CHECKING:
    from ..client import Client
    from .node import Node

LOG = logging.getLogger(__name__)


class Container(Resource):
    record_type = GuestInfo

    def __init__(
        self,
        client: "Client",
        node: str,
        vmid: int,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(client, attributes)
        self.node_name = node
        self.vmid = vmid

    @property
    def path(self) -> str:
        return f"nodes/{self.node_name}/lxc/{self.vmid}"

    @property
    def node(self) -> "Node":
        from .node import Node

        return Node(self.client, node=self.node_name)

    def status(self) -> Dict[str, Any]:
        return self._get(f"{self.path}/status/current")

    def config(self) -> ConfigSnapshot:
        """Fetch a fresh configuration snapshot."""
        return ConfigSnapshot(self._get(f"{self.path}/config") or {})

    def start(self) -> str:
        LOG.info("Starting container %s on %s", self.vmid, self.node_name)
        return self._post(f"{self.path}/status/start")

    def stop(self) -> str:
        LOG.info("Stopping container %s on %s", self.vmid, self.node_name)
        return self._post(f"{self.path}/status/stop")

    def shutdown(self, timeout: int = 60) -> str:
        return self._post(f"{self.path}/status/shutdown", {"timeout": timeout})

    def reboot(self) -> str:
        return self._post(f"{self.path}/status/reboot")

    def update(self, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self._put(f"{self.path}/config", {**(params or {}), **kwargs})

    def delete(self) -> str:
        LOG.info("Deleting container %s on %s", self.vmid, self.node_name)
        return self._delete(self.path)

    def snapshots(self) -> List[Dict[str, Any]]:
        return self._get(f"{self.path}/snapshot")

    def create_snapshot(self, name: str, description: Optional[str] = None) -> str:
        params: Dict[str, Any] = {"snapname": name}
        if description:
            params["description"] = description
        return self._post(f"{self.path}/snapshot", params)

    def delete_snapshot(self, name: str) -> str:
        return self._delete(f"{self.path}/snapshot/{name}")

    # --- Volumes -----------------------------------------------------------
    def volumes(self) -> List[Disk]:
        """Root filesystem and mountpoints, rootfs first."""
        return [
            Disk(self.client, node=self.node_name, vmid=self.vmid, disk_id=key, descriptor=parse_volume(raw))
            for key, raw in iter_mountpoints(self.config())
        ]

    def resize_rootfs(self, size: str) -> str:
        return self._put(f"{self.path}/resize", {"disk": "rootfs", "size": size})

    def resize_mountpoint(self, mp_id: str, size: str) -> str:
        return self._put(f"{self.path}/resize", {"disk": mp_id, "size": size})

    def move_volume(self, volume: str, storage: str, delete: bool = False) -> str:
        params = {"volume": volume, "storage": storage, "delete": 1 if delete else 0}
        return self._post(f"{self.path}/move_volume", params)

    def add_mountpoint(
        self,
        storage: str,
        size: Any,
        path: str,
        mp_id: Optional[str] = None,
        backup: bool = False,
        readonly: bool = False,
    ) -> Any:
        """Attach a new volume at ``path``; picks the lowest free ``mpN`` when ``mp_id`` is omitted.

        Raises:
            AllocationExhausted: all 256 mountpoint slots are used.
        """
        if mp_id is None:
            mp_id = str(next_free_slot("mp", self.config(), capacity=MOUNTPOINT_LIMIT))

        descriptor = build_mountpoint(storage, size, path, backup=backup, readonly=readonly)
        LOG.info("Adding mountpoint %s=%s to container %s", mp_id, descriptor, self.vmid)
        return self._put(f"{self.path}/config", {mp_id: descriptor})

    def remove_mountpoint(self, mp_id: str) -> Any:
        LOG.info("Removing mountpoint %s from container %s", mp_id, self.vmid)
        return self._put(f"{self.path}/config", {"delete": mp_id})
