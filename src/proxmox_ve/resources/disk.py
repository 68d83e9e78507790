"""Disk wrapper covering VM disks and container volumes."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..disks import VolumeDescriptor
from ..errors import ProxmoxError
from .base import Resource
from .storage import Storage

if TYPE_CHECKING:
    from ..client import Client
    from .node import Node

VM_DISK = "vm_disk"
CONTAINER_ROOTFS = "container_rootfs"
CONTAINER_MOUNTPOINT = "container_mountpoint"
UNKNOWN = "unknown"

_VM_DISK_ID = re.compile(r"^(ide|scsi|virtio|sata)\d+$")
_MOUNTPOINT_ID = re.compile(r"^mp\d+$")


def disk_kind(disk_id: str) -> str:
    if _VM_DISK_ID.match(disk_id):
        return VM_DISK
    if disk_id == "rootfs":
        return CONTAINER_ROOTFS
    if _MOUNTPOINT_ID.match(disk_id):
        return CONTAINER_MOUNTPOINT
    return UNKNOWN


class Disk(Resource):
    """One attached volume of a VM (``scsi0``) or container (``rootfs``, ``mp0``)."""

    def __init__(
        self,
        client: "Client",
        node: str,
        vmid: int,
        disk_id: str,
        descriptor: Optional[VolumeDescriptor] = None,
    ) -> None:
        self.descriptor = descriptor or VolumeDescriptor(volume_id="")
        attributes: Dict[str, Any] = dict(self.descriptor.extra_flags)
        if self.descriptor.volume_id:
            attributes["volid"] = self.descriptor.volid
        if self.descriptor.storage is not None:
            attributes["storage"] = self.descriptor.storage
            attributes["volume"] = self.descriptor.volume_id
        super().__init__(client, attributes)
        self.node_name = node
        self.vmid = vmid
        self.disk_id = disk_id
        self.type = disk_kind(disk_id)

    @property
    def node(self) -> "Node":
        from .node import Node

        return Node(self.client, node=self.node_name)

    @property
    def storage(self) -> Optional[str]:
        return self.descriptor.storage

    @property
    def size(self) -> Optional[str]:
        return self.descriptor.size

    @property
    def format(self) -> Optional[str]:
        return self.descriptor.flag("format")

    @property
    def volume_id(self) -> Optional[str]:
        return self.attributes.get("volid") or self.attributes.get("volume")

    @property
    def vm_disk(self) -> bool:
        return self.type == VM_DISK

    @property
    def container_volume(self) -> bool:
        return self.type in (CONTAINER_ROOTFS, CONTAINER_MOUNTPOINT)

    def _guest_path(self) -> str:
        if self.vm_disk:
            return f"nodes/{self.node_name}/qemu/{self.vmid}"
        if self.container_volume:
            return f"nodes/{self.node_name}/lxc/{self.vmid}"
        raise ProxmoxError(f"Unknown disk type: {self.type}")

    def resize(self, size: str) -> str:
        """Resize the volume; ``size`` keeps its unit and optional ``+`` prefix."""
        return self._put(f"{self._guest_path()}/resize", {"disk": self.disk_id, "size": size})

    def move(self, storage: str, delete: bool = False) -> str:
        path = self._guest_path()
        flag = 1 if delete else 0
        if self.vm_disk:
            return self._post(f"{path}/move_disk", {"disk": self.disk_id, "storage": storage, "delete": flag})
        return self._post(f"{path}/move_volume", {"volume": self.disk_id, "storage": storage, "delete": flag})

    def volume_info(self) -> Dict[str, Any]:
        """Storage-side volume details, or the parsed descriptor when there is no storage."""
        if self.storage and self.volume_id:
            return Storage(self.client, node=self.node_name, storage=self.storage).volume_info(self.volume_id)
        return self.to_dict()

    def delete(self) -> Any:
        if self.type == VM_DISK:
            from .vm import VM

            return VM(self.client, node=self.node_name, vmid=self.vmid).remove_disk(self.disk_id)
        if self.type == CONTAINER_MOUNTPOINT:
            from .container import Container

            return Container(self.client, node=self.node_name, vmid=self.vmid).remove_mountpoint(self.disk_id)
        raise ProxmoxError(f"Cannot delete {self.type}")
