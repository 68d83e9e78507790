"""QEMU virtual machine resource wrapper."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..disks import DISK_LIMITS, build_volume, iter_disk_slots, next_free_slot, parse_volume
from ..errors import ProxmoxAPIError
from ..models import ConfigSnapshot, GuestInfo
from .base import Resource
from .disk import Disk

if TYPE_CHECKING:
    from ..client import Client
    from .node import Node

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiskConfig:
    """Summary of one configured disk slot."""

    id: str
    volid: str
    storage: Optional[str]
    disk_size: Optional[str]


class VM(Resource):
    """A QEMU guest identified by node and VMID."""

    record_type = GuestInfo
    DISK_LIMITS = DISK_LIMITS

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
        self._snapshot: Optional[ConfigSnapshot] = None

    @property
    def path(self) -> str:
        return f"nodes/{self.node_name}/qemu/{self.vmid}"

    @property
    def node(self) -> "Node":
        from .node import Node

        return Node(self.client, node=self.node_name)

    def load_details(self) -> "VM":
        """Merge current status and a fresh config snapshot into ``attributes``."""
        self.attributes.update(self.status())
        self.attributes.update(self.config(refresh=True))
        return self

    @property
    def name(self) -> Optional[str]:
        if "name" in self.attributes:
            return self.attributes["name"]
        return self.status().get("name")

    @property
    def template(self) -> int:
        if "template" in self.attributes:
            return int(self.attributes["template"] or 0)
        return int(self.config().get("template", 0) or 0)

    def status(self) -> Dict[str, Any]:
        return self._get(f"{self.path}/status/current")

    def config(self, refresh: bool = False) -> ConfigSnapshot:
        """Return the guest configuration.

        The last snapshot is reused unless ``refresh`` is set or none has been
        loaded yet. Snapshots are read-only; call with ``refresh=True`` after
        changing the configuration.
        """
        if self._snapshot is None or refresh:
            self._snapshot = ConfigSnapshot(self._get(f"{self.path}/config") or {})
        return self._snapshot

    # --- Lifecycle ---------------------------------------------------------
    def start(self) -> str:
        LOG.info("Starting VM %s on %s", self.vmid, self.node_name)
        return self._post(f"{self.path}/status/start")

    def stop(self, force: bool = False) -> str:
        LOG.info("Stopping VM %s on %s", self.vmid, self.node_name)
        return self._post(f"{self.path}/status/stop", {"skiplock": 1} if force else None)

    def shutdown(self, timeout: int = 60) -> str:
        return self._post(f"{self.path}/status/shutdown", {"timeout": timeout})

    def reboot(self) -> str:
        return self._post(f"{self.path}/status/reboot")

    def reset(self) -> str:
        return self._post(f"{self.path}/status/reset")

    def suspend(self) -> str:
        return self._post(f"{self.path}/status/suspend")

    def resume(self) -> str:
        return self._post(f"{self.path}/status/resume")

    def update(self, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        merged = {**(params or {}), **kwargs}
        return self._put(f"{self.path}/config", merged)

    def delete(self) -> str:
        LOG.info("Deleting VM %s on %s", self.vmid, self.node_name)
        return self._delete(self.path)

    # --- Snapshots ---------------------------------------------------------
    def snapshots(self) -> List[Dict[str, Any]]:
        return self._get(f"{self.path}/snapshot")

    def create_snapshot(self, name: str, description: Optional[str] = None) -> str:
        params: Dict[str, Any] = {"snapname": name}
        if description:
            params["description"] = description
        return self._post(f"{self.path}/snapshot", params)

    def delete_snapshot(self, name: str) -> str:
        return self._delete(f"{self.path}/snapshot/{name}")

    def rollback_snapshot(self, name: str) -> str:
        return self._post(f"{self.path}/snapshot/{name}/rollback")

    def clone(self, newid: int, **params: Any) -> str:
        params["newid"] = newid
        return self._post(f"{self.path}/clone", params)

    def start_console(self, generate_password: bool = False) -> Dict[str, Any]:
        params = {"generate-password": 1} if generate_password else None
        return self._post(f"{self.path}/vncproxy", params)

    vncproxy = start_console

    # --- Guest agent -------------------------------------------------------
    # The agent endpoints answer 500 when the agent is not running.
    def agent_network_interfaces(self) -> Optional[Dict[str, Any]]:
        try:
            return self._get(f"{self.path}/agent/network-get-interfaces")
        except ProxmoxAPIError:
            return None

    def agent_hostname(self) -> Optional[str]:
        try:
            data = self._get(f"{self.path}/agent/get-host-name")
        except ProxmoxAPIError:
            return None
        return ((data or {}).get("result") or {}).get("host-name")

    def agent_osinfo(self) -> Optional[Dict[str, Any]]:
        try:
            data = self._get(f"{self.path}/agent/get-osinfo")
        except ProxmoxAPIError:
            return None
        return (data or {}).get("result")

    guest_agent_hostname = agent_hostname
    guest_agent_osinfo = agent_osinfo

    def guest_agent_ip_addresses(self, ip_type: Optional[str] = "ipv4") -> List[Dict[str, Any]]:
        """Flatten agent-reported addresses; ``ip_type=None`` returns every family."""
        interfaces = self.agent_network_interfaces()
        if not interfaces or not interfaces.get("result"):
            return []

        addresses = []
        for iface in interfaces["result"]:
            for ip_info in iface.get("ip-addresses") or []:
                if ip_type and ip_info.get("ip-address-type") != ip_type:
                    continue
                addresses.append(
                    {
                        "interface": iface.get("name"),
                        "ip": ip_info.get("ip-address"),
                        "mac": iface.get("hardware-address"),
                        "type": ip_info.get("ip-address-type"),
                    }
                )
        return addresses

    def agent_enabled(self) -> bool:
        # "agent" may carry options, e.g. "1,fstrim_cloned_disks=1"
        return str(self.config().get("agent", "")).split(",")[0] in ("1", "enabled=1")

    # --- Disks -------------------------------------------------------------
    def config_disks(self) -> List[DiskConfig]:
        result = []
        for key, raw in iter_disk_slots(self.config()):
            descriptor = parse_volume(raw)
            result.append(
                DiskConfig(id=key, volid=descriptor.volid, storage=descriptor.storage, disk_size=descriptor.size)
            )
        return result

    def disks(self) -> List[Disk]:
        return [
            Disk(self.client, node=self.node_name, vmid=self.vmid, disk_id=key, descriptor=parse_volume(raw))
            for key, raw in iter_disk_slots(self.config())
        ]

    def disk(self, disk_id: str) -> Optional[Disk]:
        for disk in self.disks():
            if disk.disk_id == disk_id:
                return disk
        return None

    def resize_disk(self, disk_id: str, size: str) -> str:
        """Resize a disk; ``size`` is passed through as given (``+10G``, ``64G``)."""
        return self._put(f"{self.path}/resize", {"disk": disk_id, "size": size})

    def move_disk(self, disk_id: str, storage: str, delete: bool = False, format: Optional[str] = None) -> str:
        params: Dict[str, Any] = {"disk": disk_id, "storage": storage, "delete": 1 if delete else 0}
        if format:
            params["format"] = format
        return self._post(f"{self.path}/move_disk", params)

    def add_disk(
        self,
        storage: str,
        size: Any,
        disk_type: str = "scsi",
        disk_id: Optional[str] = None,
        ssd: bool = False,
        discard: bool = False,
        cache: Optional[str] = None,
        format: Optional[str] = None,
    ) -> Any:
        """Attach a newly allocated disk.

        Without ``disk_id`` the lowest free slot of ``disk_type`` is chosen from
        a fresh config snapshot. The slot is not reserved between the read and
        the update.

        Raises:
            AllocationExhausted: no free slot of ``disk_type`` is left.
        """
        if disk_id is None:
            disk_id = str(next_free_slot(disk_type, self.config(refresh=True)))

        descriptor = build_volume(storage, size, format=format, cache=cache, ssd=ssd, discard=discard)
        LOG.info("Adding disk %s=%s to VM %s", disk_id, descriptor, self.vmid)
        return self._put(f"{self.path}/config", {disk_id: descriptor})

    def remove_disk(self, disk_id: str) -> Any:
        LOG.info("Removing disk %s from VM %s", disk_id, self.vmid)
        return self._put(f"{self.path}/config", {"delete": disk_id})
