"""Cluster-wide endpoints: status, resources, backups, HA, firewall, replication."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models import TaskInfo
from .base import GenericResource, Resource
from .container import Container
from .node import Node
from .storage import Storage
from .vm import VM


class Task(GenericResource):
    record_type = TaskInfo


class Cluster(Resource):
    def _wrap(self, entry: Dict[str, Any]) -> Resource:
        kind = entry.get("type")
        if kind == "qemu":
            return VM(self.client, node=entry.get("node"), vmid=entry.get("vmid"), attributes=entry)
        if kind == "lxc":
            return Container(self.client, node=entry.get("node"), vmid=entry.get("vmid"), attributes=entry)
        if kind == "node":
            return Node(self.client, node=entry.get("node") or entry.get("name"), attributes=entry)
        if kind == "storage":
            return Storage(self.client, node=entry.get("node"), storage=entry.get("storage"), attributes=entry)
        return GenericResource(self.client, entry)

    @property
    def name(self) -> Optional[str]:
        """Cluster name, or ``None`` for a standalone node."""
        for item in self.status():
            if item.get("type") == "cluster":
                return item.get("name")
        return None

    def status(self) -> List[Resource]:
        result: List[Resource] = []
        for item in self._get("cluster/status") or []:
            if item.get("type") == "node":
                result.append(Node(self.client, node=item.get("name"), attributes=item))
            else:
                result.append(GenericResource(self.client, item))
        return result

    def resources(self, type: Optional[str] = None) -> List[Resource]:
        """List cluster resources, optionally filtered (``vm``, ``storage``, ``node``, ``sdn``)."""
        params = {"type": type} if type else None
        return [self._wrap(entry) for entry in self._get("cluster/resources", params) or []]

    def nodes(self) -> List[Resource]:
        return self.resources(type="node")

    def tasks(self) -> List[Task]:
        return [Task(self.client, item) for item in self._get("cluster/tasks") or []]

    def options(self) -> Dict[str, Any]:
        return self._get("cluster/options")

    def update_options(self, **params: Any) -> Any:
        return self._put("cluster/options", params)

    def next_vmid(self) -> int:
        return int(self._get("cluster/nextid"))

    # --- Backup jobs -------------------------------------------------------
    def backup_jobs(self) -> List[GenericResource]:
        return [GenericResource(self.client, item) for item in self._get("cluster/backup") or []]

    def backup_job(self, job_id: str) -> Dict[str, Any]:
        return self._get(f"cluster/backup/{job_id}")

    def create_backup_job(self, **params: Any) -> Any:
        self._require(params, "schedule", "storage")
        return self._post("cluster/backup", params)

    def update_backup_job(self, job_id: str, **params: Any) -> Any:
        return self._put(f"cluster/backup/{job_id}", params)

    def delete_backup_job(self, job_id: str) -> Any:
        return self._delete(f"cluster/backup/{job_id}")

    # --- High availability -------------------------------------------------
    def ha_resources(self) -> List[GenericResource]:
        return [GenericResource(self.client, item) for item in self._get("cluster/ha/resources") or []]

    def ha_resource(self, sid: str) -> Dict[str, Any]:
        return self._get(f"cluster/ha/resources/{sid}")

    def create_ha_resource(self, **params: Any) -> Any:
        self._require(params, "sid")
        return self._post("cluster/ha/resources", params)

    def update_ha_resource(self, sid: str, **params: Any) -> Any:
        return self._put(f"cluster/ha/resources/{sid}", params)

    def delete_ha_resource(self, sid: str) -> Any:
        return self._delete(f"cluster/ha/resources/{sid}")

    def ha_status(self) -> Any:
        return self._get("cluster/ha/status/current")

    # --- Firewall ----------------------------------------------------------
    def firewall_rules(self) -> List[GenericResource]:
        return [GenericResource(self.client, item) for item in self._get("cluster/firewall/rules") or []]

    def create_firewall_rule(self, **params: Any) -> Any:
        self._require(params, "type", "action")
        return self._post("cluster/firewall/rules", params)

    # --- Replication -------------------------------------------------------
    def replications(self) -> List[GenericResource]:
        return [GenericResource(self.client, item) for item in self._get("cluster/replication") or []]

    def replication(self, job_id: str) -> Dict[str, Any]:
        return self._get(f"cluster/replication/{job_id}")

    def create_replication(self, **params: Any) -> Any:
        self._require(params, "id", "target")
        return self._post("cluster/replication", params)

    def update_replication(self, job_id: str, **params: Any) -> Any:
        return self._put(f"cluster/replication/{job_id}", params)

    def delete_replication(self, job_id: str) -> Any:
        return self._delete(f"cluster/replication/{job_id}")
