"""
Typed records for API payloads.

Each record declares the fields the client relies on; anything else the API
returns is kept in ``extra`` so no data is lost when Proxmox adds fields.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type, TypeVar

from .disks import DISK_LIMITS, MOUNTPOINT_LIMIT, SlotKey

R = TypeVar("R", bound="Record")


@dataclass
class Record:
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls: Type[R], data: Mapping[str, Any]) -> R:
        known = {f.name for f in fields(cls) if f.name != "extra"}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name in known:
                values[name] = value
            else:
                extra[key] = value
        return cls(extra=extra, **values)


@dataclass
class NodeInfo(Record):
    node: Optional[str] = None
    status: Optional[str] = None
    ip: Optional[str] = None
    cpu: Optional[float] = None
    maxcpu: Optional[int] = None
    mem: Optional[int] = None
    maxmem: Optional[int] = None
    uptime: Optional[int] = None


@dataclass
class GuestInfo(Record):
    """VM or container summary."""

    vmid: Optional[int] = None
    name: Optional[str] = None
    node: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    cpus: Optional[int] = None
    maxmem: Optional[int] = None
    maxdisk: Optional[int] = None
    uptime: Optional[int] = None
    template: Optional[int] = None
    tags: Optional[str] = None


@dataclass
class StorageInfo(Record):
    storage: Optional[str] = None
    node: Optional[str] = None
    type: Optional[str] = None
    content: Optional[str] = None
    total: Optional[int] = None
    used: Optional[int] = None
    avail: Optional[int] = None
    active: Optional[int] = None
    enabled: Optional[int] = None
    shared: Optional[int] = None


@dataclass
class TaskInfo(Record):
    upid: Optional[str] = None
    node: Optional[str] = None
    type: Optional[str] = None
    id: Optional[str] = None
    user: Optional[str] = None
    status: Optional[str] = None
    starttime: Optional[int] = None
    endtime: Optional[int] = None


@dataclass
class ClusterEntry(Record):
    """Generic cluster status or resource entry."""

    id: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    node: Optional[str] = None
    status: Optional[str] = None


class ConfigSnapshot(Mapping[str, Any]):
    """Read-only view of a guest configuration at the time it was fetched."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def occupied_slots(self) -> List[SlotKey]:
        """Disk and mountpoint slots that hold a volume, in key order."""
        slots = []
        for key, value in self._values.items():
            slot = SlotKey.parse(key)
            if slot is None or not value:
                continue
            limit = MOUNTPOINT_LIMIT if slot.family == "mp" else DISK_LIMITS.get(slot.family)
            if limit is not None and slot.index < limit:
                slots.append(slot)
        return sorted(slots)

    def __repr__(self) -> str:
        return f"ConfigSnapshot({dict(self._values)!r})"
