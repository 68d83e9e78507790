"""
Disk and mountpoint descriptor handling.

Proxmox stores each attached volume as a single comma-separated string in the
guest configuration, e.g. ``local-lvm:vm-100-disk-0,size=32G,ssd=1``. This
module parses those strings into :class:`VolumeDescriptor` records, builds new
descriptors for volume creation, and finds free attachment slots.

Slot allocation works on a snapshot of the configuration and reserves nothing:
two callers reading the same snapshot can pick the same slot. Callers must
re-read the configuration between allocation attempts.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Any, Container, Dict, Iterator, Mapping, NamedTuple, Optional, Tuple

from .errors import AllocationExhausted

DISK_LIMITS: Dict[str, int] = {
    "ide": 4,
    "scsi": 31,
    "virtio": 16,
    "sata": 6,
}
DEFAULT_CAPACITY = 16
MOUNTPOINT_LIMIT = 256

_UNIT_SUFFIX = re.compile(r"[GMK]$", re.IGNORECASE)
_SLOT_KEY = re.compile(r"^([a-z]+)(\d+)$")


@dataclass(frozen=True)
class VolumeDescriptor:
    """Parsed form of a disk or mountpoint configuration string."""

    volume_id: str
    storage: Optional[str] = None
    size: Optional[str] = None
    extra_flags: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "extra_flags", MappingProxyType(dict(self.extra_flags)))

    @property
    def volid(self) -> str:
        """Full volume token as Proxmox reports it (``storage:volume``)."""
        if self.storage is None:
            return self.volume_id
        return f"{self.storage}:{self.volume_id}"

    def flag(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.extra_flags.get(key, default)


class SlotKey(NamedTuple):
    """An attachment point such as ``scsi0`` or ``mp3``."""

    family: str
    index: int

    def __str__(self) -> str:
        return f"{self.family}{self.index}"

    @classmethod
    def parse(cls, key: str) -> Optional["SlotKey"]:
        match = _SLOT_KEY.match(key)
        if not match:
            return None
        return cls(match.group(1), int(match.group(2)))


def parse_volume(raw: str) -> VolumeDescriptor:
    """Parse a descriptor string.

    The first comma-separated token is the volume; every other token is a
    ``key=value`` flag. Tokens without ``=`` or with an empty value are
    skipped, so unknown or malformed segments never raise.
    """
    volume, *parts = raw.split(",")

    storage: Optional[str] = None
    volume_id = volume
    if ":" in volume:
        storage, volume_id = volume.split(":", 1)

    flags: Dict[str, str] = {}
    for part in parts:
        key, sep, value = part.partition("=")
        if sep and key and value:
            flags[key] = value

    return VolumeDescriptor(
        volume_id=volume_id,
        storage=storage,
        size=flags.get("size"),
        extra_flags=flags,
    )


def _clean_size(size: Any) -> str:
    # Units are stripped, not converted: the API reads the leading number in
    # the unit it expects for allocation (GiB for disks).
    return _UNIT_SUFFIX.sub("", str(size))


def build_volume(
    storage: str,
    size: Any,
    *,
    format: Optional[str] = None,
    cache: Optional[str] = None,
    ssd: bool = False,
    discard: bool = False,
) -> str:
    """Build a descriptor for allocating a new VM disk.

    The result names the storage and size (``local-lvm:50``), never a volume
    id; Proxmox allocates the volume and rewrites the descriptor.
    """
    parts = [f"{storage}:{_clean_size(size)}"]
    if format:
        parts.append(f"format={format}")
    if cache:
        parts.append(f"cache={cache}")
    if ssd:
        parts.append("ssd=1")
    if discard:
        parts.append("discard=on")
    return ",".join(parts)


def build_mountpoint(
    storage: str,
    size: Any,
    path: str,
    *,
    backup: bool = False,
    readonly: bool = False,
) -> str:
    """Build a descriptor for allocating a new container mountpoint."""
    parts = [f"{storage}:{_clean_size(size)}", f"mp={path}"]
    if backup:
        parts.append("backup=1")
    if readonly:
        parts.append("ro=1")
    return ",".join(parts)


def next_free_slot(
    family: str,
    occupied: Container[str],
    capacity: Optional[int] = None,
) -> SlotKey:
    """Return the lowest-numbered slot of ``family`` not in ``occupied``.

    ``occupied`` can be a set of keys or a configuration mapping. Unknown
    families get a capacity of 16.

    Raises:
        AllocationExhausted: every slot in the family is taken.
    """
    limit = capacity if capacity is not None else DISK_LIMITS.get(family, DEFAULT_CAPACITY)
    for index in range(limit):
        if f"{family}{index}" not in occupied:
            return SlotKey(family, index)
    raise AllocationExhausted(family, limit)


def iter_disk_slots(config: Mapping[str, Any]) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, descriptor)`` for every configured VM disk slot."""
    for family, limit in DISK_LIMITS.items():
        for index in range(limit):
            key = f"{family}{index}"
            if config.get(key):
                yield key, config[key]


def iter_mountpoints(config: Mapping[str, Any]) -> Iterator[Tuple[str, str]]:
    """Yield ``rootfs`` followed by every configured ``mpN`` volume."""
    if config.get("rootfs"):
        yield "rootfs", config["rootfs"]
    for index in range(MOUNTPOINT_LIMIT):
        key = f"mp{index}"
        if config.get(key):
            yield key, config[key]
