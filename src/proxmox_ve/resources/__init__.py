"""Resource wrappers for cluster, node, guest, storage and disk endpoints."""

from .base import GenericResource, Resource
from .cluster import Cluster, Task
from .container import Container
from .disk import Disk
from .node import Node
from .storage import Storage
from .vm import VM, DiskConfig

__all__ = [
    "Cluster",
    "Container",
    "Disk",
    "DiskConfig",
    "GenericResource",
    "Node",
    "Resource",
    "Storage",
    "Task",
    "VM",
]
