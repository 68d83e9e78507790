import io

import pytest

from proxmox_ve.errors import AllocationExhausted
from proxmox_ve.models import StorageInfo
from proxmox_ve.resources import Container, Storage

UPID = "UPID:pve1:00000000:00000000:00000000:vzcreate:101:user@pam:"
CONFIG_PATH = "nodes/pve1/lxc/101/config"


@pytest.fixture
def container(client):
    return Container(client, node="pve1", vmid=101)


@pytest.fixture
def storage(client):
    return Storage(client, node="pve1", storage="local")


def test_volumes(container, session):
    session.add(
        "GET",
        CONFIG_PATH,
        {
            "rootfs": "local-lvm:vm-101-disk-0,size=8G",
            "mp1": "local-lvm:vm-101-disk-2,mp=/srv,backup=1",
            "mp0": "local-lvm:vm-101-disk-1,mp=/data,size=16G",
            "hostname": "ct101",
        },
    )

    volumes = container.volumes()

    assert [v.disk_id for v in volumes] == ["rootfs", "mp0", "mp1"]
    assert volumes[0].size == "8G"
    assert volumes[2].descriptor.flag("mp") == "/srv"
    assert all(v.container_volume for v in volumes)


def test_add_mountpoint_with_explicit_id(container, session):
    session.add("PUT", CONFIG_PATH, None)

    container.add_mountpoint(storage="local-lvm", size="10G", path="/data", mp_id="mp4", backup=True)

    assert session.last()["data"] == {"mp4": "local-lvm:10,mp=/data,backup=1"}


def test_add_mountpoint_picks_free_slot(container, session):
    session.add("GET", CONFIG_PATH, {"rootfs": "local-lvm:vm-101-disk-0", "mp0": "local-lvm:vm-101-disk-1,mp=/a"})
    session.add("PUT", CONFIG_PATH, None)

    container.add_mountpoint(storage="local-lvm", size=4, path="/b", readonly=True)

    assert session.last("PUT")["data"] == {"mp1": "local-lvm:4,mp=/b,ro=1"}


def test_add_mountpoint_exhausted(container, session):
    session.add("GET", CONFIG_PATH, {f"mp{i}": f"a:vm-101-disk-{i}" for i in range(256)})

    with pytest.raises(AllocationExhausted) as excinfo:
        container.add_mountpoint(storage="local-lvm", size=4, path="/b")

    assert excinfo.value.capacity == 256


def test_remove_mountpoint_and_resize(container, session):
    session.add("PUT", CONFIG_PATH, None)
    session.add("PUT", "nodes/pve1/lxc/101/resize", UPID)

    container.remove_mountpoint("mp0")
    assert session.last()["data"] == {"delete": "mp0"}
    container.resize_rootfs("+2G")
    assert session.last()["data"] == {"disk": "rootfs", "size": "+2G"}
    container.resize_mountpoint("mp1", "20G")
    assert session.last()["data"] == {"disk": "mp1", "size": "20G"}


def test_move_volume(container, session):
    session.add("POST", "nodes/pve1/lxc/101/move_volume", UPID)

    container.move_volume("rootfs", "fast-ssd")

    assert session.last()["data"] == {"volume": "rootfs", "storage": "fast-ssd", "delete": 0}


def test_container_lifecycle_and_snapshots(container, session):
    for path in ("status/start", "status/stop", "status/reboot", "status/shutdown", "snapshot"):
        session.add("POST", f"nodes/pve1/lxc/101/{path}", UPID)
    session.add("DELETE", "nodes/pve1/lxc/101", UPID)
    session.add("DELETE", "nodes/pve1/lxc/101/snapshot/s1", UPID)
    session.add("GET", "nodes/pve1/lxc/101/status/current", {"status": "running"})

    assert container.start() == UPID
    assert container.stop() == UPID
    assert container.reboot() == UPID
    container.shutdown(timeout=30)
    assert session.last()["data"] == {"timeout": 30}
    container.create_snapshot("s1")
    assert session.last()["data"] == {"snapname": "s1"}
    container.delete_snapshot("s1")
    assert container.status()["status"] == "running"
    assert container.delete() == UPID


def test_storage_content_and_vm_volumes(storage, session):
    session.add(
        "GET",
        "nodes/pve1/storage/local/content",
        [
            {"volid": "local:100/vm-100-disk-0.qcow2", "vmid": "100"},
            {"volid": "local:101/vm-101-disk-0.qcow2", "vmid": "101"},
        ],
    )

    volumes = storage.vm_volumes(100)

    assert [v["volid"] for v in volumes] == ["local:100/vm-100-disk-0.qcow2"]
    assert session.last()["params"] == {"content": "images"}


def test_storage_allocate_and_delete(storage, session):
    session.add("POST", "nodes/pve1/storage/local/content", "local:100/vm-100-disk-3.raw")
    session.add("DELETE", "nodes/pve1/storage/local/content/local%3A100%2Fvm-100-disk-3.raw", UPID)

    volid = storage.allocate_disk(vmid=100, filename="vm-100-disk-3.raw", size="4G")
    assert volid == "local:100/vm-100-disk-3.raw"
    assert session.last()["data"] == {"vmid": 100, "filename": "vm-100-disk-3.raw", "size": "4G", "format": "raw"}

    assert storage.delete_volume(volid) == UPID


def test_storage_upload_is_multipart(storage, session):
    session.add("POST", "nodes/pve1/storage/local/upload", UPID)
    payload = io.BytesIO(b"iso-bytes")

    assert storage.upload("/tmp/debian.iso", payload) == UPID
    call = session.last()
    assert call["data"] == {"content": "iso"}
    assert call["files"] == {"filename": ("debian.iso", payload)}


def test_storage_status_and_info(client, session):
    session.add("GET", "nodes/pve1/storage/local-lvm/status", {"total": 100, "used": 40})
    storage = Storage(client, node="pve1", storage="local-lvm", attributes={"type": "lvmthin", "avail": 60})

    assert storage.status() == {"total": 100, "used": 40}
    info = storage.info
    assert isinstance(info, StorageInfo)
    assert info.type == "lvmthin"
    assert info.avail == 60
    assert storage.node.name == "pve1"
