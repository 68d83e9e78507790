from proxmox_ve.disks import SlotKey
from proxmox_ve.models import ClusterEntry, ConfigSnapshot, NodeInfo
from proxmox_ve.response import Response


class _RawResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.headers = {}
        self.text = text

    def json(self):
        import json

        return json.loads(self.text)


def test_record_keeps_unknown_fields_in_extra():
    info = NodeInfo.from_dict({"node": "pve1", "maxmem": 1024, "ssl_fingerprint": "AA:BB", "level": ""})

    assert info.node == "pve1"
    assert info.maxmem == 1024
    assert info.status is None
    assert info.extra == {"ssl_fingerprint": "AA:BB", "level": ""}


def test_record_maps_hyphenated_keys():
    from dataclasses import dataclass
    from typing import Optional

    @dataclass
    class _AgentInfo(ClusterEntry):
        host_name: Optional[str] = None

    info = _AgentInfo.from_dict({"host-name": "web01", "id": "x"})

    assert info.host_name == "web01"
    assert info.id == "x"
    assert info.extra == {}


def test_config_snapshot_occupied_slots():
    snapshot = ConfigSnapshot(
        {
            "scsi1": "local-lvm:vm-100-disk-1",
            "ide2": "none,media=cdrom",
            "scsi0": "local-lvm:vm-100-disk-0",
            "net0": "virtio=AA:BB:CC:DD:EE:FF",
            "unused0": "local-lvm:vm-100-disk-9",
            "mp0": "local:subvol-100-disk-1,mp=/data",
            "ide9": "out-of-range",
        }
    )

    assert snapshot.occupied_slots() == [
        SlotKey("ide", 2),
        SlotKey("mp", 0),
        SlotKey("scsi", 0),
        SlotKey("scsi", 1),
    ]
    assert len(snapshot) == 7
    assert "net0" in snapshot


def test_response_error_message_variants():
    assert Response(_RawResponse(200, '{"data": 1}')).error_message is None
    assert Response(_RawResponse(400, '{"errors": ["a", "b"]}')).error_message == "a, b"
    assert Response(_RawResponse(500, '"plain"')).error_message == "HTTP 500"
    assert Response(_RawResponse(500, "")).errors == []
    assert Response(_RawResponse(200, "[1, 2]")).data == [1, 2]
