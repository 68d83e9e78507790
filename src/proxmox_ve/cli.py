"""
Command line helper for quick checks against a Proxmox VE host.

Reads the JSON config file understood by :func:`proxmox_ve.config.load_config`
and prints API results as JSON.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional

from .client import Client
from .config import load_config, setup_logging
from .disks import next_free_slot
from .errors import ProxmoxError

LOG = logging.getLogger(__name__)


def connect(config_path: str) -> Client:
    config, credentials = load_config(config_path)
    setup_logging(config)
    return Client(
        host=config.host,
        port=config.port,
        verify_ssl=config.verify_ssl,
        timeout=config.timeout,
        username=credentials.username,
        password=credentials.password,
        token_name=credentials.token_name,
        token_value=credentials.token_value,
    )


def _dump(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_version(client: Client) -> None:
    _dump(client.version())


def cmd_nodes(client: Client) -> None:
    _dump([node.to_dict() for node in client.nodes()])


def cmd_vms(client: Client, node: Optional[str]) -> None:
    if node:
        vms = client.node(node).vms()
    else:
        vms = client.vms()
    _dump([vm.to_dict() for vm in vms])


def cmd_disks(client: Client, node: str, vmid: int) -> None:
    vm = client.vm(node, vmid)
    _dump([{"id": disk.disk_id, **disk.to_dict()} for disk in vm.disks()])


def cmd_next_slot(client: Client, node: str, vmid: int, family: str) -> None:
    vm = client.vm(node, vmid)
    print(next_free_slot(family, vm.config()))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pve-client",
        description="Proxmox VE API helper. Reads connection settings from a JSON config.",
    )
    parser.add_argument(
        "--config",
        default=os.getenv("PROXMOX_CONFIG", "proxmox-config/config.json"),
        help="Path to JSON config (default: %(default)s)",
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("version", help="Show Proxmox API version information")
    sub.add_parser("nodes", help="List nodes")

    vms = sub.add_parser("vms", help="List virtual machines")
    vms.add_argument("--node", help="Restrict VM listing to a specific node")

    disks = sub.add_parser("disks", help="List disks attached to a VM")
    disks.add_argument("node")
    disks.add_argument("vmid", type=int)

    slot = sub.add_parser("next-slot", help="Show the next free disk slot of a VM")
    slot.add_argument("node")
    slot.add_argument("vmid", type=int)
    slot.add_argument("--family", default="scsi", help="Disk bus (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        client = connect(args.config)
    except Exception as exc:
        LOG.debug("Could not connect using %s", args.config, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "version":
            cmd_version(client)
        elif args.command == "nodes":
            cmd_nodes(client)
        elif args.command == "vms":
            cmd_vms(client, args.node)
        elif args.command == "disks":
            cmd_disks(client, args.node, args.vmid)
        elif args.command == "next-slot":
            cmd_next_slot(client, args.node, args.vmid, args.family)
        else:  # pragma: no cover
            parser.error(f"Unsupported command: {args.command}")
    except (ProxmoxError, ValueError) as exc:
        LOG.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
