"""
Entry point for the Proxmox VE API.

:class:`Client` combines a :class:`~proxmox_ve.connection.Connector` with
:class:`~proxmox_ve.auth.Credentials`, maps HTTP status codes to exceptions and
hands out resource wrappers.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .auth import Credentials
from .config import get_configuration
from .connection import Connector
from .errors import (
    ProxmoxAPIError,
    ProxmoxAuthError,
    ProxmoxError,
    ProxmoxNotFoundError,
    ProxmoxValidationError,
)
from .resources import VM, Cluster, Container, Disk, Node, Resource, Storage
from .response import Response

LOG = logging.getLogger(__name__)


class Client:
    """Synchronous Proxmox VE API client.

    Settings not passed explicitly come from the process configuration (see
    :mod:`proxmox_ve.config`). Username/password credentials are exchanged for
    a ticket immediately; API tokens are sent with every request.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        token_name: Optional[str] = None,
        token_value: Optional[str] = None,
        verify_ssl: Optional[bool] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = get_configuration().merge(host=host, port=port, verify_ssl=verify_ssl, timeout=timeout)
        self.config.validate()

        self.connection = Connector(
            self.config.host,
            self.config.port,
            self.config.verify_ssl,
            self.config.timeout,
            session=session,
        )
        self.credentials = Credentials(
            username=username,
            password=password,
            token_name=token_name,
            token_value=token_value,
        )
        self._token = self.credentials.token()

        if not self.credentials.token_auth:
            self.connection.authenticate(self.credentials.username, self.credentials.password)

        self._cluster: Optional[Cluster] = None

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Response:
        headers = self.connection.auth_headers(self._token)
        response = self.connection.request(method, path, headers=headers, params=params, files=files)
        return self._handle_response(response, path)

    @staticmethod
    def _handle_response(response: Response, path: str) -> Response:
        status = response.status
        if 200 <= status < 300:
            return response

        LOG.debug("Request to %s failed with HTTP %s: %s", path, status, response.body)
        if status == 401:
            raise ProxmoxAuthError("Authentication failed", response=response, status_code=status)
        if status == 404:
            raise ProxmoxNotFoundError(f"Resource not found: {path}", response=response, status_code=status)
        if 400 <= status < 500:
            message = response.error_message or f"Client error: {status}"
            raise ProxmoxValidationError(message, response=response, status_code=status)
        if 500 <= status < 600:
            message = response.error_message or f"Server error: {status}"
            raise ProxmoxAPIError(message, response=response, status_code=status)
        raise ProxmoxError(f"Unexpected response: {status}", response=response, status_code=status)

    # --- Resource accessors -----------------------------------------------
    def version(self) -> Dict[str, Any]:
        return self.request("GET", "version").data

    @property
    def cluster(self) -> Cluster:
        if self._cluster is None:
            self._cluster = Cluster(self)
        return self._cluster

    def nodes(self) -> List[Node]:
        return Node(self).list()

    def node(self, name: str) -> Node:
        return Node(self, node=name).load_details()

    def vms(self) -> List[VM]:
        return [r for r in self.cluster.resources(type="vm") if isinstance(r, VM)]

    def vm(self, name_or_node: str, vmid: Optional[int] = None) -> VM:
        """Look up a VM by ``(node, vmid)`` or, with a single argument, by name."""
        if vmid is not None:
            return VM(self, node=name_or_node, vmid=vmid).load_details()

        for vm in self.vms():
            if vm.get("name") == name_or_node:
                return vm
        raise ProxmoxNotFoundError(f"VM '{name_or_node}' not found")

    def containers(self) -> List[Container]:
        return [r for r in self.cluster.resources() if isinstance(r, Container)]

    def container(self, node: str, vmid: int) -> Container:
        return Container(self, node=node, vmid=vmid)

    def storage(self, node: str, storage: str) -> Storage:
        return Storage(self, node=node, storage=storage)

    def disk(self, node: str, vmid: int, disk_id: str) -> Disk:
        return Disk(self, node=node, vmid=vmid, disk_id=disk_id)

    def resources(self, type: Optional[str] = None) -> List[Resource]:
        return self.cluster.resources(type=type)
