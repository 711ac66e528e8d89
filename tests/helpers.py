from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from remote_inventory.core.errors import TransportError


def service_item(name: str, start_name: Optional[str], state: str = "Running",
                 description: Optional[str] = None) -> Dict[str, Any]:
    return {"Name": name, "State": state, "StartName": start_name, "Description": description}


def task_item(name: str, path: str, state: str = "Ready", run_as: Optional[str] = "SYSTEM",
              description: Optional[str] = None, author: Optional[str] = None) -> Dict[str, Any]:
    return {
        "TaskName": name,
        "TaskPath": path,
        "State": state,
        "RunAs": run_as,
        "Description": description,
        "Author": author,
    }


@dataclass
class FakeHost:
    reachable: bool = True
    name: Optional[str] = None
    domain: str = "corp.local"
    identity_error: bool = False
    session_error: bool = False
    query_error: bool = False
    close_error: bool = False
    items: List[Dict[str, Any]] = field(default_factory=list)


class FakeSession:
    def __init__(self, transport: "FakeTransport", name: str, host: FakeHost) -> None:
        self.transport = transport
        self.name = name
        self.host = host

    def execute(self, descriptor) -> List[Dict[str, Any]]:
        self.transport.calls.append(("execute", self.name, descriptor.kind))
        if self.host.query_error:
            raise TransportError("Get-CimInstance: RPC server unavailable")
        return list(self.host.items)

    def close(self) -> None:
        self.transport.calls.append(("close", self.name))
        if self.host.close_error:
            raise TransportError("close_shell: operation timed out")


class FakeTransport:
    """Transport en mémoire qui enregistre chaque appel réseau."""

    def __init__(self, hosts: Optional[Dict[str, FakeHost]] = None) -> None:
        self.hosts = hosts or {}
        self.calls: List[Tuple[Any, ...]] = []

    def probe(self, host: str) -> bool:
        self.calls.append(("probe", host))
        return host in self.hosts and self.hosts[host].reachable

    def query_identity(self, host: str) -> Tuple[str, str]:
        self.calls.append(("identity", host))
        fake = self.hosts[host]
        if fake.identity_error:
            raise TransportError("Access is denied")
        return fake.name or host.upper(), fake.domain

    def open_session(self, fqdn: str, name: str) -> FakeSession:
        self.calls.append(("open", fqdn, name))
        fake = self.hosts[name]
        if fake.session_error:
            raise TransportError("Kerberos: server not found in database")
        return FakeSession(self, name, fake)

    def calls_for(self, host: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if host in call[1:]]
