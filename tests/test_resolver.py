from __future__ import annotations

import pytest

from remote_inventory.core.errors import ResolutionFailure
from remote_inventory.core.models import ResolvedHost
from remote_inventory.core.resolver import HostResolver
from tests.helpers import FakeHost, FakeTransport


def test_resolve_composes_fqdn(logger) -> None:
    transport = FakeTransport({"srv01": FakeHost(name="SRV01", domain="corp.local")})
    resolved = HostResolver(transport, logger).resolve("srv01")

    assert resolved == ResolvedHost(short_name="srv01", fqdn="SRV01.corp.local")
    assert transport.calls == [("probe", "srv01"), ("identity", "srv01")]


def test_resolve_without_domain_uses_host_name(logger) -> None:
    transport = FakeTransport({"ws01": FakeHost(name="WS01", domain="")})
    assert HostResolver(transport, logger).resolve("ws01").fqdn == "WS01"


def test_unreachable_host_stops_after_probe(logger) -> None:
    transport = FakeTransport({"dead": FakeHost(reachable=False)})

    with pytest.raises(ResolutionFailure) as excinfo:
        HostResolver(transport, logger).resolve("dead")

    assert excinfo.value.reason == ResolutionFailure.UNREACHABLE
    assert excinfo.value.host == "dead"
    assert transport.calls == [("probe", "dead")]


def test_identity_failure_is_reported_with_detail(logger) -> None:
    transport = FakeTransport({"locked": FakeHost(identity_error=True)})

    with pytest.raises(ResolutionFailure) as excinfo:
        HostResolver(transport, logger).resolve("locked")

    assert excinfo.value.reason == ResolutionFailure.IDENTITY_QUERY_FAILED
    assert "Access is denied" in excinfo.value.detail


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_host_name_makes_no_network_call(logger, name: str) -> None:
    transport = FakeTransport()

    with pytest.raises(ResolutionFailure):
        HostResolver(transport, logger).resolve(name)

    assert transport.calls == []


@pytest.mark.parametrize("name", ["-n", "-w 5000", " -t"])
def test_option_like_host_name_is_rejected_before_ping(logger, name: str) -> None:
    transport = FakeTransport({name: FakeHost()})

    with pytest.raises(ResolutionFailure) as excinfo:
        HostResolver(transport, logger).resolve(name)

    assert excinfo.value.reason == ResolutionFailure.UNREACHABLE
    assert excinfo.value.detail == "nom d'hôte invalide"
    assert transport.calls == []


def test_resolve_is_idempotent(logger) -> None:
    transport = FakeTransport({"srv01": FakeHost()})
    resolver = HostResolver(transport, logger)
    assert resolver.resolve("srv01") == resolver.resolve("srv01")
