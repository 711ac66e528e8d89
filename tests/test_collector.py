from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from remote_inventory.core.collector import InventoryCollector, read_host_file
from remote_inventory.core.errors import ConfigurationError, QueryFailure, ResolutionFailure
from remote_inventory.core.models import CollectionKind, CollectionRequest
from tests.helpers import FakeHost, FakeTransport, service_item, task_item


def _collector(config, logger, transport: FakeTransport) -> InventoryCollector:
    return InventoryCollector(config, logger, transport=transport)


def test_conflicting_host_sources_fail_before_network(config, logger, tmp_path: Path) -> None:
    transport = FakeTransport({"X": FakeHost()})
    request = CollectionRequest(host_list=["X"], host_list_file=str(tmp_path / "f.txt"))

    with pytest.raises(ConfigurationError) as excinfo:
        _collector(config, logger, transport).run(request)

    assert excinfo.value.reason == ConfigurationError.CONFLICTING_HOST_SOURCE
    assert transport.calls == []


def test_no_host_source_yields_empty_run(config, logger) -> None:
    transport = FakeTransport()
    result = _collector(config, logger, transport).run(CollectionRequest())

    assert list(result) == []
    assert result.failures == []
    assert transport.calls == []


def test_unreachable_host_is_skipped(config, logger) -> None:
    transport = FakeTransport({
        "A": FakeHost(reachable=False),
        "B": FakeHost(items=[
            service_item("App1", "CORP\\svc1"),
            service_item("Spooler", "LocalSystem"),
            service_item("App2", "CORP\\svc2"),
        ]),
    })
    request = CollectionRequest(host_list=["A", "B"], skip_defaults=True, kind=CollectionKind.SERVICES)

    result = _collector(config, logger, transport).run(request)

    assert [(r.host, r.service_name) for r in result] == [("B", "App1"), ("B", "App2")]
    assert transport.calls_for("A") == [("probe", "A")]
    assert len(result.failures) == 1
    assert isinstance(result.failures[0], ResolutionFailure)
    assert result.failures[0].reason == ResolutionFailure.UNREACHABLE


def test_session_open_failure_contributes_nothing(config, logger) -> None:
    transport = FakeTransport({"C": FakeHost(session_error=True, items=[service_item("App", "CORP\\svc")])})

    result = _collector(config, logger, transport).run(CollectionRequest(host_list=["C"]))

    assert list(result) == []
    assert len(result.failures) == 1
    assert isinstance(result.failures[0], QueryFailure)
    assert result.failures[0].stage == QueryFailure.SESSION_OPEN
    assert not any(call[0] == "execute" for call in transport.calls)


def test_identity_and_query_failures_do_not_abort_batch(config, logger) -> None:
    transport = FakeTransport({
        "locked": FakeHost(identity_error=True),
        "broken": FakeHost(query_error=True),
        "ok": FakeHost(items=[task_item("Nightly", "\\Corp\\")]),
    })
    request = CollectionRequest(host_list=["locked", "broken", "ok"], kind=CollectionKind.SCHEDULED_TASKS)

    result = _collector(config, logger, transport).run(request)

    assert [r.host for r in result] == ["ok"]
    assert [f.host for f in result.failures] == ["locked", "broken"]
    assert result.hosts_total == 3


def test_records_follow_host_list_order(config, logger) -> None:
    transport = FakeTransport({
        name: FakeHost(items=[service_item(f"{name}-1", "CORP\\a"), service_item(f"{name}-2", "CORP\\b")])
        for name in ("h1", "h2", "h3")
    })
    request = CollectionRequest(host_list=["h3", "h1", "h2"])

    result = _collector(config, logger, transport).run(request)

    assert [r.service_name for r in result] == ["h3-1", "h3-2", "h1-1", "h1-2", "h2-1", "h2-2"]


def test_repeated_runs_are_identical(config, logger) -> None:
    transport = FakeTransport({
        "A": FakeHost(items=[service_item("App", "CORP\\svc")]),
        "B": FakeHost(reachable=False),
        "C": FakeHost(items=[service_item("Db", "CORP\\sql"), service_item("Web", "CORP\\iis")]),
    })
    collector = _collector(config, logger, transport)
    request = CollectionRequest(host_list=["A", "B", "C"])

    assert collector.run(request).records == collector.run(request).records


def test_parallel_run_matches_sequential_order(config, logger) -> None:
    hosts = {
        f"h{i}": FakeHost(items=[service_item(f"svc{i}", "CORP\\svc")], reachable=i % 3 != 0)
        for i in range(10)
    }
    request = CollectionRequest(host_list=list(hosts))

    sequential = _collector(config, logger, FakeTransport(hosts)).run(request)
    config.set("agent", "max_workers", "4")
    parallel = _collector(config, logger, FakeTransport(hosts)).run(request)

    assert parallel.records == sequential.records
    assert [f.host for f in parallel.failures] == [f.host for f in sequential.failures]


def test_hosts_read_from_file(config, logger, tmp_path: Path) -> None:
    host_file = tmp_path / "hosts.txt"
    host_file.write_text("\ufeffsrv01\n\n  srv02  \n", encoding="utf-8")
    transport = FakeTransport({
        "srv01": FakeHost(items=[service_item("A", "CORP\\a")]),
        "srv02": FakeHost(items=[service_item("B", "CORP\\b")]),
    })

    result = _collector(config, logger, transport).run(CollectionRequest(host_list_file=str(host_file)))

    assert [r.host for r in result] == ["srv01", "srv02"]


def test_missing_host_file_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        read_host_file(str(tmp_path / "missing.txt"))
    assert excinfo.value.reason == ConfigurationError.UNUSABLE_HOST_SOURCE


class GarbledTransport(FakeTransport):
    """Raises parser errors that escape the transport's own error type."""

    def query_identity(self, host: str):
        if host == "garbled-identity":
            self.calls.append(("identity", host))
            raise ET.ParseError("not well-formed (invalid token): line 1, column 0")
        return super().query_identity(host)

    def open_session(self, fqdn: str, name: str):
        if name == "garbled-session":
            self.calls.append(("open", fqdn, name))
            raise RuntimeError("unexpected SOAP envelope")
        return super().open_session(fqdn, name)


@pytest.mark.parametrize("max_workers", ["1", "2"])
def test_unexpected_host_error_does_not_abort_batch(config, logger, max_workers: str) -> None:
    config.set("agent", "max_workers", max_workers)
    transport = GarbledTransport({
        "garbled-identity": FakeHost(),
        "garbled-session": FakeHost(),
        "good": FakeHost(items=[service_item("App", "CORP\\svc")]),
    })
    request = CollectionRequest(host_list=["garbled-identity", "garbled-session", "good"])

    result = _collector(config, logger, transport).run(request)

    assert [r.host for r in result] == ["good"]
    assert [f.host for f in result.failures] == ["garbled-identity", "garbled-session"]
    assert isinstance(result.failures[0], ResolutionFailure)
    assert result.failures[0].reason == ResolutionFailure.IDENTITY_QUERY_FAILED
    assert isinstance(result.failures[1], QueryFailure)
    assert result.failures[1].stage == QueryFailure.QUERY
    assert "unexpected SOAP envelope" in result.failures[1].detail


def test_summary_counts_hosts_that_returned_records(config, logger, caplog: pytest.LogCaptureFixture) -> None:
    transport = FakeTransport({
        "full": FakeHost(items=[service_item("App", "CORP\\svc")]),
        "quiet": FakeHost(items=[service_item("Spooler", "LocalSystem")]),
        "dead": FakeHost(reachable=False),
    })
    request = CollectionRequest(host_list=["full", "quiet", "dead"], skip_defaults=True)

    with caplog.at_level(logging.INFO, logger="WatchmanRemoteInventory"):
        _collector(config, logger, transport).run(request)

    assert "2/3 hôte(s) en succès" in caplog.text
    assert "1 hôte(s) avec au moins un élément" in caplog.text
