from __future__ import annotations

import pytest

from remote_inventory.core.errors import ResolutionFailure
from remote_inventory.core.models import CollectionKind, CollectionResult, ServiceRecord
from remote_inventory.web.app import InventoryViewerApp


@pytest.fixture()
def client(config, logger):
    result = CollectionResult(kind=CollectionKind.SERVICES, hosts_total=2)
    result.records.extend([
        ServiceRecord("B", "BackupAgent", "Running", "CORP\\svc_backup", None),
        ServiceRecord("B", "WebApp", "Stopped", "CORP\\svc_web", "Intranet"),
    ])
    result.failures.append(ResolutionFailure("A", ResolutionFailure.UNREACHABLE))
    viewer = InventoryViewerApp(result, config, logger)
    return viewer.app.test_client()


def test_index_renders_table(client) -> None:
    response = client.get("/")
    body = response.get_data(as_text=True)

    assert response.status_code == 200
    assert "<th>service_name</th>" in body
    assert "BackupAgent" in body
    assert "WebApp" in body


def test_index_filter(client) -> None:
    body = client.get("/?q=intranet").get_data(as_text=True)
    assert "WebApp" in body
    assert "BackupAgent" not in body


def test_api_records(client) -> None:
    data = client.get("/api/records").get_json()

    assert data["kind"] == "services"
    assert data["columns"][0] == "host"
    assert [row["service_name"] for row in data["records"]] == ["BackupAgent", "WebApp"]


def test_api_failures(client) -> None:
    data = client.get("/api/failures").get_json()
    assert data == [{"host": "A", "error": "A: Unreachable"}]
