from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from errors import PersistenceError
from json_store import JsonStore
from models import HARDWARE, PAPERS
from refresh import DomainPipeline, RefreshOrchestrator
from server import create_app


class _StaticSource:
    def __init__(self, name: str, records: list[dict]) -> None:
        self.name = name
        self.records = records

    def discover(self, query: str) -> list[dict]:
        return [dict(r) for r in self.records]


class _RecordingScheduler:
    def __init__(self) -> None:
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture()
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture()
def orchestrator(store: JsonStore) -> RefreshOrchestrator:
    return RefreshOrchestrator(store, [
        DomainPipeline(HARDWARE, [_StaticSource("hw", [{"name": "Allegro Hand", "price": 30000}])], "q"),
        DomainPipeline(PAPERS, [_StaticSource("papers", [{"title": "Paper One"}])], "q"),
    ])


def test_health(orchestrator: RefreshOrchestrator) -> None:
    with TestClient(create_app(orchestrator, run_on_startup=False)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_collections_empty_before_first_cycle(orchestrator: RefreshOrchestrator) -> None:
    with TestClient(create_app(orchestrator, run_on_startup=False)) as client:
        assert client.get("/api/hardware").json() == []
        assert client.get("/api/papers").json() == []


def test_startup_runs_cycle_and_starts_scheduler(orchestrator: RefreshOrchestrator) -> None:
    scheduler = _RecordingScheduler()

    with TestClient(create_app(orchestrator, scheduler=scheduler)) as client:
        hardware = client.get("/api/hardware").json()
        assert scheduler.started

    assert scheduler.stopped
    assert [r["id"] for r in hardware] == ["allegro-hand"]


def test_collections_are_served_verbatim(store: JsonStore, orchestrator: RefreshOrchestrator) -> None:
    records = [{"id": "x", "name": "X", "custom": {"nested": [1, 2]}, "lastUpdated": "2024-01-01T00:00:00+00:00"}]
    store.write(HARDWARE, records)

    with TestClient(create_app(orchestrator, run_on_startup=False)) as client:
        assert client.get("/api/hardware").json() == records


def test_update_endpoint_runs_cycle(store: JsonStore, orchestrator: RefreshOrchestrator) -> None:
    with TestClient(create_app(orchestrator, run_on_startup=False)) as client:
        response = client.get("/api/update")
        papers = client.get("/api/papers").json()

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Update completed successfully"
    assert body["domains"]["hardware"]["total"] == 1
    assert [p["title"] for p in papers] == ["Paper One"]


def test_update_endpoint_reports_write_failure(
    store: JsonStore,
    orchestrator: RefreshOrchestrator,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    app = create_app(orchestrator, run_on_startup=False)

    with TestClient(app) as client:
        def fail_write(domain, records):
            raise PersistenceError("read-only filesystem")

        monkeypatch.setattr(store, "write", fail_write)
        response = client.get("/api/update")
        still_up = client.get("/health")

    assert response.status_code == 500
    assert response.json() == {"error": "Update failed"}
    assert still_up.status_code == 200


def _blocked_orchestrator(tmp_path: Path) -> RefreshOrchestrator:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    return RefreshOrchestrator(JsonStore(blocker / "data"), [
        DomainPipeline(HARDWARE, [_StaticSource("hw", [{"name": "Allegro Hand"}])], "q"),
        DomainPipeline(PAPERS, [], "q"),
    ])


@pytest.mark.parametrize("run_on_startup", [True, False])
def test_unwritable_data_dir_does_not_block_startup(tmp_path: Path, run_on_startup: bool) -> None:
    orchestrator = _blocked_orchestrator(tmp_path)

    with TestClient(create_app(orchestrator, run_on_startup=run_on_startup)) as client:
        health = client.get("/health")
        hardware = client.get("/api/hardware")
        update = client.get("/api/update")

    assert health.status_code == 200
    assert hardware.json() == []
    assert update.status_code == 500
    assert update.json() == {"error": "Update failed"}
