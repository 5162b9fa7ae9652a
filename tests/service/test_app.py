"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from compaudit.models import AuditReport, ExecutiveSummary
from compaudit.orchestrator import AuditOutcome
from compaudit.report import ReportOutput
from compaudit.scheduler import ScheduleReport, SchedulerError
from compaudit.service import create_app


class _StubOrchestrator:
    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def run_audit(
        self,
        path: str,
        *,
        output_dir: str | None = None,
        root_dir: str | None = None,
        analyzers: list[str] | None = None,
    ) -> AuditOutcome:
        self.calls.append(
            {"path": path, "output_dir": output_dir, "root_dir": root_dir, "analyzers": analyzers}
        )
        if path == "missing":
            raise FileNotFoundError("Project path not found: missing")
        if analyzers == ["checklist"]:
            raise SchedulerError("Analyzer checklist requires unknown analyzer coverage")
        summary = ExecutiveSummary(
            total_components=3,
            overall_score=72,
            issues_by_priority={"critical": 1, "high": 2, "medium": 0, "low": 4},
        )
        report = AuditReport(metadata={"version": "test"}, executive_summary=summary)
        output = ReportOutput(report=report, paths={"markdown": Path("out") / "AUDIT_REPORT.md"})
        return AuditOutcome(components=[], schedule=ScheduleReport(), report=output)


@pytest.fixture
def orchestrator() -> _StubOrchestrator:
    return _StubOrchestrator()


@pytest.fixture
def client(orchestrator: _StubOrchestrator) -> TestClient:
    app = create_app(lambda: orchestrator)  # type: ignore[arg-type, return-value]
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_audit_endpoint_returns_summary(client: TestClient, orchestrator: _StubOrchestrator) -> None:
    response = client.post("/audit", json={"path": "app", "analyzers": ["motion"]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["overall_score"] == 72
    assert payload["total_components"] == 3
    assert payload["issues"]["total"] == 7
    assert payload["report_paths"]["markdown"].endswith("AUDIT_REPORT.md")
    assert payload["failed_analyzers"] == []
    assert orchestrator.calls[0]["analyzers"] == ["motion"]


def test_audit_missing_path_returns_404(client: TestClient) -> None:
    response = client.post("/audit", json={"path": "missing"})
    assert response.status_code == 404
    assert "missing" in response.json()["detail"]


def test_audit_scheduler_error_returns_400(client: TestClient) -> None:
    response = client.post("/audit", json={"path": "app", "analyzers": ["checklist"]})
    assert response.status_code == 400


def test_audit_requires_path(client: TestClient) -> None:
    response = client.post("/audit", json={})
    assert response.status_code == 422
