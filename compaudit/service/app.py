"""FastAPI application entrypoint for compaudit service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..orchestrator import AuditOutcome, Orchestrator


class AuditRequest(BaseModel):
    path: str
    analyzers: Optional[List[str]] = None
    output_dir: Optional[str] = None
    root_dir: Optional[str] = None


class AuditResponse(BaseModel):
    overall_score: int
    total_components: int
    issues: Dict[str, int]
    report_paths: Dict[str, str]
    failed_analyzers: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing audit runs."""

    app = FastAPI(title="compaudit Service", version=__version__)

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/audit", response_model=AuditResponse)
    async def audit(
        payload: AuditRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AuditResponse:
        def _run_audit() -> AuditOutcome:
            return orchestrator.run_audit(
                payload.path,
                output_dir=payload.output_dir,
                root_dir=payload.root_dir,
                analyzers=payload.analyzers,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run_audit)

        summary = outcome.report.report.executive_summary
        issues = dict(summary.issues_by_priority)
        issues["total"] = sum(summary.issues_by_priority.values())
        return AuditResponse(
            overall_score=summary.overall_score,
            total_components=summary.total_components,
            issues=issues,
            report_paths={name: str(path) for name, path in outcome.report.paths.items()},
            failed_analyzers=outcome.schedule.failed,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["AuditRequest", "AuditResponse", "create_app", "run_service"]
