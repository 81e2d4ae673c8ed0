"""FastAPI application entrypoint for docmaster service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..orchestrator import DiscoveryOutcome, Orchestrator
from ..scaffold import DEFAULT_TEMPLATE_SET

T = TypeVar("T")


class DiscoverRequest(BaseModel):
    path: str = "."
    sample_cap: Optional[int] = None
    freshness_days: Optional[int] = None
    output_dir: Optional[str] = None
    format: Optional[str] = None


class DiscoverResponse(BaseModel):
    report_path: str
    summary: List[str]
    gaps: int
    broken_links: int
    recommendations: List[str]


class InitRequest(BaseModel):
    name: str
    template_set: str = DEFAULT_TEMPLATE_SET


class InitResponse(BaseModel):
    path: str
    created_files: List[str]
    index_entry: str


class UpdateRequest(BaseModel):
    name: str
    scope: str = "all"


class UpdateResponse(BaseModel):
    project: str
    scope: str
    missing: List[str]
    outdated: List[str]
    stamped: List[str]
    broken_links: int
    report_path: Optional[str] = None
    script_path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


async def _run_blocking(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing docmaster operations."""

    app = FastAPI(title="docmaster Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/discover", response_model=DiscoverResponse)
    async def discover(
        payload: DiscoverRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DiscoverResponse:
        def _run_discover() -> DiscoveryOutcome:
            return orchestrator.run_discover(
                payload.path,
                sample_cap=payload.sample_cap,
                freshness_days=payload.freshness_days,
                output_dir=payload.output_dir,
                fmt=payload.format,
            )

        outcome = await _run_blocking(_run_discover)
        return DiscoverResponse(
            report_path=str(outcome.path),
            summary=outcome.summary,
            gaps=len(outcome.report.gaps),
            broken_links=len(outcome.report.broken_links),
            recommendations=outcome.report.recommendations,
        )

    @app.post("/init", response_model=InitResponse)
    async def init_project(
        payload: InitRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> InitResponse:
        manifest = await _run_blocking(
            lambda: orchestrator.run_init(payload.name, payload.template_set)
        )
        return InitResponse(
            path=str(manifest.path),
            created_files=manifest.created_files,
            index_entry=manifest.index_entry,
        )

    @app.post("/update", response_model=UpdateResponse)
    async def update_project(
        payload: UpdateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> UpdateResponse:
        summary = await _run_blocking(lambda: orchestrator.run_update(payload.name, payload.scope))
        return UpdateResponse(
            project=summary.project,
            scope=summary.scope,
            missing=summary.missing,
            outdated=summary.outdated,
            stamped=summary.stamped,
            broken_links=len(summary.broken_links),
            report_path=str(summary.report_path) if summary.report_path else None,
            script_path=str(summary.script_path) if summary.script_path else None,
        )

    @app.exception_handler(FileExistsError)
    async def file_exists_handler(_: Any, exc: FileExistsError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
