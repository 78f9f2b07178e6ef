"""FastAPI application entrypoint for codecounter service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import ConfigError, CounterConfig, load_config
from ..counter import CodeCounter, CounterResult


class CountRequest(BaseModel):
    path: str
    ignore: List[str] = Field(default_factory=list)
    unprefix: Optional[str] = None
    graph_level: Optional[int] = Field(default=None, ge=0, le=2)
    tree: Optional[bool] = None
    verbose: Optional[bool] = None


class FileSummary(BaseModel):
    path: str
    lines: int
    classes: int
    errors: List[str]
    generated: bool


class CountResponse(BaseModel):
    stats: Dict[str, int]
    errors: List[str]
    files: List[FileSummary]
    report: str
    graph: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


CounterFactory = Callable[[CounterConfig], CodeCounter]


def create_app(counter_factory: CounterFactory = CodeCounter) -> FastAPI:
    """Create the FastAPI application exposing counter runs."""

    app = FastAPI(title="CodeCounter Service", version=__version__)

    async def get_counter_factory() -> CounterFactory:
        return counter_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/count", response_model=CountResponse)
    async def count(
        payload: CountRequest,
        factory: CounterFactory = Depends(get_counter_factory),
    ) -> CountResponse:
        def _run_count() -> CounterResult:
            config = _config_for(payload)
            return factory(config).run([payload.path])

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_count)
        return _to_response(result)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _config_for(payload: CountRequest) -> CounterConfig:
    config = load_config(Path(payload.path))
    config.ignore.extend(payload.ignore)
    if payload.unprefix is not None:
        config.unprefix = payload.unprefix
    output = config.output
    if payload.graph_level is not None:
        output.graph_level = payload.graph_level
    if payload.tree is not None:
        output.tree = payload.tree
    if payload.verbose is not None:
        output.verbose = payload.verbose
    return config


def _to_response(result: CounterResult) -> CountResponse:
    files = [
        FileSummary(
            path=report.path,
            lines=report.lines,
            classes=sum(line.declarations for line in report.classifications),
            errors=report.errors,
            generated=report.generated,
        )
        for report in result.files
    ]
    return CountResponse(
        stats=result.stats.as_dict(),
        errors=result.errors,
        files=files,
        report=result.render(),
        graph=result.graph,
    )


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
