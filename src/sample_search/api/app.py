"""
FastAPI application factory.

The lifespan hook starts background indexing and, on shutdown, cancels it
and closes the embedding client. The API is queryable immediately and
semantic results fill in as samples are embedded.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from sample_search.api.routes import router
from sample_search.config import ServiceConfig, get_config
from sample_search.core.errors import (
    CorpusNotFoundError,
    DimensionMismatchError,
    EmbeddingError,
    InvalidQueryError,
    InvalidSampleNameError,
    SampleNotFoundError,
    TransientEmbeddingError,
)
from sample_search.service import SearchService

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 30.0


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidSampleNameError)
    async def invalid_name(request: Request, exc: InvalidSampleNameError):
        return _error(400, "InvalidFileName", str(exc))

    @app.exception_handler(InvalidQueryError)
    async def invalid_query(request: Request, exc: InvalidQueryError):
        return _error(400, "InvalidQuery", str(exc))

    @app.exception_handler(SampleNotFoundError)
    async def sample_not_found(request: Request, exc: SampleNotFoundError):
        return _error(404, "FileNotFound", str(exc))

    @app.exception_handler(CorpusNotFoundError)
    async def corpus_not_found(request: Request, exc: CorpusNotFoundError):
        return _error(404, "PathNotFound", str(exc))

    @app.exception_handler(EmbeddingError)
    async def embedding_failed(request: Request, exc: EmbeddingError):
        if isinstance(exc, TransientEmbeddingError):
            return _error(503, "EmbeddingUnavailable", str(exc))
        return _error(502, "EmbeddingFailed", str(exc))

    @app.exception_handler(DimensionMismatchError)
    async def dimension_mismatch(request: Request, exc: DimensionMismatchError):
        logger.error(f"Rejected query: {exc}")
        return _error(500, "DimensionMismatch", str(exc))


def create_app(
    service: SearchService | None = None,
    config: ServiceConfig | None = None,
    start_indexing: bool = True,
) -> FastAPI:
    """
    Build the API.

    Args:
        service: Pre-built SearchService (tests inject one with a stub embedder)
        config: Used to build a SearchService when none is given
        start_indexing: Start background indexing on startup
    """
    service = service or SearchService(config or get_config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_indexing:
            try:
                service.start_indexing()
            except CorpusNotFoundError as e:
                logger.error(f"Indexing not started: {e}")
        yield
        # close() blocks on in-flight embeddings
        await run_in_threadpool(service.close, SHUTDOWN_TIMEOUT_SECONDS)

    app = FastAPI(title="sample-search", lifespan=lifespan)
    app.state.search_service = service
    app.include_router(router, tags=["search", "index"])
    _register_error_handlers(app)
    return app
