"""
Search and indexing endpoints.
"""
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from sample_search.api.schemas import ErrorResult, IndexStatus, KeywordHit, SemanticSearchResponse
from sample_search.service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> SearchService:
    """The SearchService attached to the app."""
    return request.app.state.search_service


@router.get("/search", response_model=list[KeywordHit])
def keyword_search(
    message: str = Query(..., min_length=1, description="Words to look for in the samples"),
    service: SearchService = Depends(get_service),
):
    """Search samples for keywords; results ordered by total occurrences."""
    return [result.to_dict() for result in service.keyword.search(message)]


@router.get(
    "/semantic-search",
    response_model=SemanticSearchResponse,
    responses={400: {"model": ErrorResult}, 502: {"model": ErrorResult}, 503: {"model": ErrorResult}},
)
def semantic_search(
    message: str = Query(..., min_length=1, description="Free-text query"),
    version: int | None = Query(None, ge=1, description="Framework version; defaults to the highest indexed"),
    top_k: int | None = Query(None, ge=1, le=100, description="Maximum number of results"),
    service: SearchService = Depends(get_service),
):
    """Rank samples by embedding similarity to the query."""
    resolved = service.semantic.resolve_version(version)
    results = service.semantic.search(message, version=resolved, top_k=top_k)
    return {
        "query": message,
        "ready": service.semantic.is_ready(),
        "version": resolved,
        "results": [result.to_dict() for result in results],
    }


@router.get(
    "/fetch/{name:path}",
    response_class=PlainTextResponse,
    responses={400: {"model": ErrorResult}, 404: {"model": ErrorResult}},
)
def fetch_sample(name: str, service: SearchService = Depends(get_service)):
    """Return the content of one sample by name."""
    return service.corpus.fetch(name)


@router.get("/index/status", response_model=IndexStatus)
def index_status(service: SearchService = Depends(get_service)):
    """Progress of the current indexing run and store size."""
    return service.status()


@router.post("/index/run")
def index_run(service: SearchService = Depends(get_service)):
    """Start a fresh indexing run unless one is already in progress."""
    if service.start_indexing() is None:
        return {
            "message": "Indexing run already in progress.",
            "details": "Follow progress at /index/status",
        }
    return {
        "message": "Indexing run started.",
        "details": "Follow progress at /index/status",
    }
