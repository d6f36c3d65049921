"""Response models for the HTTP API."""

from pydantic import BaseModel, Field


class WordCount(BaseModel):
    word: str
    count: int


class KeywordHit(BaseModel):
    identifier: str
    score: int
    matching_words: list[WordCount]


class SemanticHit(BaseModel):
    identifier: str
    score: float
    version: int | None = None


class SemanticSearchResponse(BaseModel):
    query: str
    ready: bool = Field(description="False until at least one sample has been indexed")
    version: int | None = None
    results: list[SemanticHit]


class IndexFailure(BaseModel):
    path: str
    reason: str
    kind: str


class IndexStatus(BaseModel):
    running: bool
    state: str
    files: int
    indexed: int
    cancelled: bool
    errors: list[IndexFailure]
    document_count: int


class ErrorResult(BaseModel):
    error: str
    message: str
