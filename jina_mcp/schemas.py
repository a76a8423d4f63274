"""Pydantic schemas for Jina API responses and the MCP tool envelope."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, RootModel, ValidationError

from .chunker import chunk_text
from .errors import ResponseValidationError
from .settings import CHUNK_MAX_WORDS


# ── Reader / Search ───────────────────────────────────────────────────────

class Usage(BaseModel):
    tokens: int


class WebDocument(BaseModel):
    """One page returned by the reader or one hit returned by search."""
    title: str
    description: Optional[str] = None
    url: str
    content: str
    images: Optional[Dict[str, str]] = None
    links: Optional[Dict[str, str]] = None
    usage: Usage

    def content_chunks(self, chunk_size: int = CHUNK_MAX_WORDS) -> list[str]:
        return chunk_text(self.content, chunk_size)


class ReaderResponse(BaseModel):
    code: int
    status: int
    data: WebDocument


class SearchResponse(BaseModel):
    code: int
    status: int
    data: List[WebDocument]


# ── Grounding ─────────────────────────────────────────────────────────────

class GroundingReference(BaseModel):
    url: str
    keyQuote: str
    isSupportive: bool


class GroundingResult(BaseModel):
    factuality: float
    result: bool
    reason: str
    references: List[GroundingReference]


class GroundingResponse(BaseModel):
    code: int
    status: int
    data: GroundingResult


# ── Embeddings ────────────────────────────────────────────────────────────
#
# The embeddings endpoint has answered in several shapes over time. Each one is
# a variant below; parse_embeddings() normalizes all of them to
# EmbeddingResult so nothing past the gateway branches on shape.

class _EmbeddingRecord(BaseModel):
    embedding: List[float]
    index: Optional[int] = None


class _RecordListVariant(BaseModel):
    """{"data": [{"embedding": [...], "index": 0}, ...]}  (current API)"""
    data: List[_EmbeddingRecord]

    def vectors(self) -> list[list[float]]:
        records = self.data
        if all(r.index is not None for r in records):
            records = sorted(records, key=lambda r: r.index)
        return [r.embedding for r in records]


class _NestedVectors(BaseModel):
    embeddings: List[List[float]]


class _NestedVariant(BaseModel):
    """{"data": {"embeddings": [[...], ...]}}"""
    data: _NestedVectors

    def vectors(self) -> list[list[float]]:
        return self.data.embeddings


class _FlatVariant(BaseModel):
    """{"embeddings": [[...], ...]}"""
    embeddings: List[List[float]]

    def vectors(self) -> list[list[float]]:
        return self.embeddings


class _BareVariant(RootModel[List[List[float]]]):
    """[[...], ...]"""

    def vectors(self) -> list[list[float]]:
        return self.root


_EMBEDDING_VARIANTS = (_RecordListVariant, _NestedVariant, _FlatVariant, _BareVariant)


class EmbeddingResult(BaseModel):
    vectors: List[List[float]]


def parse_embeddings(payload: Any) -> EmbeddingResult:
    """Decode any known embeddings response shape, or raise ResponseValidationError."""
    for variant in _EMBEDDING_VARIANTS:
        try:
            decoded = variant.model_validate(payload)
        except ValidationError:
            continue
        return EmbeddingResult(vectors=decoded.vectors())
    raise ResponseValidationError("Unexpected response from Jina embedding service")


def parse_response(model: type[BaseModel], payload: Any, service: str) -> Any:
    """Validate *payload* against *model*; shape errors become ResponseValidationError."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ResponseValidationError(
            f"Unexpected response format from Jina {service} API "
            f"({exc.error_count()} validation errors)"
        ) from exc


# ── MCP tool envelope ─────────────────────────────────────────────────────

class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """{"content": [{"type": "text", "text": ...}]} with at least one element."""
    content: List[TextContent] = Field(..., min_length=1)

    @classmethod
    def from_text(cls, text: str) -> "ToolResult":
        return cls.model_validate({"content": [{"type": "text", "text": text}]})

    @property
    def text(self) -> str:
        return "\n".join(c.text for c in self.content)
