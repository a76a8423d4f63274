"""
Relevance ranking: chunk a document, embed chunks and query, keep the top-K
chunks by cosine similarity.

Public API
----------
  RelevanceRanker.rank(query, text)              top chunks of one document
  RelevanceRanker.rank_documents(query, docs)    one result per document,
                                                 query embedded once
  score_chunks(query_vec, chunks, vectors)       ScoredChunk per embedded chunk
  select_top(scored, top_k)                      stable top-K by score

Policies
--------
  * A blank query falls back to *fallback_query*; both blank is a ValueError.
  * Documents with no non-blank chunks rank to "" without calling the
    embedding provider.
  * When the provider returns fewer vectors than chunks, vectors are paired
    with chunks in order and the chunks left without a vector are dropped.
  * Provider failures (JinaAPIError) propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol, Sequence

from .chunker import chunk_text
from .errors import ProviderError
from .settings import CHUNK_MAX_WORDS, MAX_CONCURRENCY, TOP_K
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)

Embedder = Callable[[list[str]], Awaitable[list[list[float]]]]

CHUNK_SEPARATOR = "\n\n"


class Chunked(Protocol):
    def content_chunks(self, chunk_size: int = ...) -> list[str]: ...


@dataclass(frozen=True)
class ScoredChunk:
    text:     str
    score:    float
    position: int    # index among the document's valid chunks


def score_chunks(
    query_vector: Sequence[float],
    chunks: Sequence[str],
    vectors: Sequence[Sequence[float]],
) -> list[ScoredChunk]:
    """Score each chunk that has a vector; chunks without one are dropped."""
    if len(vectors) < len(chunks):
        logger.warning(
            "Embedding count mismatch: %d vectors for %d chunks; dropping %d unscored chunk(s)",
            len(vectors), len(chunks), len(chunks) - len(vectors),
        )
    return [
        ScoredChunk(text=chunk, score=cosine_similarity(query_vector, vector), position=i)
        for i, (chunk, vector) in enumerate(zip(chunks, vectors))
    ]


def select_top(scored: Sequence[ScoredChunk], top_k: int) -> list[ScoredChunk]:
    """Highest scores first; sorted() is stable so ties keep document order."""
    return sorted(scored, key=lambda s: s.score, reverse=True)[:top_k]


def valid_chunks(text: str, chunk_size: int) -> list[str]:
    return [c for c in (chunk.strip() for chunk in chunk_text(text or "", chunk_size)) if c]


class RelevanceRanker:
    """Ranks document chunks against a query using an async *embed* callable."""

    def __init__(
        self,
        embed: Embedder,
        chunk_size: int = CHUNK_MAX_WORDS,
        top_k: int = TOP_K,
        max_concurrency: int = MAX_CONCURRENCY,
    ):
        if top_k < 1:
            raise ValueError("top_k must be >= 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._embed = embed
        self.chunk_size = chunk_size
        self.top_k = top_k
        self.max_concurrency = max_concurrency

    async def embed_query(self, query: str) -> list[float]:
        vectors = await self._embed([query])
        if not vectors:
            raise ProviderError("Embedding service returned no vector for the query")
        return vectors[0]

    async def rank(
        self,
        query: str,
        text: str,
        *,
        fallback_query: str = "",
        top_k: int | None = None,
    ) -> str:
        """Return the top chunks of *text* for *query*, joined by blank lines."""
        k = self._resolve_top_k(top_k)
        chunks = valid_chunks(text, self.chunk_size)
        if not chunks:
            return ""
        effective = (query or "").strip() or (fallback_query or "").strip()
        if not effective:
            raise ValueError("Cannot rank without a query or a fallback query")
        query_vector = await self.embed_query(effective)
        return await self._rank_chunks(query_vector, chunks, k)

    async def rank_documents(
        self,
        query: str,
        documents: Sequence[str | Chunked],
        *,
        top_k: int | None = None,
    ) -> list[str]:
        """
        Rank every document in *documents* against *query*.

        Documents are plain texts or objects exposing content_chunks(size),
        such as WebDocument. The query is embedded once and shared; each
        document is embedded and scored in its own task, at most
        max_concurrency at a time. Results come back in input order. If any
        document fails, the remaining tasks are cancelled and the error is
        re-raised.
        """
        k = self._resolve_top_k(top_k)
        if not documents:
            return []
        query = (query or "").strip()
        if not query:
            raise ValueError("Cannot rank documents without a query")

        per_doc = [self._chunks_of(d) for d in documents]
        if not any(per_doc):
            return ["" for _ in documents]

        query_vector = await self.embed_query(query)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _one(chunks: list[str]) -> str:
            if not chunks:
                return ""
            async with semaphore:
                return await self._rank_chunks(query_vector, chunks, k)

        tasks = [asyncio.ensure_future(_one(chunks)) for chunks in per_doc]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # one document failed: stop the others before reporting
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _resolve_top_k(self, top_k: int | None) -> int:
        if top_k is None:
            return self.top_k
        if top_k < 1:
            raise ValueError("top_k must be >= 1")
        return top_k

    def _chunks_of(self, document: str | Chunked) -> list[str]:
        if isinstance(document, str):
            return valid_chunks(document, self.chunk_size)
        return [c for c in document.content_chunks(self.chunk_size) if c.strip()]

    async def _rank_chunks(
        self,
        query_vector: Sequence[float],
        chunks: list[str],
        top_k: int,
    ) -> str:
        vectors = await self._embed(chunks)
        scored = score_chunks(query_vector, chunks, vectors)
        top = select_top(scored, top_k)
        return CHUNK_SEPARATOR.join(s.text for s in top)
