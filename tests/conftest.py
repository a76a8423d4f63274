"""
Shared pytest fixtures for the jina-mcp-tools test suite.

Nothing here touches the network: HTTP is served by httpx.MockTransport and
embeddings come from a deterministic one-hot-per-word stub.
"""

from __future__ import annotations

import re

import pytest

from jina_mcp.retry import RetryPolicy
from jina_mcp.schemas import GroundingResult, WebDocument
from jina_mcp.settings import Settings


# ---------------------------------------------------------------------------
# Stub embedder
# ---------------------------------------------------------------------------

class OneHotEmbedder:
    """
    Bag-of-words embedder: one dimension per distinct lowercase word.

    With a fixed *vocabulary* every vector has the same length and unknown
    words are ignored. Without one the vocabulary grows as texts arrive, so
    vectors from different calls may differ in length; cosine_similarity
    compares the common prefix, which is where every earlier word lives.
    """

    def __init__(
        self,
        vocabulary: list[str] | None = None,
        drop_last: int = 0,
        fail_with: Exception | None = None,
    ):
        self.fixed = vocabulary is not None
        self.vocab: dict[str, int] = {w: i for i, w in enumerate(vocabulary or [])}
        self.calls: list[list[str]] = []
        self.drop_last = drop_last
        self.fail_with = fail_with

    def _vector(self, text: str) -> list[float]:
        words = re.findall(r"[a-z0-9]+", text.lower())
        if not self.fixed:
            for w in words:
                self.vocab.setdefault(w, len(self.vocab))
        vec = [0.0] * max(len(self.vocab), 1)
        for w in words:
            if w in self.vocab:
                vec[self.vocab[w]] = 1.0
        return vec

    async def __call__(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_with is not None:
            raise self.fail_with
        vectors = [self._vector(t) for t in texts]
        if self.drop_last and len(texts) > 1:
            vectors = vectors[:-self.drop_last]
        return vectors


# ---------------------------------------------------------------------------
# Stub gateway
# ---------------------------------------------------------------------------

class FakeGateway:
    """In-memory stand-in for JinaClient."""

    def __init__(self, docs=None, page=None, grounding=None, embedder=None, error=None):
        self.docs = docs or []
        self.page = page
        self.grounding = grounding
        self.embedder = embedder or OneHotEmbedder()
        self.error = error
        self.search_calls: list[tuple] = []
        self.read_calls: list[tuple] = []
        self.ground_calls: list[tuple] = []

    async def search(self, query, options=None):
        self.search_calls.append((query, options))
        if self.error:
            raise self.error
        return self.docs

    async def read(self, url, options=None):
        self.read_calls.append((url, options))
        if self.error:
            raise self.error
        return self.page

    async def ground(self, statement, deepdive=False):
        self.ground_calls.append((statement, deepdive))
        if self.error:
            raise self.error
        return self.grounding

    async def embed(self, texts):
        return await self.embedder(texts)


# ---------------------------------------------------------------------------
# Factories / fixtures
# ---------------------------------------------------------------------------

def make_doc(title="Doc", url="https://example.com", content="", **extra) -> WebDocument:
    return WebDocument(title=title, url=url, content=content, usage={"tokens": 10}, **extra)


def doc_payload(title="Doc", url="https://example.com", content="hello world") -> dict:
    return {"title": title, "url": url, "content": content, "usage": {"tokens": 3}}


@pytest.fixture
def settings() -> Settings:
    """Settings with a dummy key and no retry delay."""
    return Settings(api_key="test-key", retry=RetryPolicy(max_attempts=2, delay=0.0))


@pytest.fixture
def embedder() -> OneHotEmbedder:
    return OneHotEmbedder()


@pytest.fixture
def grounding() -> GroundingResult:
    return GroundingResult.model_validate({
        "factuality": 0.9,
        "result": True,
        "reason": "Multiple sources agree.",
        "references": [
            {"url": "https://a.example", "keyQuote": "The sky is blue.", "isSupportive": True},
            {"url": "https://b.example", "keyQuote": "Sometimes grey.", "isSupportive": False},
        ],
    })
