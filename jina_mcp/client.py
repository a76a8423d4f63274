"""
Gateway to the Jina AI HTTP APIs.

Public API
----------
  JinaClient.search(query, options)     s.jina.ai  → list[WebDocument]
  JinaClient.read(url, options)         r.jina.ai  → WebDocument
  JinaClient.ground(statement)          g.jina.ai  → GroundingResult
  JinaClient.embed(texts)               embeddings → list of float vectors

Every call is retried according to settings.retry. Responses are validated
with the pydantic models in schemas; a shape mismatch raises
ResponseValidationError and is not retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

import httpx

from .errors import EmptyResponseError, ProviderError
from .retry import call_with_retry
from .schemas import (
    GroundingResponse,
    GroundingResult,
    ReaderResponse,
    SearchResponse,
    WebDocument,
    parse_embeddings,
    parse_response,
)
from .settings import Settings

logger = logging.getLogger(__name__)

ReturnFormat = Literal["markdown", "html", "text", "screenshot", "pageshot"]


# ---------------------------------------------------------------------------
# Request options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchOptions:
    count: int = 5
    retain_images: Literal["none", "all"] = "none"
    with_generated_alt: bool = True
    return_format: ReturnFormat = "markdown"

    def headers(self) -> dict[str, str]:
        return {
            "X-Retain-Images": self.retain_images,
            "X-With-Generated-Alt": _flag(self.with_generated_alt),
            "X-Return-Format": self.return_format,
        }


@dataclass(frozen=True)
class ReaderOptions:
    return_format: Optional[ReturnFormat] = None
    with_links: bool = False
    with_images: bool = False
    with_generated_alt: bool = False
    no_cache: bool = False

    def headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.return_format:
            headers["X-Return-Format"] = self.return_format
        if self.with_links:
            headers["X-With-Links-Summary"] = "true"
        if self.with_images:
            headers["X-With-Images-Summary"] = "true"
        if self.with_generated_alt:
            headers["X-With-Generated-Alt"] = "true"
        if self.no_cache:
            headers["X-No-Cache"] = "true"
        return headers


def _flag(value: bool) -> str:
    return "true" if value else "false"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class JinaClient:
    """
    Thin async wrapper over the Jina APIs.

    A fresh httpx.AsyncClient is opened per request so no connection state
    outlives a tool call. Pass *transport* (e.g. httpx.MockTransport) to
    route requests elsewhere in tests.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _post_once(self, url: str, body: dict, headers: dict[str, str]) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.request_timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Jina API request to {url} failed: {exc}") from exc

        if not resp.is_success:
            raise ProviderError(
                f"Jina API request failed at {url}: {resp.status_code} "
                f"{resp.reason_phrase} - {resp.text}",
                status_code=resp.status_code,
            )
        if not resp.text.strip():
            raise EmptyResponseError(
                f"Jina API request succeeded at {url} but returned an empty response.",
                status_code=resp.status_code,
            )
        try:
            return json.loads(resp.text)
        except json.JSONDecodeError as exc:
            raise ProviderError(
                f"Jina API at {url} returned invalid JSON: {exc}",
                status_code=resp.status_code,
            ) from exc

    async def _post(self, url: str, body: dict, extra_headers: dict[str, str] | None = None) -> Any:
        headers = self._headers(extra_headers)
        return await call_with_retry(
            lambda: self._post_once(url, body, headers),
            self._settings.retry,
            label=url,
        )

    # ── Search / Reader / Grounding ─────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions = SearchOptions()) -> list[WebDocument]:
        payload = await self._post(
            self._settings.search_url,
            {"q": query, "count": options.count},
            options.headers(),
        )
        return parse_response(SearchResponse, payload, "Search").data

    async def read(self, url: str, options: ReaderOptions = ReaderOptions()) -> WebDocument:
        payload = await self._post(self._settings.reader_url, {"url": url}, options.headers())
        return parse_response(ReaderResponse, payload, "Reader").data

    async def ground(self, statement: str, deepdive: bool = False) -> GroundingResult:
        body: dict[str, Any] = {"statement": statement}
        if deepdive:
            body["deepdive"] = True
        payload = await self._post(self._settings.grounding_url, body)
        return parse_response(GroundingResponse, payload, "Grounding").data

    # ── Embeddings ──────────────────────────────────────────────────────────

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Embed *texts* and return one vector per non-blank input, in order.

        Inputs are trimmed and blank ones skipped, so the provider is never
        asked to embed an empty string. No inputs → no request.
        """
        inputs = [t.strip() for t in texts if t and t.strip()]
        if not inputs:
            return []

        size = self._settings.embedding_batch_size
        vectors: list[list[float]] = []
        for i in range(0, len(inputs), size):
            batch = inputs[i:i + size]
            payload = await self._post(
                self._settings.embedding_url,
                {
                    "model": self._settings.embedding_model,
                    "task": "text-matching",
                    "late_chunking": True,
                    "input": batch,
                },
            )
            result = parse_embeddings(payload)
            vectors.extend(result.vectors[:len(batch)])
            if len(result.vectors) != len(batch):
                logger.warning(
                    "Embedding service returned %d vectors for %d inputs",
                    len(result.vectors), len(batch),
                )
                if len(result.vectors) < len(batch):
                    # later batches would no longer line up with their inputs
                    break
        return vectors
