"""
Tool handlers behind the MCP server.

Each handler calls the Jina gateway, re-ranks text where relevant, formats a
plain-text answer and wraps it in a validated ToolResult envelope. Provider
and validation failures never escape: they become a "<Tool> failed: ..."
message inside a normal envelope.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .client import JinaClient, ReaderOptions, SearchOptions
from .errors import JinaAPIError
from .ranker import RelevanceRanker
from .schemas import GroundingResult, ToolResult, WebDocument
from .settings import Settings

logger = logging.getLogger(__name__)

NO_CONTENT = "No content extracted."
NO_RESULTS = "No search results found."
NO_REFERENCES = "No specific references provided."


class Gateway(Protocol):
    async def search(self, query: str, options: SearchOptions = ...) -> list[WebDocument]: ...
    async def read(self, url: str, options: ReaderOptions = ...) -> WebDocument: ...
    async def ground(self, statement: str, deepdive: bool = ...) -> GroundingResult: ...
    async def embed(self, texts: list[str]) -> list[list[float]]: ...


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_search_result(index: int, doc: WebDocument, relevant: str) -> str:
    return (
        f"Result {index}:\n"
        f"Title: {doc.title}\n"
        f"URL: {doc.url}\n"
        f"Relevant Content:\n"
        f"{relevant or NO_CONTENT}\n"
        f"---"
    )


def format_grounding(statement: str, grounding: GroundingResult) -> str:
    if grounding.references:
        references = "\n".join(
            f"Reference {i}:\n"
            f"  URL: {ref.url}\n"
            f"  Quote: \"{ref.keyQuote}\"\n"
            f"  Supportive: {ref.isSupportive}"
            for i, ref in enumerate(grounding.references, start=1)
        )
    else:
        references = NO_REFERENCES
    verdict = "Likely True" if grounding.result else "Likely False"
    return (
        f"Statement: \"{statement}\"\n"
        f"Result: {verdict}\n"
        f"Factuality: {grounding.factuality:.2f}\n"
        f"Reason: {grounding.reason or 'No reason provided.'}\n\n"
        f"References:\n{references}"
    )


def format_page(doc: WebDocument, url: str, relevant: str, with_links: bool = False) -> str:
    text = (
        f"Title: {doc.title or 'N/A'}\n"
        f"URL: {url}\n\n"
        f"Relevant Content:\n{relevant or NO_CONTENT}"
    )
    if with_links and doc.links:
        links = "\n".join(f"- {label}: {href}" for label, href in doc.links.items())
        text += f"\n\nLinks:\n{links}"
    return text


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class JinaTools:
    """The three tools, bound to one gateway and one ranker."""

    def __init__(self, settings: Settings, gateway: Gateway | None = None):
        self._settings = settings
        self._gateway = gateway if gateway is not None else JinaClient(settings)
        self._ranker = RelevanceRanker(
            self._gateway.embed,
            chunk_size=settings.chunk_size,
            top_k=settings.top_k,
            max_concurrency=settings.max_concurrency,
        )

    async def search(self, query: str, count: int = 5) -> ToolResult:
        logger.info("Executing search tool with query: %r", query)
        try:
            if not query or not query.strip():
                raise ValueError("query must not be empty")
            docs = await self._gateway.search(query, SearchOptions(count=max(1, count)))
            if not docs:
                return ToolResult.from_text(NO_RESULTS)
            ranked = await self._ranker.rank_documents(query, docs)
            text = "\n\n".join(
                format_search_result(i, doc, relevant)
                for i, (doc, relevant) in enumerate(zip(docs, ranked), start=1)
            )
            return ToolResult.from_text(text)
        except (JinaAPIError, ValueError) as exc:
            logger.warning("Search failed for %r", query, exc_info=True)
            return ToolResult.from_text(f"Search failed: {exc}")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error in search tool")
            return ToolResult.from_text(f"Search failed: {exc}")

    async def fact_check(self, statement: str, deepdive: bool = False) -> ToolResult:
        logger.info("Executing fact-check tool with statement: %r", statement)
        try:
            if not statement or not statement.strip():
                raise ValueError("statement must not be empty")
            grounding = await self._gateway.ground(statement, deepdive=deepdive)
            return ToolResult.from_text(format_grounding(statement, grounding))
        except (JinaAPIError, ValueError) as exc:
            logger.warning("Fact check failed for %r", statement, exc_info=True)
            return ToolResult.from_text(f"Fact check failed: {exc}")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error in fact-check tool")
            return ToolResult.from_text(f"Fact check failed: {exc}")

    async def read_webpage(
        self,
        url: str,
        query: str,
        with_links: bool = False,
        no_cache: bool = False,
    ) -> ToolResult:
        logger.info("Executing read-webpage tool for URL: %s", url)
        try:
            if not url or not url.strip():
                raise ValueError("url must not be empty")
            doc = await self._gateway.read(
                url, ReaderOptions(with_links=with_links, no_cache=no_cache)
            )
            relevant = await self._ranker.rank(
                query, doc.content, fallback_query=doc.title or url,
            )
            return ToolResult.from_text(format_page(doc, url, relevant, with_links))
        except (JinaAPIError, ValueError) as exc:
            logger.warning("Reading webpage failed for %s", url, exc_info=True)
            return ToolResult.from_text(f"Reading webpage failed: {exc}")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error in read-webpage tool")
            return ToolResult.from_text(f"Reading webpage failed: {exc}")
