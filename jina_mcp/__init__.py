"""Jina MCP Tools - web search, fact-checking and page reading with relevance re-ranking."""

from jina_mcp.chunker import chunk_text
from jina_mcp.client import JinaClient, ReaderOptions, SearchOptions
from jina_mcp.ranker import RelevanceRanker, ScoredChunk
from jina_mcp.server import build_server
from jina_mcp.settings import Settings, load_settings
from jina_mcp.similarity import cosine_similarity

__all__ = [
    "JinaClient",
    "ReaderOptions",
    "RelevanceRanker",
    "ScoredChunk",
    "SearchOptions",
    "Settings",
    "build_server",
    "chunk_text",
    "cosine_similarity",
    "load_settings",
]
