"""
All tuneable constants for jina-mcp-tools.
Override any value via the corresponding environment variable.

Settings are read once, at startup, by load_settings(). Everything else
receives the resulting Settings object explicitly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from .errors import ConfigurationError
from .retry import RetryPolicy

# ---------------------------------------------------------------------------
# Jina endpoints
# ---------------------------------------------------------------------------

SEARCH_URL    = "https://s.jina.ai/"
READER_URL    = "https://r.jina.ai/"
GROUNDING_URL = "https://g.jina.ai/"
EMBEDDING_URL = "https://api.jina.ai/v1/embeddings"

EMBEDDING_MODEL = "jina-embeddings-v3"

# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

CHUNK_MAX_WORDS      = 200   # words per chunk
TOP_K                = 5     # chunks returned per document
MAX_CONCURRENCY      = 4     # documents ranked in parallel per search
EMBEDDING_BATCH_SIZE = 128   # texts per embeddings request

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

REQUEST_TIMEOUT = 60.0   # seconds; grounding calls are slow
MAX_ATTEMPTS    = 2
RETRY_DELAY     = 0.5

TRANSPORTS = ("stdio", "sse", "streamable-http")


@dataclass(frozen=True)
class Settings:
    api_key: str
    search_url: str = SEARCH_URL
    reader_url: str = READER_URL
    grounding_url: str = GROUNDING_URL
    embedding_url: str = EMBEDDING_URL
    embedding_model: str = EMBEDDING_MODEL
    chunk_size: int = CHUNK_MAX_WORDS
    top_k: int = TOP_K
    max_concurrency: int = MAX_CONCURRENCY
    embedding_batch_size: int = EMBEDDING_BATCH_SIZE
    request_timeout: float = REQUEST_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # keep the key out of logs and tracebacks
        return f"Settings(api_key='***', search_url={self.search_url!r}, transport={self.transport!r})"


def _int(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from *environ* (defaults to os.environ).

    Raises ConfigurationError when JINA_API_KEY is missing or a numeric
    override, MCP_TRANSPORT or LOG_LEVEL is invalid.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("JINA_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError(
            "JINA_API_KEY environment variable is not set. "
            "Get a free key at https://jina.ai/?sui=apikey"
        )

    transport = env.get("MCP_TRANSPORT", "stdio")
    if transport not in TRANSPORTS:
        raise ConfigurationError(
            f"MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}"
        )

    log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    return Settings(
        api_key=api_key,
        search_url=env.get("JINA_SEARCH_URL", SEARCH_URL),
        reader_url=env.get("JINA_READER_URL", READER_URL),
        grounding_url=env.get("JINA_GROUNDING_URL", GROUNDING_URL),
        embedding_url=env.get("JINA_EMBEDDING_URL", EMBEDDING_URL),
        embedding_model=env.get("JINA_EMBEDDING_MODEL", EMBEDDING_MODEL),
        chunk_size=_int(env, "JINA_CHUNK_SIZE", CHUNK_MAX_WORDS),
        top_k=_int(env, "JINA_TOP_K", TOP_K),
        max_concurrency=_int(env, "JINA_MAX_CONCURRENCY", MAX_CONCURRENCY),
        embedding_batch_size=_int(env, "JINA_EMBEDDING_BATCH_SIZE", EMBEDDING_BATCH_SIZE),
        request_timeout=_float(env, "JINA_REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        retry=RetryPolicy(
            max_attempts=_int(env, "JINA_MAX_ATTEMPTS", MAX_ATTEMPTS),
            delay=_float(env, "JINA_RETRY_DELAY", RETRY_DELAY),
        ),
        transport=transport,
        host=env.get("MCP_HOST", "127.0.0.1"),
        port=_int(env, "MCP_PORT", 8000),
        log_level=log_level,
    )
