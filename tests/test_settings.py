"""Unit tests for settings.py — env parsing and startup configuration errors."""

from __future__ import annotations

import dataclasses

import pytest

from jina_mcp.errors import ConfigurationError
from jina_mcp.settings import CHUNK_MAX_WORDS, TOP_K, Settings, load_settings


class TestLoadSettings:
    def test_missing_key_is_fatal(self):
        with pytest.raises(ConfigurationError, match="JINA_API_KEY"):
            load_settings({})

    def test_blank_key_is_fatal(self):
        with pytest.raises(ConfigurationError):
            load_settings({"JINA_API_KEY": "   "})

    def test_defaults(self):
        s = load_settings({"JINA_API_KEY": "k"})
        assert s.api_key == "k"
        assert s.chunk_size == CHUNK_MAX_WORDS == 200
        assert s.top_k == TOP_K == 5
        assert s.embedding_model == "jina-embeddings-v3"
        assert s.retry.max_attempts == 2
        assert s.transport == "stdio"

    def test_overrides(self):
        s = load_settings({
            "JINA_API_KEY": "k",
            "JINA_CHUNK_SIZE": "50",
            "JINA_TOP_K": "3",
            "JINA_MAX_ATTEMPTS": "4",
            "JINA_RETRY_DELAY": "0",
            "JINA_REQUEST_TIMEOUT": "12.5",
            "JINA_EMBEDDING_URL": "http://localhost/embed",
            "MCP_TRANSPORT": "sse",
            "MCP_PORT": "9001",
            "LOG_LEVEL": "debug",
        })
        assert s.chunk_size == 50
        assert s.top_k == 3
        assert s.retry.max_attempts == 4
        assert s.retry.delay == 0.0
        assert s.request_timeout == 12.5
        assert s.embedding_url == "http://localhost/embed"
        assert s.transport == "sse"
        assert s.port == 9001
        assert s.log_level == "DEBUG"

    @pytest.mark.parametrize("name,value", [
        ("JINA_CHUNK_SIZE", "abc"),
        ("JINA_CHUNK_SIZE", "0"),
        ("JINA_TOP_K", "-1"),
        ("JINA_RETRY_DELAY", "soon"),
        ("JINA_REQUEST_TIMEOUT", "-5"),
        ("MCP_TRANSPORT", "carrier-pigeon"),
        ("LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_values(self, name, value):
        with pytest.raises(ConfigurationError, match=name):
            load_settings({"JINA_API_KEY": "k", name: value})

    def test_reads_process_env_by_default(self, monkeypatch):
        monkeypatch.setenv("JINA_API_KEY", "from-env")
        monkeypatch.setenv("JINA_TOP_K", "7")
        s = load_settings()
        assert s.api_key == "from-env"
        assert s.top_k == 7


class TestSettings:
    def test_frozen(self):
        s = Settings(api_key="k")
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.api_key = "other"

    def test_repr_hides_key(self):
        assert "secret" not in repr(Settings(api_key="secret"))
