"""Exception types shared by the gateway, ranker and tools."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Startup configuration is missing or invalid. Fatal: the server does not start."""


class JinaAPIError(Exception):
    """A call to a Jina API did not produce a usable result."""


class ProviderError(JinaAPIError):
    """Network failure, non-2xx status or undecodable body. Worth retrying."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(ProviderError):
    """The API answered 200 with an empty body."""


class ResponseValidationError(JinaAPIError):
    """The decoded payload does not match the expected shape. Never retried."""
