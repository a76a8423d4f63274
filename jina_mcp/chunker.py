"""
Word-window chunking.

Public API
----------
  chunk_text(text, chunk_size)   split text into <= chunk_size-word chunks
"""

from __future__ import annotations

from .settings import CHUNK_MAX_WORDS


def chunk_text(text: str, chunk_size: int = CHUNK_MAX_WORDS) -> list[str]:
    """
    Split *text* on runs of whitespace and regroup the words into consecutive,
    non-overlapping windows of at most *chunk_size* words.

    Punctuation stays attached to its word ("beta." is one word). Empty or
    whitespace-only text yields an empty list.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    words = text.split()
    return [
        " ".join(words[i:i + chunk_size])
        for i in range(0, len(words), chunk_size)
    ]
