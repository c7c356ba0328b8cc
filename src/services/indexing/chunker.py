"""Overlapping fixed-size text chunking for the document index."""

from __future__ import annotations

CHARS_PER_TOKEN = 4


def chunk_text(text: str, max_tokens: int = 500, overlap_tokens: int = 50) -> list[str]:
    """Split ``text`` into windows of ``max_tokens`` approximate tokens.

    Each window after the first starts ``overlap_tokens`` before the end of the
    previous one, so neighbouring chunks share context. Tokens are approximated
    as four characters. Always returns at least one chunk.

    Raises:
        ValueError: if the window would not advance, i.e. when
            ``overlap_tokens >= max_tokens`` or either size is out of range.
    """

    if max_tokens <= 0:
        raise ValueError("max_tokens must be positive")
    if overlap_tokens < 0:
        raise ValueError("overlap_tokens must not be negative")
    if overlap_tokens >= max_tokens:
        raise ValueError("overlap_tokens must be smaller than max_tokens")

    max_chars = max_tokens * CHARS_PER_TOKEN
    overlap_chars = overlap_tokens * CHARS_PER_TOKEN
    step = max_chars - overlap_chars

    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    start = 0
    while True:
        end = min(start + max_chars, len(text))
        chunks.append(text[start:end])
        if end >= len(text):
            break
        start += step
    return chunks
