"""Tests for the overlapping text chunker."""

import pytest

from src.services.indexing.chunker import CHARS_PER_TOKEN, chunk_text


def test_short_text_is_single_chunk():
    assert chunk_text("Hydraulic press", max_tokens=500, overlap_tokens=50) == [
        "Hydraulic press"
    ]


def test_text_exactly_at_window_is_single_chunk():
    text = "a" * (10 * CHARS_PER_TOKEN)
    assert chunk_text(text, max_tokens=10, overlap_tokens=2) == [text]


def test_empty_text_yields_one_empty_chunk():
    assert chunk_text("", max_tokens=500, overlap_tokens=50) == [""]


def test_long_text_uses_overlapping_windows():
    text = "".join(chr(ord("a") + i % 26) for i in range(2400))

    chunks = chunk_text(text, max_tokens=500, overlap_tokens=50)

    assert len(chunks) == 2
    assert chunks[0] == text[:2000]
    assert chunks[1] == text[1800:]
    assert chunks[0][-200:] == chunks[1][:200]


def test_windows_cover_the_whole_text():
    text = "x" * 95 + "END"

    chunks = chunk_text(text, max_tokens=5, overlap_tokens=1)

    assert all(len(chunk) <= 20 for chunk in chunks)
    assert chunks[-1].endswith("END")
    step = 20 - 4
    assert [len(c) for c in chunks[:-1]] == [20] * (len(chunks) - 1)
    assert len(chunks) == -(-(len(text) - 4) // step)


@pytest.mark.parametrize(
    ("max_tokens", "overlap_tokens"),
    [(0, 0), (-1, 0), (10, -1), (10, 10), (10, 12)],
)
def test_invalid_window_configuration_is_rejected(max_tokens, overlap_tokens):
    with pytest.raises(ValueError):
        chunk_text("some text", max_tokens=max_tokens, overlap_tokens=overlap_tokens)
