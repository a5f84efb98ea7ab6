"""
Test suite for the whitespace-token chunker.

System role: Verification of chunk boundaries, overlap and defaults
"""

import math

import pytest

from docagents.core.chunker import chunk_text


def _words(n: int) -> str:
    return " ".join(f"w{i}" for i in range(n))


class TestChunkText:
    """Test suite for chunk_text."""

    def test_empty_text_returns_no_chunks(self) -> None:
        assert chunk_text("") == []
        assert chunk_text("   \n\t ") == []

    def test_ten_words_with_overlap_one(self) -> None:
        """Test max_tokens=4 overlap=1 yields three windows with stride three."""
        text = "one two three four five six seven eight nine ten"

        chunks = chunk_text(text, max_tokens=4, overlap=1)

        assert [c.text for c in chunks] == [
            "one two three four",
            "four five six seven",
            "seven eight nine ten",
        ]
        assert [c.index for c in chunks] == [0, 1, 2]
        assert chunks[0].token_count == 4
        assert all(a.text != b.text for a, b in zip(chunks, chunks[1:]))

    def test_final_window_is_clipped(self) -> None:
        chunks = chunk_text(_words(7), max_tokens=4, overlap=0)

        assert [c.token_count for c in chunks] == [4, 3]
        assert chunks[-1].text == "w4 w5 w6"

    def test_short_text_is_single_chunk(self) -> None:
        chunks = chunk_text("alpha beta", max_tokens=400, overlap=80)

        assert len(chunks) == 1
        assert chunks[0].token_count == 2

    def test_whitespace_is_normalized_to_single_spaces(self) -> None:
        chunks = chunk_text("a\n\nb\tc   d", max_tokens=10)

        assert chunks[0].text == "a b c d"

    @pytest.mark.parametrize(
        "n,max_tokens,overlap",
        [(401, 400, 80), (1000, 400, 80), (25, 5, 2), (12, 4, 0), (100, 10, 9)],
    )
    def test_chunk_count_matches_stride_formula(self, n, max_tokens, overlap) -> None:
        chunks = chunk_text(_words(n), max_tokens=max_tokens, overlap=overlap)

        expected = math.ceil((n - overlap) / (max_tokens - overlap))
        assert len(chunks) == expected

    def test_chunks_reconstruct_original_tokens(self) -> None:
        """Test dropping the overlap prefix of every later chunk rebuilds the text."""
        tokens = _words(53).split()
        overlap = 3

        chunks = chunk_text(" ".join(tokens), max_tokens=10, overlap=overlap)

        stride = 10 - overlap
        rebuilt = chunks[0].text.split()
        for chunk in chunks[1:]:
            start = chunk.index * stride
            rebuilt.extend(chunk.text.split()[len(rebuilt) - start:])
        assert rebuilt == tokens

    def test_non_positive_max_tokens_defaults_to_400(self) -> None:
        chunks = chunk_text(_words(500), max_tokens=0)

        assert chunks[0].token_count == 400

    def test_default_windows_are_400_tokens_with_80_overlap(self) -> None:
        chunks = chunk_text(_words(500))

        assert [c.token_count for c in chunks] == [400, 180]
        assert chunks[1].text.split()[0] == "w320"

    def test_negative_overlap_treated_as_zero(self) -> None:
        chunks = chunk_text(_words(8), max_tokens=4, overlap=-2)

        assert [c.text for c in chunks] == ["w0 w1 w2 w3", "w4 w5 w6 w7"]

    def test_overlap_not_smaller_than_max_uses_max_as_stride(self) -> None:
        chunks = chunk_text(_words(8), max_tokens=4, overlap=4)

        assert [c.text for c in chunks] == ["w0 w1 w2 w3", "w4 w5 w6 w7"]

    def test_chunking_is_deterministic(self) -> None:
        text = _words(97)

        assert chunk_text(text, 10, 2) == chunk_text(text, 10, 2)
