"""
Test suite for confidence blending and preview truncation.

System role: Verification of query response scoring helpers
"""

import math

import pytest

from docagents.core.confidence import (
    PREVIEW_ELLIPSIS,
    blend_confidence,
    context_quality,
    generation_confidence,
    truncate_preview,
)


class TestConfidence:
    """Test suite for confidence helpers."""

    def test_context_quality_is_mean_score(self) -> None:
        assert context_quality([0.9, 0.7, 0.5]) == pytest.approx(0.7)

    def test_context_quality_of_no_results_is_zero(self) -> None:
        assert context_quality([]) == 0.0

    def test_zero_context_quality_gives_zero_confidence(self) -> None:
        assert blend_confidence(0.0, generation_confidence([-0.01, -0.2])) == 0.0

    def test_missing_logprobs_mean_full_generation_confidence(self) -> None:
        assert generation_confidence(None) == 1.0
        assert generation_confidence([]) == 1.0
        assert blend_confidence(0.8, generation_confidence(None)) == pytest.approx(0.8)

    def test_generation_confidence_is_mean_token_probability(self) -> None:
        logprobs = [math.log(0.5), math.log(1.0)]

        assert generation_confidence(logprobs) == pytest.approx(0.75)


class TestTruncatePreview:
    """Test suite for word-boundary truncation."""

    def test_short_text_is_unchanged(self) -> None:
        assert truncate_preview("short text", 150) == "short text"

    def test_long_text_cut_at_last_space_before_cap(self) -> None:
        text = "word " * 60

        preview = truncate_preview(text, 150)

        assert preview.endswith(PREVIEW_ELLIPSIS)
        body = preview[: -len(PREVIEW_ELLIPSIS)]
        assert len(preview) <= 150 + len(PREVIEW_ELLIPSIS)
        assert text.startswith(body)
        assert text[len(body)] == " "
        assert all(token == "word" for token in body.split())

    def test_never_splits_a_word(self) -> None:
        text = "alpha beta gamma delta"

        assert truncate_preview(text, 13) == "alpha beta..."

    def test_text_without_spaces_is_cut_at_cap(self) -> None:
        assert truncate_preview("x" * 200, 150) == "x" * 150 + PREVIEW_ELLIPSIS
