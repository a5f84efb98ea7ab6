"""
Answer confidence and source preview helpers.

Dependencies: math (stdlib)
System role: Query response scoring
"""

import math
from collections.abc import Iterable, Sequence

PREVIEW_ELLIPSIS = "..."


def context_quality(scores: Sequence[float]) -> float:
    """Mean retrieval similarity, 0.0 when nothing was retrieved."""
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def generation_confidence(logprobs: Iterable[float] | None) -> float:
    """
    Mean per-token probability of the generated answer.

    Returns 1.0 when the provider returned no log-probabilities, so that
    the blended confidence degrades to context quality alone.
    """
    values = list(logprobs or [])
    if not values:
        return 1.0
    return sum(math.exp(lp) for lp in values) / len(values)


def blend_confidence(quality: float, generation: float) -> float:
    """Overall confidence: context quality scaled by generation confidence."""
    return quality * generation


def truncate_preview(text: str, max_chars: int = 150) -> str:
    """
    Cut text at the last space before max_chars and append an ellipsis.

    Text within the budget is returned unchanged. A leading run without a
    space is cut at max_chars.
    """
    if len(text) <= max_chars:
        return text
    idx = text.rfind(" ", 0, max_chars)
    if idx > 0:
        return text[:idx] + PREVIEW_ELLIPSIS
    return text[:max_chars] + PREVIEW_ELLIPSIS
