"""
Whitespace-token chunker.

Splits text into overlapping fixed-size token windows. Pure and
deterministic: identical input always yields identical chunks.

Dependencies: docagents.models
System role: Parse stage text splitting
"""

from docagents.models.document import Chunk

DEFAULT_MAX_TOKENS = 400
DEFAULT_OVERLAP = 80


def chunk_text(
    text: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    overlap: int = DEFAULT_OVERLAP,
) -> list[Chunk]:
    """
    Split text into overlapping token windows.

    Tokens are maximal runs of non-whitespace. Window i covers tokens
    [i * stride, i * stride + max_tokens), clipped at the end; the loop
    stops once a window reaches the last token.

    Args:
        text: Source text
        max_tokens: Tokens per window; values <= 0 fall back to 400
        overlap: Tokens shared by adjacent windows; negative values become 0

    Returns:
        list[Chunk]: Chunks with index, text and token_count set
    """
    if max_tokens <= 0:
        max_tokens = DEFAULT_MAX_TOKENS
    if overlap < 0:
        overlap = 0

    tokens = text.split()
    if not tokens:
        return []

    stride = max_tokens - overlap
    if stride <= 0:
        stride = max_tokens

    chunks: list[Chunk] = []
    start = 0
    while start < len(tokens):
        end = min(start + max_tokens, len(tokens))
        chunks.append(
            Chunk(
                index=len(chunks),
                text=" ".join(tokens[start:end]),
                token_count=end - start,
            )
        )
        if end == len(tokens):
            break
        start += stride

    return chunks
