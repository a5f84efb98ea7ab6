"""
Backoff policy shared by queue redelivery and client-side publishing.

Dependencies: None
System role: Retry delay computation
"""


def exponential_backoff(attempt: int, base: float) -> float:
    """
    Delay before the next try: base * 2**attempt seconds.

    Args:
        attempt: Number of attempts already made (0-based)
        base: Base delay in seconds

    Returns:
        float: Delay in seconds
    """
    return base * (2 ** attempt)
