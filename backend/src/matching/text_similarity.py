"""Keyword overlap similarity for free-text fields."""

from typing import Optional, Set

# Tokens of this length or shorter are ignored (cheap stop-word suppression)
MAX_IGNORED_TOKEN_LENGTH = 3


def tokenize(text: Optional[str]) -> Set[str]:
    """Split lower-cased text on whitespace, keeping tokens longer than 3 chars."""
    if not text:
        return set()
    return {token for token in text.lower().split() if len(token) > MAX_IGNORED_TOKEN_LENGTH}


def similarity(text_a: Optional[str], text_b: Optional[str]) -> float:
    """Overlap coefficient of two texts: |A ∩ B| / max(|A|, |B|).

    Symmetric, order-independent and always within [0.0, 1.0]. Returns 0.0
    when neither text has a qualifying token.

    Args:
        text_a: First text
        text_b: Second text

    Returns:
        Similarity score (0.0-1.0)
    """
    tokens_a = tokenize(text_a)
    tokens_b = tokenize(text_b)

    total = max(len(tokens_a), len(tokens_b))
    if total == 0:
        return 0.0

    return len(tokens_a & tokens_b) / total
