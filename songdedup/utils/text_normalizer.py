"""Text normalization for duplicate comparison.

Exact and fuzzy matching both compare normalized text, so formatting
differences (case, punctuation, repeated spaces) never hide a duplicate.
"""

import re
from typing import Optional

# Anything that is not a letter, digit or whitespace. Underscore is part of
# \w but counts as punctuation here.
_NON_ALNUM_PATTERN = re.compile(r"[^\w\s]|_")


def normalize(text: Optional[str]) -> str:
    """Normalize text for comparison.

    Lower-cases, strips punctuation, collapses whitespace runs to a single
    space and trims. Unicode letters and digits are preserved.

    Args:
        text: Original text (None is treated as empty).

    Returns:
        Normalized text, "" for empty or whitespace-only input.

    Example:
        >>> normalize("  Mountain   Song! ")
        'mountain song'
    """
    if not text:
        return ""

    # Lowercase
    normalized = text.lower()
    # Remove punctuation
    normalized = _NON_ALNUM_PATTERN.sub("", normalized)
    # Collapse whitespace and trim
    return " ".join(normalized.split())


def is_blank(text: Optional[str]) -> bool:
    """True when text is None, empty or whitespace-only."""
    return not text or not text.strip()
