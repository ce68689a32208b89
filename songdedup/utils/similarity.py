"""Edit-distance similarity scoring.

similarity() is the ratio shown as "% similar" next to two songs and the
predicate the fuzzy clusterers compare against a threshold.

Complexity: levenshtein_distance is the classic dynamic-programming
algorithm, O(len(a) * len(b)) time and O(min(len(a), len(b))) memory.
Clustering calls similarity() O(n^2) times for n records, so a full fuzzy
scan costs O(n^2 * L^2) for strings of length L. That is fine for
hundreds of songs and slow past a few thousand.
"""


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning a into b.

    Insertions, deletions and substitutions each cost 1.

    Args:
        a: First string.
        b: Second string.

    Returns:
        Edit distance (0 when the strings are equal).
    """
    if a == b:
        return 0
    # Keep the rolling rows as short as possible
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for a_idx, a_ch in enumerate(a, start=1):
        current = [a_idx]
        for b_idx, b_ch in enumerate(b, start=1):
            insert_cost = current[b_idx - 1] + 1
            delete_cost = previous[b_idx] + 1
            replace_cost = previous[b_idx - 1] + (a_ch != b_ch)
            current.append(min(insert_cost, delete_cost, replace_cost))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Similarity ratio of two strings in [0.0, 1.0].

    Defined as (max_len - distance) / max_len. Two empty strings are
    identical (1.0); an empty string against a non-empty one scores 0.0.
    The result is symmetric. Inputs are compared as given, so callers
    normalize first.

    Args:
        a: First string.
        b: Second string.

    Returns:
        1.0 for identical strings, 0.0 for nothing in common.
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0

    distance = levenshtein_distance(a, b)
    return (max_len - distance) / max_len
