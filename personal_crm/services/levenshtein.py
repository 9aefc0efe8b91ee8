"""Levenshtein edit distance."""
from __future__ import annotations


def distance(a: str, b: str) -> int:
    """Return the number of single-character edits needed to turn ``a`` into ``b``.

    Only two rows of the dynamic-programming table are kept, each sized by the
    shorter string.
    """

    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)
    for i, char_a in enumerate(a, start=1):
        current[0] = i
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous, current = current, previous
    return previous[len(b)]
