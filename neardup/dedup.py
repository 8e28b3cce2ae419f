"""Word-level near-duplicate checks over encoded sentences."""

from typing import Hashable, Iterable, Sequence


def identical(a: Sequence[int], b: Sequence[int]) -> bool:
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def _same_length_within_one(a: Sequence[int], b: Sequence[int]) -> bool:
    """
    Walk both sequences from the end; after the first mismatch the remaining
    prefixes must be identical for a single substitution to explain the gap.
    """
    end = len(a)
    while end > 0:
        end -= 1
        if a[end] != b[end]:
            return identical(a[:end], b[:end])
    return True


def _different_length_within_one(longer: Sequence[int], shorter: Sequence[int]) -> bool:
    """
    ``longer`` has exactly one more element than ``shorter`` in the normal case.

    Walk both from the end while they agree. On the first mismatch one extra
    element of ``longer`` is skipped; it must equal the mismatched element of
    ``shorter`` and the prefixes left over must be identical.
    """
    i = len(longer)
    j = len(shorter)
    while j > 0:
        i -= 1
        j -= 1
        if longer[i] != shorter[j]:
            i -= 1
            return longer[i] == shorter[j] and identical(longer[:i], shorter[:j])
    return i == 1


def is_near_duplicate(a: Sequence[int], b: Sequence[int]) -> bool:
    """
    True iff the word-level edit distance between ``a`` and ``b`` is at most one.

    Runs in time linear in the sequence length without a distance matrix.
    Length gaps above one always come out false.
    """
    if len(a) > len(b):
        return _different_length_within_one(a, b)
    if len(b) > len(a):
        return _different_length_within_one(b, a)
    return _same_length_within_one(a, b)


def jaccard(a: Iterable[Hashable], b: Iterable[Hashable]) -> float:
    """Jaccard similarity of the token sets of ``a`` and ``b``; 0.0 when both are empty."""
    set_a = set(a)
    set_b = set(b)
    union = len(set_a | set_b)
    if union == 0:
        return 0.0
    return len(set_a & set_b) / union

