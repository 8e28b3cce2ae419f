"""
Order-insensitive 32-bit signatures over fixed-size windows of word ids.

Both families are multiset functions of the window: permuting the ids inside a
window never changes the digest. All arithmetic wraps modulo 2**32 because the
exact bit pattern is what ends up as the bucket key.
"""

from typing import Callable, Dict, Sequence, Tuple

MASK32 = 0xFFFFFFFF
HASH_BASE = 1779033703
FNV_PRIME = 16777619
FNV_OFFSET_BASIS = 2166136261
WINDOW_SIZE = 5

HashFamily = Callable[[Sequence[int]], int]


class UndersizedSentenceError(ValueError):
    """Raised when a sentence is too short to have head and tail windows."""


def multiplicative_hash(window: Sequence[int]) -> int:
    seed = HASH_BASE
    for value in window:
        seed = (seed * ((HASH_BASE + 2 * value) & MASK32)) & MASK32
    return seed


def fnv_hash(n: int) -> int:
    """
    FNV-1 style hash of a single 32-bit id.

    The octets are taken at 4-bit strides (0, 4, 8, 12), so they overlap; this
    keeps digests identical to previously produced bucket keys.
    """
    h = FNV_OFFSET_BASIS
    for i in range(4):
        octet = 0xFF & (n >> (i * 4))
        h ^= octet
        h = (h * FNV_PRIME) & MASK32
    return h


def fnv_fold(window: Sequence[int]) -> int:
    h = FNV_OFFSET_BASIS
    for value in window:
        h ^= fnv_hash(value)
    return h


HASH_FAMILIES: Dict[str, HashFamily] = {
    "multiplicative": multiplicative_hash,
    "fnv": fnv_fold,
}


def get_hash_family(name: str) -> HashFamily:
    try:
        return HASH_FAMILIES[name]
    except KeyError:
        known = ", ".join(sorted(HASH_FAMILIES))
        raise ValueError(f"Unknown hash family {name!r}; expected one of: {known}") from None


def signature_pair(
    ids: Sequence[int], family: str = "multiplicative", window: int = WINDOW_SIZE
) -> Tuple[int, int]:
    """
    Return the (head, tail) signatures of the first and last ``window`` ids.

    Sequences shorter than ``window`` have no signature and raise
    UndersizedSentenceError; callers skip such sentences from bucketing.
    """
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")
    if len(ids) < window:
        raise UndersizedSentenceError(
            f"sentence has {len(ids)} tokens, at least {window} are required for a signature"
        )
    digest = get_hash_family(family)
    return digest(ids[:window]), digest(ids[len(ids) - window :])
