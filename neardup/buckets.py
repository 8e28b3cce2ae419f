"""Signature buckets and the pairwise scan inside them."""

import logging
from collections import defaultdict
from multiprocessing.pool import ThreadPool
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .dedup import is_near_duplicate

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]
Verifier = Callable[[Sequence[int], Sequence[int]], bool]


def pair_key(a: int, b: int) -> Pair:
    """Canonical form of an unordered pair: smaller identifier first."""
    return (a, b) if a < b else (b, a)


class Bucketer:
    """
    Group sentence identifiers by their head and tail signatures.

    Each assignment appends to two membership lists; when both signatures are
    equal the identifier lands in the same list twice.
    """

    def __init__(self) -> None:
        self.buckets: Dict[int, List[int]] = defaultdict(list)

    def assign(self, identifier: int, head_sig: int, tail_sig: int) -> None:
        self.buckets[head_sig].append(identifier)
        self.buckets[tail_sig].append(identifier)

    def largest_bucket(self) -> int:
        return max((len(members) for members in self.buckets.values()), default=0)

    def members(self) -> List[List[int]]:
        return list(self.buckets.values())

    def __len__(self) -> int:
        return len(self.buckets)


def scan_bucket(
    members: Sequence[int],
    sentences: Mapping[int, Sequence[int]],
    verify: Verifier = is_near_duplicate,
    stats: Optional[Dict[str, int]] = None,
) -> Set[Pair]:
    """
    Verify every pair of distinct identifiers in one bucket and return the confirmed pairs.
    """
    found: Set[Pair] = set()
    comparisons = 0
    size = len(members)
    for i in range(size):
        first = members[i]
        first_ids = sentences[first]
        for j in range(i + 1, size):
            second = members[j]
            if first == second:
                continue
            key = pair_key(first, second)
            if key in found:
                continue
            comparisons += 1
            if verify(first_ids, sentences[second]):
                found.add(key)
    if stats is not None:
        stats["comparisons"] = stats.get("comparisons", 0) + comparisons
    return found


def _chunk(items: List[List[int]], parts: int) -> List[List[List[int]]]:
    # Round-robin keeps large and small buckets spread over the workers.
    return [items[k::parts] for k in range(parts) if items[k::parts]]


def scan_buckets(
    buckets: Iterable[Sequence[int]],
    sentences: Mapping[int, Sequence[int]],
    workers: int = 1,
    verify: Verifier = is_near_duplicate,
    stats: Optional[Dict[str, int]] = None,
    on_progress: Optional[Callable[[int], None]] = None,
) -> Set[Pair]:
    """
    Scan all buckets and merge their confirmed pairs.

    With ``workers > 1`` buckets are split across a thread pool; each worker
    fills its own set and the sets are merged afterwards. Buckets and the
    sentence table must be complete before calling this. ``on_progress`` is
    called with the number of buckets finished since the previous call.
    """
    bucket_list = [list(members) for members in buckets]
    pairs: Set[Pair] = set()
    if workers <= 1 or len(bucket_list) < 2:
        for members in bucket_list:
            pairs |= scan_bucket(members, sentences, verify, stats)
            if on_progress is not None:
                on_progress(1)
        return pairs

    def _scan_chunk(chunk: List[List[int]]) -> Tuple[Set[Pair], int, int]:
        local: Set[Pair] = set()
        local_stats: Dict[str, int] = {}
        for members in chunk:
            local |= scan_bucket(members, sentences, verify, local_stats)
        return local, local_stats.get("comparisons", 0), len(chunk)

    chunks = _chunk(bucket_list, workers)
    logger.debug("Scanning %d buckets on %d threads", len(bucket_list), len(chunks))
    with ThreadPool(len(chunks)) as pool:
        for partial, comparisons, scanned in pool.imap_unordered(_scan_chunk, chunks):
            pairs |= partial
            if stats is not None:
                stats["comparisons"] = stats.get("comparisons", 0) + comparisons
            if on_progress is not None:
                on_progress(scanned)
    return pairs
