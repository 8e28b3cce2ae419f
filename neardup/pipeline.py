"""
Batch near-duplicate search over identifier-prefixed lines.

A pipeline instance owns every piece of run state (vocabulary, sentence table,
buckets) so independent runs never share anything. Bucket construction must be
finished before ``find_pairs`` scans the buckets.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Sequence, Set, Tuple

from .buckets import Bucketer, Pair, scan_buckets
from .config import DEFAULT_CONFIG, DedupConfig
from .processing import MalformedLineError, process_line
from .signatures import UndersizedSentenceError, get_hash_family, signature_pair
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)


class DuplicateIdentifierError(ValueError):
    """Raised when two input lines carry the same identifier."""


@dataclass(frozen=True)
class Sentence:
    identifier: int
    ids: Tuple[int, ...]


@dataclass
class DedupResult:
    """Confirmed pairs plus counters for reporting."""

    pairs: Set[Pair]
    bucket_count: int
    sentence_count: int
    stats: Counter = field(default_factory=Counter)

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    def sorted_pairs(self) -> list:
        return sorted(self.pairs)


class NearDuplicatePipeline:
    def __init__(self, cfg: DedupConfig = DEFAULT_CONFIG) -> None:
        # Fail on an unknown family before any line is read.
        get_hash_family(cfg.hash_family)
        self.cfg = cfg
        self.vocabulary = Vocabulary()
        self.sentences: Dict[int, Tuple[int, ...]] = {}
        self.bucketer = Bucketer()
        self.stats: Counter = Counter()

    def add(self, identifier: int, tokens: Sequence[str]) -> Sentence:
        """
        Encode a sentence and place it in its head and tail buckets.

        Sentences shorter than the signature window are kept in the sentence
        table but never bucketed, so they cannot be matched.
        """
        if identifier in self.sentences:
            raise DuplicateIdentifierError(f"identifier {identifier} appears more than once")
        ids = self.vocabulary.encode_sequence(tokens)
        self.sentences[identifier] = ids
        self.stats["sentences_total"] += 1
        try:
            head_sig, tail_sig = signature_pair(ids, self.cfg.hash_family, self.cfg.window_size)
        except UndersizedSentenceError:
            self.stats["skipped_short"] += 1
            logger.debug("Skipping sentence %d with %d tokens", identifier, len(ids))
        else:
            self.bucketer.assign(identifier, head_sig, tail_sig)
            self.stats["sentences_bucketed"] += 1
        return Sentence(identifier=identifier, ids=ids)

    def add_line(self, line: str) -> Optional[Sentence]:
        self.stats["lines_total"] += 1
        try:
            parsed = process_line(line)
        except MalformedLineError:
            if not self.cfg.skip_malformed:
                raise
            self.stats["skipped_malformed"] += 1
            logger.warning("Skipping malformed line: %.80s", line)
            return None
        return self.add(parsed.identifier, parsed.tokens)

    def add_lines(self, lines: Iterable[str], on_line: Optional[Callable[[], None]] = None) -> int:
        added = 0
        for line in lines:
            if self.add_line(line) is not None:
                added += 1
            if on_line is not None:
                on_line()
        logger.info(
            "Built %d buckets from %d sentences (largest bucket: %d)",
            len(self.bucketer),
            len(self.sentences),
            self.bucketer.largest_bucket(),
        )
        return added

    def find_pairs(self, on_progress: Optional[Callable[[int], None]] = None) -> DedupResult:
        pairs = scan_buckets(
            self.bucketer.members(),
            self.sentences,
            workers=self.cfg.workers,
            stats=self.stats,
            on_progress=on_progress,
        )
        self.stats["pairs_found"] = len(pairs)
        self.stats["buckets"] = len(self.bucketer)
        self.stats["vocabulary_size"] = len(self.vocabulary)
        return DedupResult(
            pairs=pairs,
            bucket_count=len(self.bucketer),
            sentence_count=len(self.sentences),
            stats=self.stats,
        )

    def run(self, lines: Iterable[str]) -> DedupResult:
        self.add_lines(lines)
        return self.find_pairs()


def find_near_duplicates(
    sentences: Iterable[Tuple[int, Sequence[str]]], cfg: DedupConfig = DEFAULT_CONFIG
) -> DedupResult:
    """Convenience wrapper for already-split ``(identifier, tokens)`` input."""
    pipeline = NearDuplicatePipeline(cfg)
    for identifier, tokens in sentences:
        pipeline.add(identifier, tokens)
    return pipeline.find_pairs()
