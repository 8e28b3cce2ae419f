"""Run-scoped word to integer id mapping."""

from typing import Dict, Iterable, Mapping, Optional, Tuple


class Vocabulary:
    """
    Assign integer ids to words in order of first appearance.

    ``next_id`` holds the highest id handed out so far: the first word gets 0
    and leaves it at 0, every later unseen word gets ``next_id + 1``.
    """

    def __init__(self) -> None:
        self._ids: Dict[str, int] = {}
        self.next_id = 0

    @classmethod
    def from_mapping(cls, word_map: Mapping[str, int], next_id: int) -> "Vocabulary":
        """Resume from an existing mapping whose highest id is ``next_id``."""
        vocab = cls()
        vocab._ids = dict(word_map)
        vocab.next_id = next_id
        return vocab

    def encode(self, word: str) -> int:
        if not self._ids:
            self._ids[word] = 0
            self.next_id = 0
            return 0
        word_id = self._ids.get(word)
        if word_id is None:
            self.next_id += 1
            word_id = self.next_id
            self._ids[word] = word_id
        return word_id

    def encode_sequence(self, words: Iterable[str]) -> Tuple[int, ...]:
        return tuple(self.encode(word) for word in words)

    def get(self, word: str) -> Optional[int]:
        return self._ids.get(word)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._ids)

    def __contains__(self, word: object) -> bool:
        return word in self._ids

    def __len__(self) -> int:
        return len(self._ids)


def map_words_to_ids(
    words: Iterable[str], next_word_id: int, word_map: Dict[str, int]
) -> Tuple[Tuple[int, ...], int]:
    """
    Encode ``words`` against ``word_map`` in place and return the ids with the new counter.
    """
    vocab = Vocabulary.from_mapping(word_map, next_word_id)
    ids = vocab.encode_sequence(words)
    word_map.update(vocab.as_dict())
    return ids, vocab.next_id
