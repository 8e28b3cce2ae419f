from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from neardup.signatures import (
    FNV_OFFSET_BASIS,
    HASH_BASE,
    HASH_FAMILIES,
    MASK32,
    UndersizedSentenceError,
    fnv_fold,
    fnv_hash,
    get_hash_family,
    multiplicative_hash,
    signature_pair,
)

u32 = st.integers(min_value=0, max_value=MASK32)


def test_multiplicative_hash_follows_recurrence() -> None:
    assert multiplicative_hash([]) == HASH_BASE
    assert multiplicative_hash([0]) == (HASH_BASE * HASH_BASE) % 2**32
    expected = (HASH_BASE * (HASH_BASE + 2 * 7)) % 2**32
    expected = (expected * (HASH_BASE + 2 * 3)) % 2**32
    assert multiplicative_hash([7, 3]) == expected


def test_multiplicative_hash_wraps_large_ids() -> None:
    value = multiplicative_hash([MASK32, MASK32 - 1, 2**31])
    assert 0 <= value <= MASK32


def test_fnv_hash_uses_overlapping_nibble_octets() -> None:
    h = FNV_OFFSET_BASIS
    n = 0x12345678
    for shift in (0, 4, 8, 12):
        h ^= (n >> shift) & 0xFF
        h = (h * 16777619) % 2**32
    assert fnv_hash(n) == h
    assert fnv_hash(1) != 1


def test_fnv_fold_of_empty_window_is_offset_basis() -> None:
    assert fnv_fold([]) == FNV_OFFSET_BASIS
    assert fnv_fold([5]) == FNV_OFFSET_BASIS ^ fnv_hash(5)


def test_hash_slice_is_not_trivial() -> None:
    v = [1000, 212234, 3000, 4000000, 5, 6, 7, 8, 9, 10]
    assert multiplicative_hash(v[1:5]) != 1


@pytest.mark.parametrize("family", sorted(HASH_FAMILIES))
def test_signature_pair_hashes_head_and_tail(family: str) -> None:
    v = [1, 2, 3, 4, 5, 11, 12, 13, 14, 15]
    digest = get_hash_family(family)
    assert signature_pair(v, family) == (digest([1, 2, 3, 4, 5]), digest([11, 12, 13, 14, 15]))


def test_signature_pair_of_exact_window_has_equal_halves() -> None:
    head, tail = signature_pair([9, 8, 7, 6, 5])
    assert head == tail


def test_signature_pair_rejects_short_sentences() -> None:
    with pytest.raises(UndersizedSentenceError):
        signature_pair([1, 2, 3, 4])
    with pytest.raises(ValueError):
        signature_pair([], "fnv")


def test_signature_pair_respects_custom_window() -> None:
    v = [1, 2, 3, 4]
    assert signature_pair(v, window=2) == (multiplicative_hash([1, 2]), multiplicative_hash([3, 4]))


def test_unknown_family_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown hash family"):
        get_hash_family("md5")


@pytest.mark.property
@pytest.mark.parametrize("family", sorted(HASH_FAMILIES))
@given(data=st.data())
@settings(max_examples=100)
def test_digest_is_order_insensitive(family: str, data: st.DataObject) -> None:
    window = data.draw(st.lists(u32, min_size=5, max_size=5))
    shuffled = data.draw(st.permutations(window))
    digest = get_hash_family(family)
    assert digest(window) == digest(shuffled)
    assert 0 <= digest(window) <= MASK32


@pytest.mark.property
@given(ids=st.lists(st.integers(min_value=0, max_value=10_000), min_size=10, max_size=30))
@settings(max_examples=50)
def test_signatures_ignore_order_inside_each_window(ids: list[int]) -> None:
    flipped = ids[:5][::-1] + ids[5:-5] + ids[-5:][::-1]
    assert signature_pair(ids) == signature_pair(flipped)
    assert signature_pair(ids, "fnv") == signature_pair(flipped, "fnv")
