"""CH3 ("furc") consistent hash used as the default base placement."""

from typing import List

import mmh3

FURC_SHIFT = 23
FURC_MAX_POOL_SIZE = 1 << FURC_SHIFT
FURC_MAX_TRIES = 32
MURMUR_SEED = 4193360111


class _BitSource:
    """Lazily extended stream of pseudo-random bits derived from a key."""

    __slots__ = ("_key", "_words")

    def __init__(self, key: bytes):
        self._key = key
        self._words: List[int] = []

    def bit(self, idx: int) -> int:
        word_idx = idx >> 6
        words = self._words
        while len(words) <= word_idx:
            data = words[-1].to_bytes(8, "little") if words else self._key
            words.append(mmh3.hash64(data, MURMUR_SEED, signed=False)[0])
        return (words[word_idx] >> (idx & 0x3F)) & 0x1


def furc_hash(key: bytes, n: int) -> int:
    """
    Map *key* to an index in ``[0, n)``.

    Growing the pool by one server only moves keys onto the new server;
    every other key keeps its index.

    Args:
        key: Key bytes
        n: Pool size, between 1 and ``FURC_MAX_POOL_SIZE``

    Returns:
        Server index
    """
    if n < 1 or n > FURC_MAX_POOL_SIZE:
        raise ValueError(
            f"Invalid pool size {n}, must be in [1, {FURC_MAX_POOL_SIZE}]"
        )
    if n == 1:
        return 0

    bits = _BitSource(key)

    # Smallest d with 2**d >= n
    d = (n - 1).bit_length()
    a = d

    for _ in range(FURC_MAX_TRIES):
        while not bits.bit(a):
            d -= 1
            if d == 0:
                return 0
            a = d
        a += FURC_SHIFT
        num = 1
        for _ in range(d - 1):
            num = (num << 1) | bits.bit(a)
            a += FURC_SHIFT
        if num < n:
            return num

    return 0
