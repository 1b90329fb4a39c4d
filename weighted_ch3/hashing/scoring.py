"""Uniform 32-bit scores used for the weighted acceptance test."""

from typing import Callable

import mmh3

DEFAULT_SCORE_SEED = 0xFACE2014

Scorer = Callable[[bytes], int]


def uniform_score(key: bytes, seed: int = DEFAULT_SCORE_SEED) -> int:
    """Return an unsigned 32-bit score for *key*, uniform over its range."""
    return mmh3.hash(key, seed, signed=False)


def make_scorer(seed: int = DEFAULT_SCORE_SEED) -> Scorer:
    """Bind :func:`uniform_score` to *seed*."""
    if not 0 <= seed <= 0xFFFFFFFF:
        raise ValueError(f"score seed must fit in 32 bits, got {seed}")

    def _score(key: bytes) -> int:
        return uniform_score(key, seed)

    return _score
