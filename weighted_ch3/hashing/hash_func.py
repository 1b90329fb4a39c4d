"""Weighted CH3 hash function bound to one pool's weights."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from weighted_ch3.hashing.scoring import Scorer
from weighted_ch3.hashing.selector import (
    DEFAULT_NUM_TRIES,
    Attempt,
    BaseHash,
    Key,
    weighted_ch3_hash,
    weighted_ch3_trace,
)
from weighted_ch3.hashing.weights import WEIGHTED_CH3_TYPE, WeightVector
from weighted_ch3.utils.logging import get_logger

logger = get_logger("hash_func")


class WeightedCh3HashFunc:
    """
    Routes keys to a pool of servers according to per-server weights.

    The pool size is the number of weights. The object holds no mutable
    state, so one instance can serve any number of threads.
    """

    def __init__(
        self,
        weights: Union[WeightVector, Sequence[float]],
        retry_count: int = DEFAULT_NUM_TRIES,
        base_hash: Optional[BaseHash] = None,
        score: Optional[Scorer] = None
    ):
        """
        Args:
            weights: WeightVector or raw list of weights in [0.0, 1.0]
            retry_count: Maximum number of probes per key
            base_hash: Consistent hash ``(key, n) -> index``, defaults to furc
            score: Uniform 32-bit scorer, defaults to murmur3
        """
        if retry_count < 1:
            raise ValueError(f"retry_count must be at least 1, got {retry_count}")
        if not isinstance(weights, WeightVector):
            weights = WeightVector(weights)

        self._weights = weights
        self._retry_count = retry_count
        self._base_hash = base_hash
        self._score = score

        logger.debug(
            "Created %s hash func: %d servers, %d tries, failure probability %.3g",
            WEIGHTED_CH3_TYPE,
            len(weights),
            retry_count,
            weights.failure_probability(retry_count)
        )

    @classmethod
    def from_config(
        cls,
        document: Mapping[str, Any],
        n: int,
        retry_count: int = DEFAULT_NUM_TRIES,
        base_hash: Optional[BaseHash] = None,
        score: Optional[Scorer] = None,
        missing_weight: Optional[float] = None
    ) -> "WeightedCh3HashFunc":
        """
        Create a hash func from a config document.

        Args:
            document: Object of the form ``{"weights": [...]}``
            n: Number of servers in the pool
            retry_count: Maximum number of probes per key
            base_hash: Consistent hash override
            score: Scorer override
            missing_weight: Pad value for short weight lists, None to reject

        Returns:
            WeightedCh3HashFunc for *n* servers
        """
        weights = WeightVector.from_config(document, n, missing_weight=missing_weight)
        return cls(weights, retry_count=retry_count, base_hash=base_hash, score=score)

    @staticmethod
    def type() -> str:
        return WEIGHTED_CH3_TYPE

    @property
    def weights(self) -> WeightVector:
        return self._weights

    @property
    def retry_count(self) -> int:
        return self._retry_count

    def __call__(self, key: Key) -> int:
        return weighted_ch3_hash(
            key,
            self._weights,
            self._retry_count,
            base_hash=self._base_hash,
            score=self._score
        )

    def trace(self, key: Key) -> List[Attempt]:
        """Probes made while routing *key*; see :func:`weighted_ch3_trace`."""
        return weighted_ch3_trace(
            key,
            self._weights,
            self._retry_count,
            base_hash=self._base_hash,
            score=self._score
        )

    def route_batch(self, keys: Iterable[Key]) -> Dict[int, List[Key]]:
        """
        Group keys by the server they route to.

        Returns:
            Dict mapping server index -> list of keys, with every index present
        """
        result: Dict[int, List[Key]] = {i: [] for i in range(len(self._weights))}
        for key in keys:
            result[self(key)].append(key)
        return result

    def load_distribution(self, keys: Iterable[Key]) -> np.ndarray:
        """
        Fraction of *keys* routed to each server.

        Returns:
            float64 array of length ``len(weights)``; all zeros for no keys
        """
        n = len(self._weights)
        indices = np.fromiter((self(key) for key in keys), dtype=np.int64)
        counts = np.bincount(indices, minlength=n).astype(np.float64)
        if indices.size == 0:
            return counts
        return counts / indices.size

    def __repr__(self) -> str:
        return (
            f"WeightedCh3HashFunc(weights={self._weights.to_list()!r}, "
            f"retry_count={self._retry_count})"
        )
