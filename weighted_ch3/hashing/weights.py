"""Immutable per-server weight vector for weighted CH3 hashing."""

import math
import numbers
from typing import Any, Iterable, Iterator, List, Mapping, Optional

import numpy as np

from weighted_ch3.hashing.furc import FURC_MAX_POOL_SIZE

WEIGHTED_CH3_TYPE = "WeightedCh3"


class WeightConfigError(ValueError):
    """A weight specification is missing, malformed or out of range."""


def validate_weight(value: Any, position: int) -> float:
    """
    Check a single weight and return it as a float.

    Args:
        value: Candidate weight
        position: Index of the weight, used in error messages

    Returns:
        The weight as a float in [0.0, 1.0]

    Raises:
        WeightConfigError: If the value is not a finite number in range
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise WeightConfigError(
            f"weight #{position} is not a number: {value!r}"
        )
    weight = float(value)
    if not math.isfinite(weight) or not 0.0 <= weight <= 1.0:
        raise WeightConfigError(
            f"weight #{position} must be in range [0, 1.0], got {weight}"
        )
    return weight


class WeightVector:
    """
    Validated, read-only list of server weights.

    Index ``i`` holds the weight of server ``i``; the pool size is the
    vector length. Instances never change after construction and may be
    shared freely between threads. A config reload builds a new vector.
    """

    __slots__ = ("_weights",)

    def __init__(self, weights: Iterable[Any]):
        """
        Args:
            weights: Weights in [0.0, 1.0], one per server

        Raises:
            WeightConfigError: If the list is empty, too long, or holds an
                invalid weight
        """
        values = [validate_weight(w, i) for i, w in enumerate(weights)]
        if not values:
            raise WeightConfigError("weight vector must not be empty")
        if len(values) > FURC_MAX_POOL_SIZE:
            raise WeightConfigError(
                f"pool size {len(values)} exceeds maximum {FURC_MAX_POOL_SIZE}"
            )

        array = np.asarray(values, dtype=np.float64)
        array.setflags(write=False)
        self._weights = array

    @classmethod
    def from_config(
        cls,
        document: Mapping[str, Any],
        n: int,
        missing_weight: Optional[float] = None
    ) -> "WeightVector":
        """Build a vector from a ``{"weights": [...]}`` document for *n* servers."""
        from weighted_ch3.hashing.config_adapter import parse_weights

        return parse_weights(document, n, missing_weight=missing_weight)

    @staticmethod
    def type() -> str:
        return WEIGHTED_CH3_TYPE

    @property
    def values(self) -> np.ndarray:
        """Underlying read-only float64 array."""
        return self._weights

    def to_list(self) -> List[float]:
        return self._weights.tolist()

    def mean(self) -> float:
        """Probability that a single probe is accepted."""
        return float(self._weights.mean())

    def failure_probability(self, retry_count: int) -> float:
        """Probability that *retry_count* probes all get rejected."""
        return (1.0 - self.mean()) ** retry_count

    def __len__(self) -> int:
        return len(self._weights)

    def __getitem__(self, index: int) -> float:
        return float(self._weights[index])

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_list())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightVector):
            return NotImplemented
        return bool(np.array_equal(self._weights, other._weights))

    def __hash__(self) -> int:
        return hash(tuple(self.to_list()))

    def __repr__(self) -> str:
        return f"WeightVector({self.to_list()!r})"
