"""
Weighted CH3 selection.

Turns an unweighted consistent hash into a weighted one by rejection
sampling. Each attempt probes the base hash with a differently salted key
and accepts the candidate server if the key's score falls under that
server's weight:

    p = score(key)
    for attempt in range(retry_count):
        index = base_hash(key + salt(attempt), n)
        if p < weights[index] * UINT32_MAX:
            return index
    return index

The score is taken on the unsalted key, so a key has one acceptance draw
while the probed server changes between attempts. When every weight is 1.0
the result equals ``base_hash(key, n)``.

Lowering one weight only moves keys away from that server. Changing the
pool size moves roughly as many keys as the base hash does, plus some
spillover that grows as the weights get further from 1.0.

If all attempts are rejected the candidate of the last attempt is returned
anyway. The chance of that is ``(1 - mean(weights)) ** retry_count``; with
a mean weight of 0.25 it takes about 16 attempts to get under 1%.
"""

from typing import Callable, List, NamedTuple, Optional, Sequence, Union

from weighted_ch3.hashing.furc import furc_hash
from weighted_ch3.hashing.salt import salted_key
from weighted_ch3.hashing.scoring import Scorer, uniform_score

DEFAULT_NUM_TRIES = 32
UINT32_MAX = 0xFFFFFFFF

BaseHash = Callable[[bytes, int], int]
Key = Union[bytes, str]


class Attempt(NamedTuple):
    """One probe of the weighted selection loop."""

    attempt: int
    candidate: int
    score: int
    threshold: int
    accepted: bool


def key_bytes(key: Key) -> bytes:
    """Return *key* as bytes, encoding text keys as UTF-8."""
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise TypeError(f"key must be str or bytes, got {type(key).__name__}")


def weight_threshold(weight: float) -> int:
    """Scale a weight in [0, 1] to the 32-bit acceptance threshold."""
    return int(weight * UINT32_MAX)


def _check_args(weights: Sequence[float], retry_count: int) -> None:
    if retry_count < 1:
        raise ValueError(f"retry_count must be at least 1, got {retry_count}")
    if len(weights) == 0:
        raise ValueError("weights must not be empty")


def weighted_ch3_hash(
    key: Key,
    weights: Sequence[float],
    retry_count: int = DEFAULT_NUM_TRIES,
    base_hash: Optional[BaseHash] = None,
    score: Optional[Scorer] = None
) -> int:
    """
    Pick a server index for *key* in proportion to *weights*.

    Args:
        key: Key to route
        weights: One weight in [0.0, 1.0] per server, usually a WeightVector
        retry_count: Maximum number of probes
        base_hash: Consistent hash ``(key, n) -> index``, defaults to furc
        score: Uniform 32-bit scorer, defaults to murmur3

    Returns:
        Server index in ``[0, len(weights))``
    """
    _check_args(weights, retry_count)
    base_hash = base_hash or furc_hash
    score = score or uniform_score

    data = key_bytes(key)
    n = len(weights)
    p = score(data)

    index = 0
    for attempt in range(retry_count):
        index = base_hash(salted_key(data, attempt), n)
        if p < weight_threshold(weights[index]):
            return index

    return index


def weighted_ch3_trace(
    key: Key,
    weights: Sequence[float],
    retry_count: int = DEFAULT_NUM_TRIES,
    base_hash: Optional[BaseHash] = None,
    score: Optional[Scorer] = None
) -> List[Attempt]:
    """
    Record every probe :func:`weighted_ch3_hash` makes for the same inputs.

    The candidate of the last entry is the index ``weighted_ch3_hash``
    returns. If no entry is accepted, the key was placed by the fallback.
    """
    _check_args(weights, retry_count)
    base_hash = base_hash or furc_hash
    score = score or uniform_score

    data = key_bytes(key)
    n = len(weights)
    p = score(data)

    attempts: List[Attempt] = []
    for attempt in range(retry_count):
        candidate = base_hash(salted_key(data, attempt), n)
        threshold = weight_threshold(weights[candidate])
        accepted = p < threshold
        attempts.append(Attempt(attempt, candidate, p, threshold, accepted))
        if accepted:
            break

    return attempts
