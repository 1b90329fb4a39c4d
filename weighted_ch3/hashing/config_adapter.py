"""Build weight vectors from configuration documents."""

import json
from typing import Any, Mapping, Optional, Union

import msgpack

from weighted_ch3.hashing.weights import (
    WeightConfigError,
    WeightVector,
    validate_weight,
)
from weighted_ch3.utils.logging import get_logger

logger = get_logger("config_adapter")


def parse_weights(
    document: Mapping[str, Any],
    n: int,
    missing_weight: Optional[float] = None
) -> WeightVector:
    """
    Extract the weight list of a pool from its config document.

    The document looks like ``{"weights": [1.0, 0.5, ...]}`` with one weight
    per server. By default the number of weights must equal *n*. When
    *missing_weight* is given, a short list is padded with it and a long
    list is cut to *n*; both cases are logged as a broken config.

    Args:
        document: Parsed config object
        n: Number of servers in the pool
        missing_weight: Weight for servers without one, or None to reject

    Returns:
        WeightVector of length *n*

    Raises:
        WeightConfigError: If the document does not describe *n* valid weights
    """
    if n < 1:
        raise WeightConfigError(f"pool size must be at least 1, got {n}")
    if not isinstance(document, Mapping) or "weights" not in document:
        raise WeightConfigError("WeightedCh3: not an object or no weights")

    raw = document["weights"]
    if not isinstance(raw, (list, tuple)):
        raise WeightConfigError("WeightedCh3: weights is not array")

    weights = [validate_weight(w, i) for i, w in enumerate(raw[:n])]

    if len(raw) != n:
        if missing_weight is None:
            raise WeightConfigError(
                f"WeightedCh3: number of weights ({len(raw)}) does not match "
                f"number of servers ({n})"
            )
        fill = validate_weight(missing_weight, len(weights))
        if len(raw) < n:
            logger.error(
                "WeightedCh3: CONFIG IS BROKEN! number of weights (%d) is smaller "
                "than number of servers (%d). Missing weights are set to %s",
                len(raw), n, fill
            )
        else:
            logger.error(
                "WeightedCh3: CONFIG IS BROKEN! number of weights (%d) is larger "
                "than number of servers (%d). Extra weights are ignored",
                len(raw), n
            )
        weights.extend([fill] * (n - len(weights)))

    logger.debug("Parsed %d weights, mean %.4f", n, sum(weights) / n)
    return WeightVector(weights)


def weights_from_json(
    text: Union[str, bytes],
    n: int,
    missing_weight: Optional[float] = None
) -> WeightVector:
    """Decode a JSON config document and parse its weights."""
    try:
        document = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise WeightConfigError(f"WeightedCh3: invalid JSON config: {e}") from e
    return parse_weights(document, n, missing_weight=missing_weight)


def weights_from_msgpack(
    data: bytes,
    n: int,
    missing_weight: Optional[float] = None
) -> WeightVector:
    """Decode a msgpack config document and parse its weights."""
    try:
        document = msgpack.unpackb(data, raw=False)
    except (TypeError, ValueError, msgpack.UnpackException) as e:
        raise WeightConfigError(f"WeightedCh3: invalid msgpack config: {e}") from e
    return parse_weights(document, n, missing_weight=missing_weight)
