"""Weighted CH3 hashing components."""

from weighted_ch3.hashing.config_adapter import (
    parse_weights,
    weights_from_json,
    weights_from_msgpack,
)
from weighted_ch3.hashing.furc import FURC_MAX_POOL_SIZE, furc_hash
from weighted_ch3.hashing.hash_func import WeightedCh3HashFunc
from weighted_ch3.hashing.salt import iter_salts, salt, salted_key
from weighted_ch3.hashing.scoring import make_scorer, uniform_score
from weighted_ch3.hashing.selector import (
    DEFAULT_NUM_TRIES,
    UINT32_MAX,
    Attempt,
    weighted_ch3_hash,
    weighted_ch3_trace,
)
from weighted_ch3.hashing.weights import (
    WEIGHTED_CH3_TYPE,
    WeightConfigError,
    WeightVector,
)

__all__ = [
    "parse_weights",
    "weights_from_json",
    "weights_from_msgpack",
    "FURC_MAX_POOL_SIZE",
    "furc_hash",
    "WeightedCh3HashFunc",
    "iter_salts",
    "salt",
    "salted_key",
    "make_scorer",
    "uniform_score",
    "DEFAULT_NUM_TRIES",
    "UINT32_MAX",
    "Attempt",
    "weighted_ch3_hash",
    "weighted_ch3_trace",
    "WEIGHTED_CH3_TYPE",
    "WeightConfigError",
    "WeightVector",
]
