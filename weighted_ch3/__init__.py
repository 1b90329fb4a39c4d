"""
Weighted CH3 - weighted consistent hashing for cache and storage routing.

This package provides:
- weighted_ch3_hash: Route a key to a server index in proportion to weights
- WeightVector: Validated, immutable per-server weights
- WeightedCh3HashFunc: Hash function bound to one pool's weights
- WeightedCh3Config: Runtime settings for the hash function
"""

from weighted_ch3.hashing import (
    WEIGHTED_CH3_TYPE,
    WeightConfigError,
    WeightedCh3HashFunc,
    WeightVector,
    parse_weights,
    weighted_ch3_hash,
)
from weighted_ch3.utils.config import WeightedCh3Config

__version__ = "0.1.0"
__all__ = [
    "WEIGHTED_CH3_TYPE",
    "WeightConfigError",
    "WeightedCh3HashFunc",
    "WeightVector",
    "parse_weights",
    "weighted_ch3_hash",
    "WeightedCh3Config",
]
