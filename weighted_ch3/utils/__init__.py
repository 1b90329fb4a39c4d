"""Utility modules for weighted CH3 hashing."""

from weighted_ch3.utils.config import WeightedCh3Config
from weighted_ch3.utils.logging import CH3Logger, get_logger, set_log_level

__all__ = ["WeightedCh3Config", "CH3Logger", "get_logger", "set_log_level"]
