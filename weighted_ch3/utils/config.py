"""Configuration management for weighted CH3 hashing."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os


def _getenv_int(key: str, default: int) -> int:
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val, 0)
    except ValueError:
        return default


def _getenv_float(key: str, default: Optional[float]) -> Optional[float]:
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


@dataclass
class WeightedCh3Config:
    """
    Runtime settings for weighted CH3 routing.

    Attributes:
        num_tries: Maximum number of probes per key
        score_seed: Seed of the 32-bit acceptance scorer
        missing_weight: Weight given to servers missing from a short weight
            list; None rejects such configs
        log_level: Level name for the package loggers
    """

    num_tries: int = 32
    score_seed: int = 0xFACE2014
    missing_weight: Optional[float] = None
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeightedCh3Config":
        """Create config from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_json(self) -> str:
        """Serialize config to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "WeightedCh3Config":
        """Create config from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_env(cls) -> "WeightedCh3Config":
        """Create config from ``WEIGHTED_CH3_*`` environment variables."""
        defaults = cls()
        return cls(
            num_tries=_getenv_int("WEIGHTED_CH3_NUM_TRIES", defaults.num_tries),
            score_seed=_getenv_int("WEIGHTED_CH3_SCORE_SEED", defaults.score_seed),
            missing_weight=_getenv_float(
                "WEIGHTED_CH3_MISSING_WEIGHT", defaults.missing_weight
            ),
            log_level=os.environ.get("WEIGHTED_CH3_LOG_LEVEL", defaults.log_level),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if isinstance(self.num_tries, bool) or not isinstance(self.num_tries, int):
            raise ValueError(f"num_tries must be an integer, got {self.num_tries!r}")
        if isinstance(self.score_seed, bool) or not isinstance(self.score_seed, int):
            raise ValueError(f"score_seed must be an integer, got {self.score_seed!r}")
        if self.missing_weight is not None and (
            isinstance(self.missing_weight, bool)
            or not isinstance(self.missing_weight, (int, float))
        ):
            raise ValueError(f"missing_weight must be a number, got {self.missing_weight!r}")
        if not isinstance(self.log_level, str):
            raise ValueError(f"log_level must be a string, got {self.log_level!r}")
        if self.num_tries < 1:
            raise ValueError("num_tries must be at least 1")
        if not 0 <= self.score_seed <= 0xFFFFFFFF:
            raise ValueError("score_seed must fit in 32 bits")
        if self.missing_weight is not None and not 0.0 <= self.missing_weight <= 1.0:
            raise ValueError("missing_weight must be in [0, 1.0]")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}")

    def build_hash_func(self, document: Mapping[str, Any], n: int):
        """
        Create a WeightedCh3HashFunc for a pool from its config document.

        Args:
            document: Object of the form ``{"weights": [...]}``
            n: Number of servers in the pool

        Returns:
            WeightedCh3HashFunc using these settings
        """
        from weighted_ch3.hashing.hash_func import WeightedCh3HashFunc
        from weighted_ch3.hashing.scoring import make_scorer
        from weighted_ch3.utils.logging import set_log_level

        self.validate()
        set_log_level(self.log_level)
        return WeightedCh3HashFunc.from_config(
            document,
            n,
            retry_count=self.num_tries,
            score=make_scorer(self.score_seed),
            missing_weight=self.missing_weight
        )
