"""Logging utilities for weighted CH3 hashing."""

import logging
import os
import socket
import sys
import threading


class CH3Logger:
    """
    Thread-safe logger shared by the hashing components.

    One instance exists per component name. Messages carry the host and
    process id so logs from several routers can be merged.
    """

    _instances: dict = {}
    _lock = threading.Lock()

    def __new__(cls, name: str, *args, **kwargs):
        """Singleton pattern per logger name."""
        with cls._lock:
            if name not in cls._instances:
                instance = super().__new__(cls)
                cls._instances[name] = instance
            return cls._instances[name]

    def __init__(self, name: str, level: int = logging.INFO):
        """
        Initialize the logger.

        Args:
            name: Logger name (typically component name)
            level: Logging level
        """
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        self.name = name

        try:
            self.hostname = socket.gethostname()
        except OSError:
            self.hostname = "unknown"
        self.pid = os.getpid()

        self.logger = logging.getLogger(f"weighted_ch3.{name}")
        self.logger.setLevel(level)
        self.logger.propagate = False
        self.logger.handlers = []

        formatter = logging.Formatter(
            f"%(asctime)s | {self.hostname}:{self.pid} | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

    def debug(self, msg: str, *args, **kwargs):
        self.logger.debug(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self.logger.error(msg, *args, **kwargs)

    def set_level(self, level: int):
        """Set logging level."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)


def get_logger(name: str, level: int = logging.INFO) -> CH3Logger:
    """
    Get a logger instance for the given component name.

    Args:
        name: Component name (e.g., "config_adapter", "hash_func")
        level: Logging level

    Returns:
        CH3Logger instance
    """
    return CH3Logger(name, level=level)


def set_log_level(level) -> None:
    """
    Set the level of every weighted CH3 logger created so far.

    Args:
        level: Level number or name such as "DEBUG"
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    with CH3Logger._lock:
        instances = list(CH3Logger._instances.values())
    for instance in instances:
        instance.set_level(level)
