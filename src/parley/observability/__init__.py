"""Logging setup."""

from parley.observability.logging import ContextLogger, configure_logging, setup_logging

__all__ = ["ContextLogger", "configure_logging", "setup_logging"]
