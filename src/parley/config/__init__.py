"""Configuration module for parley."""

from parley.config.loader import ConfigLoader
from parley.config.models import AbilityConfig, ParleyConfig, Settings, SlotConfig

__all__ = ["ConfigLoader", "ParleyConfig", "Settings", "AbilityConfig", "SlotConfig"]
