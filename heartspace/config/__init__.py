"""
HeartSpace configuration management.

Provides centralized configuration loading from TOML files with environment variable overrides.

Usage:
    from heartspace.config import get_config

    config = get_config()
    redis_host = config.redis.host
    min_delay = config.heartbot.min_delay
"""
from .loader import load_config, get_config, reset_config
from .models import HeartSpaceConfig

__all__ = ["load_config", "get_config", "reset_config", "HeartSpaceConfig"]
