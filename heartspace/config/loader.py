"""
Configuration loader with TOML file parsing and environment variable overrides.
"""
import os
import logging
from pathlib import Path
from typing import Optional, Any, Dict

# Try Python 3.11+ tomllib first, fallback to tomli for older versions
try:
    import tomllib
except ModuleNotFoundError:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError(
            "Neither tomllib (Python 3.11+) nor tomli package found. "
            "Install tomli: pip install tomli"
        )

from .models import HeartSpaceConfig

logger = logging.getLogger(__name__)

_config: Optional[HeartSpaceConfig] = None

CONFIG_ENV_VAR = "HEARTSPACE_CONFIG"

CONFIG_PATHS = [
    Path("heartspace.toml"),
    Path.home() / ".config" / "heartspace" / "heartspace.toml",
    Path("/etc/heartspace/heartspace.toml"),
]


def _load_toml(path: Path) -> Dict[str, Any]:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config: HeartSpaceConfig) -> HeartSpaceConfig:
    """
    Override config with environment variables.
    Format: HEARTSPACE_SECTION_KEY
    Example: HEARTSPACE_REDIS_PASSWORD overrides config.redis.password
    """
    env_map = {
        # Server overrides
        "HEARTSPACE_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "HEARTSPACE_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "HEARTSPACE_SERVER_CORS_ORIGINS": lambda v: setattr(config.server, "cors_origins", v),

        # Logging overrides
        "HEARTSPACE_LOGGING_LEVEL": lambda v: setattr(config.logging, "level", v.upper()),
        "HEARTSPACE_LOGGING_JSON": lambda v: setattr(config.logging, "json", _parse_bool(v)),

        # Storage overrides
        "HEARTSPACE_STORAGE_BACKEND": lambda v: setattr(config.storage, "backend", v),
        "HEARTSPACE_STORAGE_SEED_AFFIRMATIONS": lambda v: setattr(config.storage, "seed_affirmations", _parse_bool(v)),

        # Redis overrides
        "HEARTSPACE_REDIS_HOST": lambda v: setattr(config.redis, "host", v),
        "HEARTSPACE_REDIS_PORT": lambda v: setattr(config.redis, "port", int(v)),
        "HEARTSPACE_REDIS_DB": lambda v: setattr(config.redis, "db", int(v)),
        "HEARTSPACE_REDIS_PASSWORD": lambda v: setattr(config.redis, "password", v),
        "HEARTSPACE_REDIS_PREFIX": lambda v: setattr(config.redis, "prefix", v),

        # HeartBot overrides
        "HEARTSPACE_HEARTBOT_MIN_DELAY": lambda v: setattr(config.heartbot, "min_delay", float(v)),
        "HEARTSPACE_HEARTBOT_MAX_DELAY": lambda v: setattr(config.heartbot, "max_delay", float(v)),
        "HEARTSPACE_HEARTBOT_SESSION_TTL": lambda v: setattr(config.heartbot, "session_ttl", int(v)),

        # Accounts overrides
        "HEARTSPACE_ACCOUNTS_MIN_PASSWORD_LENGTH": lambda v: setattr(config.accounts, "min_password_length", int(v)),
        "HEARTSPACE_ACCOUNTS_TOKEN_TTL": lambda v: setattr(config.accounts, "token_ttl", int(v)),

        # Media overrides
        "HEARTSPACE_MEDIA_ROOT": lambda v: setattr(config.media, "root", v),
        "HEARTSPACE_MEDIA_BASE_URL": lambda v: setattr(config.media, "base_url", v),
        "HEARTSPACE_MEDIA_MAX_BYTES": lambda v: setattr(config.media, "max_bytes", int(v)),
    }

    for env_var, setter in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                setter(value)
                logger.debug(f"Config override from env: {env_var}")
            except (ValueError, TypeError) as e:
                logger.warning(f"Failed to apply env override {env_var}={value}: {e}")

    return config


def _toml_to_config(data: Dict[str, Any]) -> HeartSpaceConfig:
    """Convert TOML dict to HeartSpaceConfig dataclass."""
    config = HeartSpaceConfig()

    section_map = {
        "server": config.server,
        "logging": config.logging,
        "storage": config.storage,
        "redis": config.redis,
        "heartbot": config.heartbot,
        "accounts": config.accounts,
        "media": config.media,
    }

    for section_name, section_obj in section_map.items():
        if section_name in data:
            for k, v in data[section_name].items():
                if hasattr(section_obj, k):
                    setattr(section_obj, k, v)
                else:
                    logger.warning(f"Unknown config key [{section_name}] {k}")

    return config


def load_config(config_path: Optional[Path] = None) -> HeartSpaceConfig:
    """
    Load configuration from TOML file with environment variable overrides.

    Args:
        config_path: Optional explicit path to config file. If None, checks
            $HEARTSPACE_CONFIG and then the default paths.

    Returns:
        HeartSpaceConfig instance with loaded configuration.
    """
    global _config

    if config_path:
        paths = [Path(config_path)]
    elif os.environ.get(CONFIG_ENV_VAR):
        paths = [Path(os.environ[CONFIG_ENV_VAR])]
    else:
        paths = CONFIG_PATHS

    data = {}
    for path in paths:
        if path.exists():
            try:
                data = _load_toml(path)
                logger.info(f"Loaded config from {path}")
                break
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.error(f"Failed to load config from {path}: {e}")
                continue
    else:
        logger.warning("No config file found, using defaults")

    config = _toml_to_config(data)
    config = _apply_env_overrides(config)
    _config = config
    return config


def get_config() -> HeartSpaceConfig:
    """
    Get cached config or load if not yet loaded.

    Returns:
        HeartSpaceConfig instance.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    _config = None
