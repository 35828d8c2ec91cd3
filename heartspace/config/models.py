"""
Configuration dataclass models for HeartSpace.
"""
from dataclasses import dataclass, field


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: str = "*"  # comma separated


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    json: bool = False


@dataclass
class StorageConfig:
    """Content store backend selection."""
    backend: str = "memory"  # "memory" or "redis"
    seed_affirmations: bool = True


@dataclass
class RedisConfig:
    """Redis server configuration."""
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""  # loaded from env
    prefix: str = "heartspace:"


@dataclass
class HeartBotConfig:
    """HeartBot chat configuration."""
    min_delay: float = 1.0
    max_delay: float = 3.0
    session_ttl: int = 1800  # 30 minutes in seconds
    max_sessions: int = 1000


@dataclass
class AccountsConfig:
    """Account service configuration."""
    min_password_length: int = 6
    token_ttl: int = 604800  # 7 days in seconds
    hash_iterations: int = 100000


@dataclass
class MediaConfig:
    """Media store configuration."""
    root: str = "./media"
    base_url: str = "/media"
    max_bytes: int = 5 * 1024 * 1024


@dataclass
class HeartSpaceConfig:
    """Root configuration object containing all subsystem configs."""
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    heartbot: HeartBotConfig = field(default_factory=HeartBotConfig)
    accounts: AccountsConfig = field(default_factory=AccountsConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
