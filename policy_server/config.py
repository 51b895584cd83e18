"""
Configuration module for the Policy Server

All settings come from the environment and are read once at startup into an
immutable ``Settings`` object that is handed to each component.
"""

import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_ADMIN_KEY = "dev-admin-key-change"
DEFAULT_HMAC_SECRET = "dev-secret-change"
DEFAULT_POLICY_TTL_SECONDS = 60


def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def env_int(key: str, default: int) -> int:
    """Get integer value from environment variable, falling back on bad input"""
    try:
        return int(os.getenv(key, str(default)).strip())
    except ValueError:
        return default


def env_list(key: str, default: str = "") -> List[str]:
    return [p.strip() for p in os.getenv(key, default).split(",") if p.strip()]


def _default_database_url() -> str:
    # SQLite by default; any SQLAlchemy URL (e.g. Postgres) via DATABASE_URL
    sqlite_path = os.getenv("SQLITE_PATH", "./policy.db")
    return os.getenv("DATABASE_URL", f"sqlite:///{sqlite_path}")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./policy.db"
    admin_key: str = DEFAULT_ADMIN_KEY
    hmac_secret: str = DEFAULT_HMAC_SECRET
    policy_ttl_seconds: int = DEFAULT_POLICY_TTL_SECONDS
    seed_default_tenant: bool = True
    auto_migrate: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_exclude_paths: List[str] = field(default_factory=lambda: ["/health", "/metrics"])
    log_sample_rate: float = 1.0
    logging_config_path: str = "LOGGING.yaml"

    cors_origins: List[str] = field(default_factory=list)

    @property
    def uses_default_secrets(self) -> bool:
        return self.admin_key == DEFAULT_ADMIN_KEY or self.hmac_secret == DEFAULT_HMAC_SECRET


def load_settings() -> Settings:
    """Build settings from the process environment"""
    ttl = env_int("POLICY_TTL_SECONDS", DEFAULT_POLICY_TTL_SECONDS)
    if ttl <= 0:
        ttl = DEFAULT_POLICY_TTL_SECONDS

    try:
        sample_rate = float(os.getenv("LOG_SAMPLE_RATE", "1.0"))
    except ValueError:
        sample_rate = 1.0

    return Settings(
        database_url=_default_database_url(),
        admin_key=os.getenv("ADMIN_KEY", DEFAULT_ADMIN_KEY),
        hmac_secret=os.getenv("POLICY_HMAC_SECRET", DEFAULT_HMAC_SECRET),
        policy_ttl_seconds=ttl,
        seed_default_tenant=env_bool("SEED_DEFAULT_TENANT", True),
        auto_migrate=env_bool("AUTO_MIGRATE", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv("LOG_FORMAT", "json").lower(),
        log_exclude_paths=env_list("LOG_EXCLUDE_PATHS", "/health,/metrics"),
        log_sample_rate=sample_rate,
        logging_config_path=os.getenv("LOGGING_CONFIG", "LOGGING.yaml"),
        cors_origins=env_list("CORS_ORIGINS"),
    )
