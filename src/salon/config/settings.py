"""
Configuration management for Salon.

Hybrid configuration system using YAML files and environment variables.
Priority: Environment variables > environment YAML > default YAML > defaults
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "SALON_"


class Settings(BaseSettings):
    """
    Salon configuration schema.

    Loads configuration from:
    1. Environment variables prefixed with ``SALON_`` (highest priority)
    2. YAML configuration files
    3. Pydantic defaults (lowest priority)

    Configuration files:
        - config/default.yaml: Base defaults
        - config/production.yaml: Production overrides
        - config/development.yaml: Development overrides
        - config/test.yaml: Test overrides
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Salon"
    app_version: str = "0.1.0"
    env: str = Field(default="production", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    # API Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1024, le=65535)

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./salon.db",
        description="SQLAlchemy async database URL",
    )
    database_echo: bool = Field(default=False, description="Log SQL statements")
    database_pool_size: int = Field(default=20, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    auto_create_tables: bool = Field(
        default=True, description="Create missing tables on startup"
    )

    # JWT Authentication
    jwt_secret: str = Field(
        default="change-me", min_length=1, description="JWT secret key"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")

    # Limits
    max_channel_name_length: int = Field(default=100, ge=1, le=100)
    max_description_length: int = Field(default=500, ge=1)
    max_message_length: int = Field(default=2000, ge=1)
    default_channel_page_size: int = Field(default=20, ge=1)
    default_message_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    max_frame_size: int = Field(
        default=65_536,
        ge=1024,
        description="Maximum WebSocket client frame size in bytes",
    )

    # Live delivery
    subscriber_queue_size: int = Field(
        default=256,
        ge=1,
        description="Outbound frames buffered per connection before dropping",
    )
    delivery_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds a single socket write may take",
    )
    heartbeat_interval: int = Field(default=30, ge=1, le=300)
    max_total_connections: int = Field(default=0, ge=0)
    max_connections_per_user: int = Field(default=0, ge=0)

    # Graceful Shutdown
    shutdown_timeout: int = Field(
        default=30,
        ge=1,
        description="Maximum seconds to wait for graceful shutdown",
    )
    shutdown_grace_period: int = Field(
        default=5,
        ge=0,
        description="Seconds to wait for WebSocket clients to close",
    )

    # Logging
    log_level: str = Field(default="info")
    log_file: Optional[str] = Field(default=None)
    verbose: int = Field(default=1, ge=0, le=3)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs and must lose to the environment.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Require an async driver."""
        if "+" not in v.split("://", 1)[0]:
            raise ValueError(
                "database_url must name an async driver, "
                "e.g. sqlite+aiosqlite:// or postgresql+asyncpg://"
            )
        return v


def _project_root() -> Path:
    # src/salon/config/settings.py -> repository root
    return Path(__file__).resolve().parent.parent.parent.parent


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
    config_dir: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override
        config_dir: Optional directory holding the YAML files

    Returns:
        Settings instance

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    project_root = _project_root()
    config_path = Path(
        config_dir or os.getenv(f"{ENV_PREFIX}CONFIG_DIR") or project_root / "config"
    )

    environment = env or os.getenv(f"{ENV_PREFIX}ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    default_env_file, default_config_file = env_map.get(
        environment, (f".env.{environment}", f"{environment}.yaml")
    )
    if env_file is None:
        env_file = default_env_file
    if config_file is None:
        config_file = default_config_file

    # Load .env file FIRST (before Settings initialization)
    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    merged_config = {}

    default_config_path = config_path / "default.yaml"
    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config.update(loaded)

    env_config_path = config_path / config_file
    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config.update(loaded)

    merged_config.setdefault("env", environment)
    return Settings(**merged_config)


# Global settings singleton (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or initialize global settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """
    Override global settings (for testing).

    Args:
        new_settings: New Settings instance to use
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
