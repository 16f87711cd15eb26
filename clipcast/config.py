"""
Configuration management for ClipCast.

Handles loading, validation, and access to application configuration.
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["ClipCastConfig"] = None


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    develop: bool = False  # Allows the export task without the cron header


class StoreConfig(BaseModel):
    """Document store configuration."""
    backend: str = "sql"  # sql, memory
    url: str = "sqlite:///./clipcast.db"
    echo: bool = False


class SamplerConfig(BaseModel):
    """
    Corpus sampler tuning.

    The numbers are empirical; they bound how much of the corpus a single
    scheduling run may read.
    """
    window_size: int = 100  # Records requested per range query
    fetch_budget: int = 3000  # Cumulative records requested before giving up
    start_margin: int = 100  # Random starts stay below corpus_size - start_margin
    top_up: int = 100  # Pool growth when a draw runs out of candidates
    initial_pool: int = 800  # Records loaded when a run starts


class TimelineConfig(BaseModel):
    """Timeline construction settings."""
    channel_count: int = 4
    max_clip_minutes: int = 30
    timezone: str = "Asia/Tokyo"
    window_hours: int = 3  # Length of the slice served by /schedule

    @property
    def max_clip_duration(self) -> timedelta:
        return timedelta(minutes=self.max_clip_minutes)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.window_hours)


class TasksConfig(BaseModel):
    """In-process background task configuration."""
    enabled: bool = False
    interval_seconds: int = 3600
    run_immediately: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/clipcast.log"
    max_size: str = "10MB"
    backup_count: int = 5
    to_console: bool = True
    to_file: bool = True
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ClipCastConfig(BaseModel):
    """Main ClipCast configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    sampler: SamplerConfig = Field(default_factory=SamplerConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> ClipCastConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        # Look for config.yaml in current directory or project root
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = ClipCastConfig(**config_data)
    return _config


def get_config() -> ClipCastConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> ClipCastConfig:
    """
    Reload configuration from disk.

    Returns:
        Freshly loaded configuration.
    """
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # Map of environment variables to config paths
    env_map = {
        "CLIPCAST_HOST": ("server", "host"),
        "CLIPCAST_PORT": ("server", "port"),
        "CLIPCAST_DEVELOP": ("server", "develop"),
        "CLIPCAST_STORE_BACKEND": ("store", "backend"),
        "CLIPCAST_STORE_URL": ("store", "url"),
        "CLIPCAST_TIMEZONE": ("timeline", "timezone"),
        "CLIPCAST_FETCH_BUDGET": ("sampler", "fetch_budget"),
        "CLIPCAST_LOG_LEVEL": ("logging", "level"),
        "CLIPCAST_TASKS_ENABLED": ("tasks", "enabled"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

