# Configuration loader with environment variable support

import logging
from pathlib import Path
from typing import Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import FeathersBaseModel

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
DEFAULT_TIMEOUT_MS = 10_000


class AppConfig(BaseModel):
    name: str = "feathers-mcp-server"
    version: str = "0.1.0"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    environment: str = "development"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module understands"""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v}")
        return level


class RoutingConfig(BaseModel):
    default_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)


class TelemetryConfig(BaseModel):
    metrics_enabled: bool = True
    tracing_enabled: bool = False


class Config(FeathersBaseModel):
    """Main configuration model"""

    app: AppConfig = Field(default_factory=AppConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)


class Settings(BaseSettings):
    """Environment-based settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default="development", alias="ENV")
    config_path: Optional[str] = Field(default=None, alias="CONFIG_PATH")

    # Overrides for the YAML values
    log_level: Optional[str] = Field(default=None, alias="LOG_LEVEL")
    tool_timeout_ms: Optional[int] = Field(default=None, alias="TOOL_TIMEOUT_MS")

    # HTTP transport
    http_host: str = Field(default="127.0.0.1", alias="HTTP_HOST")
    http_port: int = Field(default=8000, alias="HTTP_PORT")

    # OpenTelemetry
    otel_exporter_otlp_endpoint: Optional[str] = Field(
        default=None, alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )
    otel_service_name: str = Field(default="feathers-mcp", alias="OTEL_SERVICE_NAME")


def _resolve_config_path(settings: Settings) -> Path:
    if settings.config_path:
        return Path(settings.config_path).expanduser()
    return CONFIG_DIR / f"{settings.env}.yaml"


def _apply_env_overrides(config: Config, settings: Settings) -> None:
    if settings.tool_timeout_ms is not None:
        if settings.tool_timeout_ms <= 0:
            raise ValueError(
                f"TOOL_TIMEOUT_MS must be positive, got {settings.tool_timeout_ms}"
            )
        config.routing.default_timeout_ms = settings.tool_timeout_ms
    if settings.log_level:
        try:
            config.app = AppConfig(
                **{**config.app.model_dump(), "log_level": settings.log_level}
            )
        except ValidationError as exc:
            raise ValueError(f"Invalid LOG_LEVEL override: {exc}") from exc


def load_config() -> Tuple[Config, Settings]:
    """
    Load configuration from YAML file and environment variables.

    Returns:
        tuple: (Config, Settings) - YAML config and environment settings

    Raises:
        FileNotFoundError: If an explicit CONFIG_PATH does not exist
        ValueError: If configuration validation fails
    """
    settings = Settings()
    config_path = _resolve_config_path(settings)

    if config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
    elif settings.config_path:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        logger.warning(
            f"No configuration file for env '{settings.env}' at {config_path}; "
            "using built-in defaults"
        )
        config_dict = {}

    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    try:
        config = Config(**config_dict)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc

    _apply_env_overrides(config, settings)
    return config, settings


# Global config instances (loaded once at startup)
_config: Optional[Config] = None
_settings: Optional[Settings] = None


def get_config() -> Config:
    """Get the global Config instance"""
    global _config, _settings
    if _config is None:
        _config, _settings = load_config()
    return _config


def get_settings() -> Settings:
    """Get the global Settings instance"""
    global _config, _settings
    if _settings is None:
        _config, _settings = load_config()
    return _settings


def init_config() -> Tuple[Config, Settings]:
    """Initialize and cache global config instances"""
    global _config, _settings
    _config, _settings = load_config()
    return _config, _settings


def reload_config() -> Tuple[Config, Settings]:
    """Force reload of config/settings from disk and environment."""
    return init_config()
