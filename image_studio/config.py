"""Configuration module using pydantic-settings."""

import logging
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Fixed instruction for the product-shot mode. Not user-editable.
PRODUCT_SHOT_PROMPT = (
    "Create a detailed, high-quality product image of the clothing in the photo. "
    "The image must have a clean, solid white background and be a direct, front-facing view. "
    "Remove any distractions, people, or clutter from the background. "
    "The lighting should be professional and even, mimicking a studio photoshoot. "
    "The final image should be a realistic representation of the original clothing item."
)


class GeminiConfig(BaseSettings):
    """Google Gemini API configuration."""

    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "api_key"),
        description="Gemini API key",
    )
    model: str = Field(
        "gemini-2.5-flash-image",
        description="Gemini model name",
    )
    product_shot_prompt: str = Field(
        PRODUCT_SHOT_PROMPT,
        description="Instruction sent in product-shot mode",
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_", case_sensitive=False, populate_by_name=True
    )

    @property
    def is_configured(self) -> bool:
        """Whether a credential is available."""
        return bool(self.api_key)


class StudioConfig(BaseSettings):
    """Upload policy and session limits for the studio."""

    max_upload_bytes: int = Field(
        10 * 1024 * 1024, ge=1, description="Maximum accepted image size in bytes"
    )
    accepted_media_types: list[str] = Field(
        default=["image/png", "image/jpeg", "image/webp"],
        description="Accepted image media types",
    )
    session_ttl_seconds: int = Field(
        3600, ge=1, description="Idle time after which a session and its images are dropped"
    )
    max_sessions: int = Field(1000, ge=1, description="Maximum sessions kept in memory")

    model_config = SettingsConfigDict(env_prefix="STUDIO_", case_sensitive=False)


class TelegramConfig(BaseSettings):
    """Telegram bot configuration."""

    bot_token: str = Field(..., description="Telegram bot token")

    model_config = SettingsConfigDict(env_prefix="TELEGRAM_", case_sensitive=False)


class RedisConfig(BaseSettings):
    """Redis configuration. FSM state lives in memory when host is unset."""

    host: str | None = Field(None, description="Redis host")
    port: int = Field(6379, ge=1, le=65535, description="Redis port")
    db: int = Field(0, ge=0, description="Redis database number")

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")

    model_config = SettingsConfigDict(env_prefix="LOG_", case_sensitive=False)


class AppConfig(BaseSettings):
    """Main application configuration."""

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    studio: StudioConfig = Field(default_factory=StudioConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, yaml_path: Path | str) -> "AppConfig":
        """Load configuration from YAML file.

        Sections present in the file are merged over values from the
        environment; missing sections fall back to env-only settings.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        import yaml

        with yaml_path.open("r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        sections: dict[str, type[BaseSettings]] = {
            "gemini": GeminiConfig,
            "studio": StudioConfig,
            "telegram": TelegramConfig,
            "redis": RedisConfig,
            "logging": LoggingConfig,
        }
        config_data: dict[str, Any] = {}
        for key, value in yaml_data.items():
            settings_cls = sections.get(key)
            if settings_cls is not None and isinstance(value, dict):
                # Env vars still fill in anything the file leaves out
                config_data[key] = settings_cls(**value)
            else:
                config_data[key] = value

        return cls(**config_data)


# Global config instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get application configuration (singleton)."""
    global _config
    if _config is None:
        config_path = Path("config.yaml")
        try:
            if config_path.exists():
                _config = AppConfig.from_yaml(config_path)
            else:
                _config = AppConfig()
        except FileNotFoundError as e:
            logger.warning(f"Failed to load from YAML, using env only: {e}")
            _config = AppConfig()
        logger.info("Configuration loaded successfully")
    return _config
