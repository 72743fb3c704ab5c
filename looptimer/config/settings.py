import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Database URL from the environment, or a local SQLite file.

    The SQLite fallback uses an absolute path so the app and the CLI open the
    same file regardless of the working directory.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info("Using DATABASE_URL from environment")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "looptimer.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.warning(f"DATABASE_URL not set, using local SQLite database: {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    frontend_url: str = Field(default="http://localhost:3000", validation_alias="FRONTEND_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="", validation_alias="LOG_FILE")
    log_rotation: str = Field(default="10 MB", validation_alias="LOG_ROTATION")
    log_retention: str = Field(default="7 days", validation_alias="LOG_RETENTION")
    app_name: str = Field(default="looptimer", validation_alias="APP_NAME")

    # Auth (Clerk session tokens)
    dev_user_id: str = Field(default="", validation_alias="DEV_USER_ID")
    clerk_secret_key: str = Field(default="", validation_alias="CLERK_SECRET_KEY")
    clerk_jwks_url: str = Field(default="", validation_alias="CLERK_JWKS_URL")
    clerk_issuer: str = Field(default="", validation_alias="CLERK_ISSUER")

    # AI workout generation
    groq_api_key: str = Field(default="", validation_alias="GROQ_API_KEY")
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    ai_provider: str = Field(default="groq", validation_alias="AI_PROVIDER")
    ai_model: str = Field(default="llama-3.3-70b-versatile", validation_alias="AI_MODEL")

    max_playback_intervals: int = Field(
        default=10000,
        validation_alias="MAX_PLAYBACK_INTERVALS",
        description="Largest flattened script the playback endpoints will build",
    )
    seed_templates_on_startup: bool = Field(default=True, validation_alias="SEED_TEMPLATES_ON_STARTUP")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("ai_provider")
    @classmethod
    def validate_ai_provider(cls, value: str) -> str:
        provider = value.lower()
        if provider not in {"groq", "openai"}:
            logger.warning(f"Unknown AI_PROVIDER '{value}', falling back to groq")
            return "groq"
        return provider

    @field_validator("max_playback_intervals")
    @classmethod
    def validate_max_playback_intervals(cls, value: int) -> int:
        if value < 1:
            raise ValueError("MAX_PLAYBACK_INTERVALS must be at least 1")
        return value

    @property
    def ai_api_key(self) -> str:
        """API key for the configured AI provider."""
        return self.openai_api_key if self.ai_provider == "openai" else self.groq_api_key


settings = Settings()
