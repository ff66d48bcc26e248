"""Configuration and settings management using pydantic-settings."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core service settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")

    # HTTP node
    http_default_timeout_ms: int = Field(
        default=15000,
        description="Timeout applied to HTTP nodes that do not set timeoutMs",
    )

    # Wait node
    wait_default_delay_seconds: float = Field(
        default=60,
        description="Delay used when a delay-mode wait node omits delaySeconds",
    )
    wait_default_check_every_seconds: float = Field(
        default=30,
        description="Poll interval used when an until-mode wait node omits checkEverySeconds",
    )
    wait_max_seconds: float = Field(
        default=24 * 60 * 60,
        description="Hard ceiling for until-mode waits",
    )

    # Code node
    code_node_enabled: bool = Field(
        default=True,
        description="Allow execution of user-supplied code nodes",
    )

    @field_validator(
        "http_default_timeout_ms",
        "wait_default_check_every_seconds",
        "wait_max_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate that limits are positive."""
        if v <= 0:
            raise ValueError("limit must be positive")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
