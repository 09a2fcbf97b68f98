from typing import Annotated, Any, List, Literal, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PORT = 5000


class ConfigurationError(RuntimeError):
    """Raised at startup when the environment cannot produce valid settings."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, frozen=True)

    openai_api_key: SecretStr
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4"
    openai_timeout: float = Field(60.0, gt=0)
    max_concurrent_generations: int = Field(8, ge=1)
    host: str = "0.0.0.0"
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    # comma separated in the environment
    cors_origins: Annotated[List[str], NoDecode] = ["*"]
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    @field_validator("openai_api_key", mode="before")
    @classmethod
    def key_not_blank(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            raise ValueError("OPENAI_API_KEY is blank")
        return value.strip() if isinstance(value, str) else value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Resolve settings once from the environment and `env_file`."""
    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        if any(err["loc"] and err["loc"][0] == "openai_api_key" for err in e.errors()):
            raise ConfigurationError(
                "OPENAI_API_KEY is not set. Please define it as an environment variable."
            ) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e
