# backend/estimator/config.py

from functools import lru_cache
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_MODEL = "gpt-4o-mini"


class Settings(BaseSettings):
    # === OpenAI ===
    openai_api_key: Optional[str] = Field(None, description="Missing key is reported per request")
    openai_model: str = DEFAULT_MODEL
    openai_base_url: Optional[str] = None
    openai_timeout: float = Field(60.0, gt=0, description="HTTP timeout in seconds")

    # === HTTP ===
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("openai_api_key", "openai_base_url", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("openai_model", mode="before")
    @classmethod
    def _blank_model_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return DEFAULT_MODEL
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        """CORS_ORIGINS is comma separated; an empty list means any origin."""
        if isinstance(value, str):
            value = [o.strip() for o in value.split(",")]
        if isinstance(value, list):
            value = [o for o in value if o] or ["*"]
        return value

    @property
    def inference_configured(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
