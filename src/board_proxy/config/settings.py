# src/board_proxy/config/settings.py
import json
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "https://board-drop.vercel.app",
    "http://192.168.10.207:5173",
]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from board_proxy.config.settings import get_settings
        settings = get_settings()
        api_key = settings.monday_api_key
    """

    # Upstream API
    monday_api_key: str = Field(
        description="monday.com API token, sent as the Authorization header"
    )

    api_base_url: str = Field(
        default="https://api.monday.com",
        description="Base URL of the upstream API"
    )

    api_version: Optional[str] = Field(
        default=None,
        description="Optional API-Version header, e.g. 2024-10"
    )

    upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every outbound request"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to bind")

    port: int = Field(default=4000, description="Port to listen on")

    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS),
        description="Origins allowed to call the proxy (comma separated or JSON list)"
    )

    # Storage Configuration
    upload_dir: str = Field(
        default="uploads",
        description="Directory where incoming files are staged before forwarding"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("monday_api_key")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        """An empty token is as good as no token."""
        if not v or not v.strip():
            raise ValueError("MONDAY_API_KEY must not be empty")
        return v.strip()

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        """Accept either a JSON list or a comma separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        valid_levels = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return level

    @property
    def graphql_url(self) -> str:
        """Endpoint for plain GraphQL mutations."""
        return f"{self.api_base_url}/v2"

    @property
    def file_upload_url(self) -> str:
        """Endpoint for multipart file uploads."""
        return f"{self.api_base_url}/v2/file"

    def redacted(self) -> Dict[str, Any]:
        """Settings as a dict that is safe to print."""
        values = self.model_dump()
        key = values["monday_api_key"]
        values["monday_api_key"] = f"{key[:4]}..." if len(key) > 8 else "***"
        return values

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
