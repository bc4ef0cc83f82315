"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-development-only-secret-key-0123456789"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="CID_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Customer Identity API"
    api_prefix: str = "/api"

    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        min_length=32,
        description="HMAC secret used to sign bearer tokens.",
    )
    jwt_algorithm: str = Field(default="HS256", description="Signing algorithm for bearer tokens.")
    jwt_expiration_seconds: int = Field(default=3600, ge=1)
    bcrypt_rounds: int = Field(
        default=10,
        ge=4,
        le=16,
        description="bcrypt cost factor used when hashing the seeded account passwords.",
    )

    order_service_url: Optional[str] = Field(
        default=None,
        description="Base URL for the order service (e.g., http://localhost:8081).",
    )
    order_service_timeout_seconds: float = Field(default=2.0, gt=0.0)

    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )
    public_paths: tuple[str, ...] = Field(
        default=("/docs", "/redoc", "/openapi.json"),
        description="Path prefixes that bypass bearer token authentication.",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @property
    def login_path(self) -> str:
        return f"{self.api_prefix}/auth/login"

    @property
    def health_path(self) -> str:
        return f"{self.api_prefix}/health"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @field_validator("frontend_allowed_origins", "public_paths", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
