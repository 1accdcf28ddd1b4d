"""
Configuration management for the Work Suite API.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="WORKSUITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Work Suite API")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=3000)
    cors_origins: str = Field(
        default="*", description="Comma-separated list of allowed CORS origins"
    )

    # Storage
    data_path: Path = Field(default=Path("./data"))
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL. Defaults to worksuite.db inside data_path.",
    )
    max_upload_bytes: int = Field(default=100 * 1024 * 1024)

    # Security
    secret_key: str = Field(default="dev-secret-change-me-before-deploying")
    token_expire_minutes: int = Field(default=7 * 24 * 60)
    auth_cookie_name: str = Field(default="worksuite_token")
    password_hash_iterations: int = Field(default=310_000, ge=1)

    # External workspace service
    workspace_service_url: Optional[str] = Field(default=None)
    workspace_service_api_key: Optional[str] = Field(default=None)
    workspace_timeout_seconds: float = Field(default=5.0, gt=0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @property
    def files_path(self) -> Path:
        """Root directory for uploaded files."""
        return self.data_path / "files"

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_path / 'worksuite.db'}"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
