from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RENDER_COMMIT_", case_sensitive=False)

    default_timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_response_bytes: int = Field(default=10 << 20, gt=0, description="Response body cap")
    staging_prefix: str = Field(default=".render-commit-", min_length=1)
    file_mode: int = Field(default=0o644, description="Manifest file permissions (octal)")
