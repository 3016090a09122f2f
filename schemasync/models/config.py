"""Store and migration configuration models."""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr, model_validator


class StoreConfig(BaseModel):
    """Connection settings for the remote schema store."""

    type: str = Field(default="appwrite", description="Registered store type")
    endpoint: Optional[str] = Field(
        default=None, description="API endpoint, e.g. https://cloud.example.com/v1"
    )
    project_id: Optional[str] = Field(default=None, description="Project identifier")
    api_key: Optional[SecretStr] = Field(
        default=None, description="Server API key (supports templates)"
    )
    database_id: str = Field(description="Root database (schema container) id")
    database_name: str = Field(
        default="Schema Database", description="Name used when creating the database"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds", ge=1)
    max_retries: int = Field(
        default=3, description="Retries on transient failures (reads only)", ge=0
    )
    retry_delay: float = Field(
        default=1.0, description="Backoff factor between retries in seconds", ge=0.0
    )

    @model_validator(mode="after")
    def validate_required_values(self) -> "StoreConfig":
        if not self.database_id.strip():
            raise ValueError("Missing required configuration values: database_id")
        if self.type == "memory":
            return self
        missing = [
            name
            for name in ("endpoint", "project_id")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise ValueError(
                f"Missing required configuration values: {', '.join(missing)}"
            )
        return self


class MigrationSettings(BaseModel):
    """Tuning for a migration run."""

    provisioning_max_attempts: int = Field(
        default=30, description="Polls before giving up on field provisioning", ge=1
    )
    provisioning_delay: float = Field(
        default=1.0, description="Seconds between provisioning polls", ge=0.0
    )
    run_timeout: Optional[float] = Field(
        default=None, description="Overall run deadline in seconds", gt=0
    )
