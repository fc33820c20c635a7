"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock modes enable local development without external services.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.analytics.models import MetricDirection


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "TalentTrack API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys. Using a list enables key rotation without downtime."
    )

    # Analytics
    default_metric_direction: MetricDirection = Field(
        default=MetricDirection.HIGHER_IS_BETTER,
        description="Better-direction for metrics outside the catalog when the caller doesn't specify one."
    )

    # Snowflake Configuration
    snowflake_account: str = Field(
        default="",
        description="Snowflake account identifier"
    )
    snowflake_user: str = Field(
        default="",
        description="Snowflake service account username"
    )
    snowflake_password: str = Field(
        default="",
        description="Snowflake service account password"
    )
    snowflake_private_key_path: Optional[str] = Field(
        default=None,
        description="Path to RSA private key file for key-pair authentication"
    )
    snowflake_private_key_base64: Optional[str] = Field(
        default=None,
        description="Base64-encoded private key (for deployment, alternative to file path)"
    )
    snowflake_database: str = Field(
        default="TALENTTRACK",
        description="Snowflake database name"
    )
    snowflake_schema: str = Field(
        default="PERFORMANCE",
        description="Snowflake schema name"
    )
    snowflake_warehouse: str = Field(
        default="COMPUTE_WH",
        description="Snowflake warehouse for query execution"
    )
    snowflake_role: Optional[str] = Field(
        default=None,
        description="Snowflake role to use (optional)"
    )
    snowflake_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real Snowflake connection. Enables local dev without DB."
    )

    # R2/S3 Storage Configuration
    r2_account_id: str = Field(
        default="",
        description="Cloudflare account ID for R2"
    )
    r2_access_key_id: str = Field(
        default="",
        description="R2 access key ID"
    )
    r2_secret_access_key: str = Field(
        default="",
        description="R2 secret access key"
    )
    r2_bucket_name: str = Field(
        default="talenttrack-exports",
        description="R2 bucket name for archived CSV exports"
    )
    r2_endpoint_url: Optional[str] = Field(
        default=None,
        description="R2 endpoint URL. Auto-constructed from account_id if not provided."
    )
    r2_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real R2. Enables local dev without object storage."
    )
    export_url_expiry_seconds: int = Field(
        default=3600,
        description="Lifetime of presigned download URLs for archived exports."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def r2_endpoint(self) -> str:
        """
        Construct R2 endpoint URL from account ID.

        R2 endpoints follow the pattern: https://{account_id}.r2.cloudflarestorage.com
        """
        if self.r2_endpoint_url:
            return self.r2_endpoint_url
        return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on whether we're in mock mode.
        """
        missing = []

        if not self.api_keys_list:
            missing.append("API_KEYS")

        has_key = self.snowflake_private_key_path or self.snowflake_private_key_base64
        if not self.snowflake_mock_mode:
            if not self.snowflake_account:
                missing.append("SNOWFLAKE_ACCOUNT")
            if not self.snowflake_user:
                missing.append("SNOWFLAKE_USER")
            if not self.snowflake_password and not has_key:
                missing.append("SNOWFLAKE_PASSWORD or SNOWFLAKE_PRIVATE_KEY_PATH")

        if not self.r2_mock_mode:
            if not self.r2_account_id and not self.r2_endpoint_url:
                missing.append("R2_ACCOUNT_ID")
            if not self.r2_access_key_id:
                missing.append("R2_ACCESS_KEY_ID")
            if not self.r2_secret_access_key:
                missing.append("R2_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reload from a changed environment.
    """
    return Settings()
