from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OWNER_PASSWORD = "myvoice-owner"


class BlobStoreConfig(BaseSettings):
    """Blob storage configuration"""

    backend: Literal["s3", "memory"] = "s3"
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    bucket_name: str = "myvoice-studio-demos"
    prefix: str = ""

    model_config = SettingsConfigDict(
        env_prefix="BLOB_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class OpenAIConfig(BaseSettings):
    """Chat completion API configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    model: str = Field(default="gpt-4o", validation_alias="OPENAI_MODEL")
    audio_model: str = Field(
        default="gpt-4o-audio-preview",
        validation_alias="OPENAI_AUDIO_MODEL",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias="OPENAI_BASE_URL",
    )
    temperature: float = Field(
        default=0.7,
        validation_alias="OPENAI_TEMPERATURE",
        ge=0.0,
        le=2.0,
    )
    analysis_max_tokens: int = Field(
        default=4000,
        validation_alias="OPENAI_ANALYSIS_MAX_TOKENS",
        ge=1,
    )
    report_max_tokens: int = Field(
        default=6000,
        validation_alias="OPENAI_REPORT_MAX_TOKENS",
        ge=1,
    )
    timeout_seconds: float = Field(
        default=120.0,
        validation_alias="OPENAI_TIMEOUT_SECONDS",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class SecurityConfig(BaseSettings):
    """Owner secret and session token configuration."""

    owner_password: SecretStr = Field(
        default=SecretStr(DEFAULT_OWNER_PASSWORD),
        validation_alias="OWNER_PASSWORD",
    )
    token_secret_key: SecretStr = Field(
        default=SecretStr("change-me"),
        validation_alias="OWNER_TOKEN_SECRET",
    )
    token_algorithm: str = Field(default="HS256", validation_alias="OWNER_TOKEN_ALGORITHM")
    token_expires_minutes: int = Field(
        default=60 * 24,
        validation_alias="OWNER_TOKEN_EXPIRATION_MINUTES",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class UploadConfig(BaseSettings):
    """Chunked upload limits."""

    chunk_size: int = Field(default=2 * 1024 * 1024, ge=1)
    max_chunks: int = Field(default=500, ge=1)
    stale_chunk_seconds: int = Field(default=24 * 60 * 60, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "MyVoice Studio"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8787
    log_file: str = "logs/app.log"
    upload_log_file: str = "logs/uploads.log"
    static_dir: Optional[str] = None

    # Blob storage
    blobs: BlobStoreConfig = Field(default_factory=BlobStoreConfig)

    # Completion API
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Security
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # Uploads
    uploads: UploadConfig = Field(default_factory=UploadConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
