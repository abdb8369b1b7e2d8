"""
Embedding provider configuration settings.

Holds the remote (OpenAI) provider credentials, model and retry policy,
and the fixed dimensionality of both embedding spaces.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider configuration
"""

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import SettingsConfigDict

from chunkstore.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding providers configuration (OpenAI server-side, local caller-side)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "EMBEDDING_OPENAI_API_KEY"),
        description="OpenAI API key; the openai provider is unavailable when unset",
    )
    openai_model: str = Field(
        default="text-embedding-3-small",
        description="OpenAI embedding model ID",
    )
    openai_dimensions: int = Field(
        default=1536,
        description="Dimension of OpenAI embeddings (embedding_openai column)",
    )
    local_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="Model used by callers to produce local embeddings",
    )
    local_dimensions: int = Field(
        default=384,
        description="Dimension of local embeddings (embedding_local column)",
    )

    max_retries: int = Field(
        default=2,
        description="Retries for transient OpenAI failures (rate limit, timeout, 5xx)",
    )
    backoff_seconds: float = Field(
        default=1.0,
        description="Initial backoff between retries; doubles on each attempt",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Per-request timeout for the OpenAI API in seconds",
    )

    @property
    def openai_configured(self) -> bool:
        """Whether an OpenAI API key is present."""
        return bool(self.openai_api_key and self.openai_api_key.get_secret_value())
