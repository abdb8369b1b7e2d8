"""
Search configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Query limits and HNSW tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from chunkstore.configs.base import BaseSettings


class SearchSettings(BaseSettings):
    """Similarity search limits."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(default=5, description="Number of results when limit is omitted")
    max_limit: int = Field(default=100, description="Upper bound for the limit parameter")
    hnsw_ef_search: int = Field(
        default=200,
        description="hnsw.ef_search applied at database level (higher = better recall)",
    )
