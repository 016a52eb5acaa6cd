"""
Configuration settings for RIS Search Service
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Service
    service_name: str = "ris-search-service"
    service_version: str = "1.0.0"
    log_level: str = "INFO"

    # RIS OGD API
    ris_api_base_url: str = Field(
        default="https://data.bka.gv.at/ris/api/v2.6/",
        description="Base address of the RIS OGD API; the document category is appended as path segment",
    )
    ris_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Deadline for a single request in milliseconds",
    )
    ris_error_body_limit: int = Field(
        default=500,
        gt=0,
        description="Number of response body characters kept in HTTP error messages",
    )

    # Document fetching
    ris_allowed_document_hosts: list[str] = Field(
        default=["data.bka.gv.at", "www.ris.bka.gv.at", "ris.bka.gv.at"],
        description="Hostnames that externally supplied document URLs may point to",
    )


# Global settings instance
settings = Settings()
