"""Configuration management for the trusted proxies service."""
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    app_name: str = Field(default="Trusted Proxies API")

    # Proxy trust configuration
    trusted_proxies_raw: str = Field(default="", validation_alias="TRUSTED_PROXIES")
    trusted_proxies_strict: bool = Field(default=True)
    forwarded_for_header: str = Field(default="X-Forwarded-For")
    client_ip_resolution_enabled: bool = Field(default=True)

    @computed_field
    @property
    def trusted_proxies(self) -> list[str]:
        """Parse trusted proxy IPs/CIDRs from the comma-separated setting."""
        return [spec.strip() for spec in self.trusted_proxies_raw.split(",") if spec.strip()]

    model_config = SettingsConfigDict(
        env_file=None,  # Don't load from .env file
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
