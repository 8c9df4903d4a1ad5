"""
Application Settings
===================

Rendering settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, TYPE_CHECKING
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

if TYPE_CHECKING:
    from docrender.models.schemas import PdfOptions


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="docrender", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Template Source Configuration
    template_package: str = Field(
        default="docrender", description="Package holding bundled templates"
    )
    template_prefix: str = Field(
        default="templates", description="Directory of bundled templates inside the package"
    )
    template_dir: Path = Field(
        default=Path("templates"), description="Filesystem template directory"
    )

    # PDF Configuration
    pdf_backend: str = Field(default="weasyprint", description="PDF backend: weasyprint, chromium")
    default_page_size: str = Field(default="A4", description="Default page size")
    default_margin: float = Field(default=36.0, ge=0, description="Default page margin in points")
    font_dir: Optional[Path] = Field(default=None, description="Directory of embeddable fonts")
    default_font: Optional[str] = Field(default=None, description="Default body font family")
    base_uri: Optional[str] = Field(default=None, description="Base URI for relative resources")

    # Browser Configuration (chromium backend)
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    playwright_timeout: int = Field(default=30000, description="Playwright timeout in milliseconds")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("pdf_backend")
    @classmethod
    def validate_pdf_backend(cls, v: str) -> str:
        """Normalize PDF backend name; the renderer factory rejects unknown backends."""
        if not v.strip():
            raise ValueError("PDF backend cannot be empty")
        return v.strip().lower()

    @field_validator("default_page_size")
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Validate default page size."""
        allowed = {"A4", "LETTER", "LEGAL", "A3"}
        if v.upper() not in allowed:
            raise ValueError(f"Page size must be one of: {allowed}")
        return v.upper()

    def default_pdf_options(self) -> "PdfOptions":
        """Build PDF options from the configured defaults."""
        from docrender.models.schemas import PageSize, PdfOptions

        builder = (
            PdfOptions.builder()
            .with_page_size(PageSize[self.default_page_size])
            .with_margins(*([self.default_margin] * 4))
        )
        if self.font_dir is not None:
            builder.with_font_directory(self.font_dir)
        if self.default_font:
            builder.with_default_font(self.default_font)
        if self.base_uri:
            builder.with_base_uri(self.base_uri)
        return builder.build()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="DOCRENDER_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
