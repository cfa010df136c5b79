"""Configuration management using Pydantic Settings."""

from datetime import date
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gallery_spine.domains.gallery.classifier import VALID_DUMPED_DATE, threshold_from_date
from gallery_spine.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Source catalog (opened read-only)
    source_path: Path = Path("api_dump.sqlite")

    # Output store (recreated on every run)
    output_path: Path = Path("aggregated.sqlite")

    # Validity
    valid_dumped_date: date = VALID_DUMPED_DATE
    valid_dumped_threshold: int | None = None

    # Aggregation
    examples_per_tag: int = Field(default=5, ge=0)
    candidate_pool_limit: int | None = Field(default=None, ge=1)
    insert_batch_size: int = Field(default=10_000, ge=1)

    # Compression
    compress_output: bool = True
    compression_level: int = Field(default=9, ge=1, le=9)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @model_validator(mode="after")
    def check_pool_limit(self) -> "Settings":
        """A bounded pool must hold at least the galleries kept per tag."""
        if self.candidate_pool_limit is not None and self.candidate_pool_limit < self.examples_per_tag:
            raise ValueError(
                f"candidate_pool_limit ({self.candidate_pool_limit}) must be at least "
                f"examples_per_tag ({self.examples_per_tag})"
            )
        return self

    @property
    def dumped_threshold(self) -> int:
        """Effective validity threshold in Unix-epoch seconds."""
        if self.valid_dumped_threshold is not None:
            return self.valid_dumped_threshold
        return threshold_from_date(self.valid_dumped_date)

    @property
    def compressed_path(self) -> Path:
        """Path of the gzip artifact next to the output store."""
        return self.output_path.with_name(self.output_path.name + ".gz")


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}", cause=e)
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
