from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from format_converter.core.constants import (
    DEFAULT_EXIT_KEYWORD,
    DEFAULT_OUTPUT_DIR_NAME,
    DEFAULT_VECTOR_DENSITY,
    MAX_VECTOR_DENSITY,
    MIN_VECTOR_DENSITY,
)


class Settings(BaseSettings):
    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON lines")

    # Log files
    logging_enabled: bool = Field(
        default=False, description="Enable file logging in addition to stderr"
    )
    log_dir: str = Field(default="./logs", description="Directory for log files")
    max_log_size_mb: int = Field(
        default=10, description="Maximum size of each log file in MB"
    )
    log_backup_count: int = Field(
        default=3, description="Number of backup log files to keep"
    )
    anonymize_logs: bool = Field(
        default=True, description="Redact file paths and names in logs"
    )

    # Conversion
    output_dir_name: str = Field(
        default=DEFAULT_OUTPUT_DIR_NAME,
        description="Subdirectory created beside the source for converted files",
    )
    vector_density: int = Field(
        default=DEFAULT_VECTOR_DENSITY,
        description="Rasterization resolution (DPI) for vector sources",
    )
    atomic_writes: bool = Field(
        default=True,
        description="Write to a temporary file and rename, never leaving partial output",
    )

    # Catalog and menu
    menu_scope: str = Field(
        default="all",
        description="Targets offered in the menu: 'all' known targets or per 'source'",
    )
    symmetric_catalog: bool = Field(
        default=False,
        description="Add reverse edges so every catalog pair converts both ways",
    )

    # Session
    exit_keyword: str = Field(
        default=DEFAULT_EXIT_KEYWORD, description="Keyword that ends the session"
    )
    offer_open_after_convert: bool = Field(
        default=True, description="Ask to open each converted file"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("menu_scope")
    @classmethod
    def validate_menu_scope(cls, v):
        allowed = ["all", "source"]
        if v.lower() not in allowed:
            raise ValueError(f"menu_scope must be one of {allowed}")
        return v.lower()

    @field_validator("vector_density")
    @classmethod
    def validate_vector_density(cls, v):
        if not MIN_VECTOR_DENSITY <= v <= MAX_VECTOR_DENSITY:
            raise ValueError(
                f"vector_density must be between {MIN_VECTOR_DENSITY} and {MAX_VECTOR_DENSITY}"
            )
        return v

    @field_validator("output_dir_name")
    @classmethod
    def validate_output_dir_name(cls, v):
        v = v.strip()
        if not v or v in (".", "..") or "/" in v or "\\" in v:
            raise ValueError("output_dir_name must be a single directory name")
        return v

    @field_validator("exit_keyword")
    @classmethod
    def validate_exit_keyword(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("exit_keyword must not be empty")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="FORMAT_CONVERTER_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once from the environment."""
    return Settings()
