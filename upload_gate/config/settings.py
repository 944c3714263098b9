# config/settings.py
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError

from upload_gate.core.errors import ConfigurationError
from upload_gate.core.types import FilterPolicy, LimitsConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore"
    )

    # Limits (None = unbounded)
    max_field_name_size: int | None = Field(default=100)
    max_field_value_size: int | None = Field(default=1024 * 1024)
    max_fields: int | None = Field(default=None)
    max_file_size: int | None = Field(default=None)
    max_files: int | None = Field(default=None)
    max_parts: int | None = Field(default=None)
    max_header_pairs: int | None = Field(default=2000)

    # File filter (comma separated)
    allowed_extensions: str = Field(default=".jpg,.jpeg,.png,.gif,.pdf")
    allowed_mime_types: str = Field(default="image/jpeg,image/png,image/gif,application/pdf")

    # Storage
    storage: Literal["disk", "memory"] = Field(default="disk")
    upload_dir: str = Field(default="uploads")
    chunk_size: int = Field(default=64 * 1024, gt=0)
    max_request_size: int | None = Field(default=None, gt=0)
    abort_on_first_rejection: bool = Field(default=False)

    # Application
    log_level: str = Field(default="INFO")
    log_to_console: bool = Field(default=True)
    log_file: str = Field(default="logs/upload_gate.log")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=5000)


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_limits(settings: Settings) -> LimitsConfig:
    """Build the read-only limits shared by every upload session"""
    try:
        return LimitsConfig(
            max_field_name_size=settings.max_field_name_size,
            max_field_value_size=settings.max_field_value_size,
            max_fields=settings.max_fields,
            max_file_size=settings.max_file_size,
            max_files=settings.max_files,
            max_parts=settings.max_parts,
            max_header_pairs=settings.max_header_pairs,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid upload limits: {e}") from e


def build_policy(settings: Settings) -> FilterPolicy:
    """Build the file-type allow-lists from the comma separated settings"""
    return FilterPolicy(
        allowed_extensions=_split(settings.allowed_extensions),
        allowed_mime_types=_split(settings.allowed_mime_types),
    )


settings = Settings()
