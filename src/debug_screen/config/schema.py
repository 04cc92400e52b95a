"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("./logs/debug-screen.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class DebugScreenConfig(BaseSettings):
    """Root configuration for the debug screen.

    Every field can be set from the environment with the ``DEBUG_SCREEN_``
    prefix, e.g. ``DEBUG_SCREEN_DEV=true`` loads templates from
    ``template_dir`` instead of the installed package.
    """

    dev: bool = False
    template_dir: Path = Path("./src/debug_screen/templates")
    source_roots: list[Path] = [Path("./src"), Path("./tests")]
    context_lines: int = Field(10, ge=1, le=100)
    short_message_length: int = Field(100, ge=4, le=10_000)
    trace_collapse_threshold: int = Field(100, ge=0)
    redact_environment: bool = False
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="DEBUG_SCREEN_",
        env_nested_delimiter="__",
    )

    @field_validator("source_roots")
    @classmethod
    def validate_source_roots(cls, v: list[Path]) -> list[Path]:
        """Reject duplicate source roots."""
        seen: set[Path] = set()
        for root in v:
            if root in seen:
                raise ValueError(f"Duplicate source root: {root}")
            seen.add(root)
        return v
