"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StackTraceConfig(BaseModel):
    """Stack trace navigation and deobfuscation configuration."""

    deobfuscate_command: str = "retrace"
    obfuscation_mappings_dir: Path | None = None
    filter_timeout: float | None = Field(None, gt=0, description="Seconds, unlimited when unset")

    @field_validator("deobfuscate_command")
    @classmethod
    def validate_deobfuscate_command(cls, v: str) -> str:
        """Reject empty or shell-like commands."""
        v = v.strip()
        if not v:
            raise ValueError("Deobfuscate command must not be empty")
        if any(char in v for char in ";|&`$<>\n"):
            raise ValueError(f"Deobfuscate command must be a plain command name or path: {v}")
        return v


class ResolverConfig(BaseModel):
    """Source file resolution configuration."""

    allowed_providers: list[str] = ["jdtls", "java_language_server"]

    @field_validator("allowed_providers")
    @classmethod
    def validate_allowed_providers(cls, v: list[str]) -> list[str]:
        """Require at least one provider name."""
        names = [name.strip() for name in v if name.strip()]
        if not names:
            raise ValueError("At least one provider name must be allowed")
        return names


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("java-stack-nav.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class NavigatorConfig(BaseSettings):
    """Root configuration for java-stack-nav."""

    stack_trace: StackTraceConfig = StackTraceConfig()
    resolver: ResolverConfig = ResolverConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="JAVA_STACK_NAV_",
        env_nested_delimiter="__",
    )
