"""Configuration models describing docpicker settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocPickerBaseModel(BaseModel):
    """Shared configuration for docpicker Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class CacheSettings(DocPickerBaseModel):
    """Where and how materialized copies are written.

    Attributes:
        directory: Private directory that receives materialized copies.
        prefix: Fixed prefix placed in front of every generated cache filename.
        buffer_size: Number of bytes copied per read when materializing.
    """

    directory: Path = Path("~/.docpicker/cache")
    prefix: str = "prefix"
    buffer_size: int = Field(default=1024, gt=0)


class RemoteSettings(DocPickerBaseModel):
    """HTTP client options used when downloading remote references.

    Attributes:
        timeout_seconds: Transport timeout applied to connect and read operations.
        follow_redirects: Whether redirects are followed before streaming the body.
        user_agent: Value sent in the ``User-Agent`` header.
    """

    timeout_seconds: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    user_agent: str = "docpicker"


class ContentSettings(DocPickerBaseModel):
    """Options for references resolved through a content resolver.

    Attributes:
        schemes: URI schemes whose display names are looked up through the resolver.
    """

    schemes: List[str] = Field(default_factory=lambda: ["content", "file"])


class LoggingSettings(DocPickerBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class DocPickerConfig(DocPickerBaseModel):
    """Top-level configuration struct for docpicker.

    Attributes:
        cache: Cache directory settings.
        remote: Remote download settings.
        content: Content resolver settings.
        logging: Logging configuration.
    """

    cache: CacheSettings = Field(default_factory=CacheSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


__all__ = [
    "DocPickerBaseModel",
    "CacheSettings",
    "RemoteSettings",
    "ContentSettings",
    "LoggingSettings",
    "DocPickerConfig",
]
