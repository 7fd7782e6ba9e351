"""Configuration schema — Pydantic models for pathresolver config files."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONDITIONS = ["node", "import", "require", "default"]


class SelfReferencePolicy(str, Enum):
    """How a package's references to its own name are resolved."""
    EXPORTS = "exports"
    MAIN = "main"
    OFF = "off"


class HostKind(str, Enum):
    """Host module-resolution mechanism used as the last fallback."""
    NODE = "node"
    PYTHON = "python"


class PackageConfig(BaseModel):
    """Explicit package context, overriding the npm environment."""
    name: str
    manifest: str

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[Literal["DEBUG", "INFO", "WARN", "ERROR"]] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            text = value.strip().upper()
            return "WARN" if text == "WARNING" else text
        return value


class ResolverConfig(BaseModel):
    """Resolver configuration."""
    base_path: Optional[str] = None
    self_reference: SelfReferencePolicy = SelfReferencePolicy.EXPORTS
    host: HostKind = HostKind.NODE
    conditions: List[str] = Field(default_factory=lambda: list(DEFAULT_CONDITIONS))
    max_link_depth: int = Field(default=40, ge=1)
    package: Optional[PackageConfig] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")
