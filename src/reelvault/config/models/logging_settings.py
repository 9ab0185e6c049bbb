"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    level: str = Field(default="WARNING", description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON-lines log file")
    console_output: bool = Field(default=True, description="Render console logs through Rich")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Expected one of {', '.join(_LEVELS)}")
        return level


__all__ = ["LoggingSettings"]
