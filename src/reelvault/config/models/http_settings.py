"""HTTP and locale configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from reelvault.shared.constants import IMDbConfig


class HttpSettings(BaseModel):
    """Settings handed to the HTTP fetcher."""

    locale: str = Field(default=IMDbConfig.DEFAULT_LOCALE, description="ISO 639-1 locale")
    timeout: float = Field(default=IMDbConfig.DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    user_agent: str = Field(default=IMDbConfig.DEFAULT_USER_AGENT, description="User-Agent header")
    base_url: str = Field(default=IMDbConfig.BASE_URL, description="Title pages base URL")
    suggestion_url: str = Field(
        default=IMDbConfig.SUGGESTION_URL,
        description="Search endpoint template with a {query} placeholder",
    )

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        locale = v.strip().lower()
        if locale not in IMDbConfig.ACCEPT_LANGUAGE:
            supported = ", ".join(sorted(IMDbConfig.ACCEPT_LANGUAGE))
            raise ValueError(f"Unsupported locale '{v}'. Supported: {supported}")
        return locale


__all__ = ["HttpSettings"]
