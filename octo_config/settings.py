"""
Application Settings (Pydantic Settings).

Loads configuration from environment variables (.env file or system env).

Complex values are JSON, e.g.:
    GITHUB_REQUIRE_APPROVAL='{"mergePullRequest": true, "addIssueComment": false}'
    GITHUB_TOOL_PRESET='["code-review", "issue-triage"]'
"""

import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings documented in .env.example.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ========================================================================
    # GITHUB
    # ========================================================================
    GITHUB_TOKEN: str = Field(
        default="",
        description="Token used when a chat request does not bring its own",
    )
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    GITHUB_TIMEOUT_SECONDS: int = Field(default=30, ge=1, le=300)
    GITHUB_REQUIRE_APPROVAL: Annotated[bool | dict[str, bool], NoDecode] = Field(
        default=True,
        description="true/false for all write tools, or a JSON object of per-tool flags",
    )
    GITHUB_TOOL_PRESET: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        description="Preset(s) restricting the tool set; unset for all tools",
    )

    # ========================================================================
    # LLM PROVIDERS
    # ========================================================================
    ANTHROPIC_API_KEY: str = Field(default="")
    OPENAI_API_KEY: str = Field(default="")
    DEFAULT_MODEL: str = Field(
        default="anthropic/claude-sonnet-4-5",
        description="Model used when a request names none (<provider>/<model>)",
    )
    TITLE_MODEL: str = Field(
        default="openai/gpt-4o-mini", description="Small model used to title new chats"
    )

    # ========================================================================
    # CHAT AGENT LOOP
    # ========================================================================
    CHAT_MAX_STEPS_WITH_TOOLS: int = Field(default=20, ge=1, le=100)
    CHAT_MAX_STEPS_WITHOUT_TOOLS: int = Field(default=5, ge=1, le=100)
    CHAT_MAX_TOKENS: int = Field(default=4096, ge=256)

    # ========================================================================
    # API SERVER
    # ========================================================================
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_CORS_ORIGINS: str = Field(default="http://localhost:3000")
    API_CORS_ALLOW_CREDENTIALS: bool = Field(default=True)

    # ========================================================================
    # OPENTELEMETRY
    # ========================================================================
    OTEL_EXPORTER_OTLP_ENDPOINT: str = Field(default="http://localhost:4317")
    OTEL_SERVICE_NAME: str = Field(default="octo-chat")
    OTEL_TRACES_ENABLED: bool = Field(default=False)

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # DEPLOYMENT
    # ========================================================================
    ENVIRONMENT: str = Field(
        default="development", pattern="^(development|staging|production)$"
    )

    @field_validator("GITHUB_REQUIRE_APPROVAL", mode="before")
    @classmethod
    def _approval_from_env(cls, value):
        """Accept true/false or a JSON object of per-tool flags."""
        if isinstance(value, str):
            value = value.strip()
            if value.lower() in ("true", "1", "yes"):
                return True
            if value.lower() in ("false", "0", "no"):
                return False
            return json.loads(value)
        return value

    @field_validator("GITHUB_TOOL_PRESET", mode="before")
    @classmethod
    def _single_preset(cls, value):
        """Accept a bare preset name as well as a JSON list."""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if value.startswith("["):
                return json.loads(value)
            return [value]
        return value
