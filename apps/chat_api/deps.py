"""
FastAPI Dependency Injection.

Provides:
- Settings
- Chat store and LLM router (created in the app lifespan)
- Per-request GitHub tool registry
"""

from functools import lru_cache

from fastapi import Request

from octo_config.settings import Settings
from octo_llm.router import LLMRouter
from octo_tools.adapters.github import GitHubClientWrapper, register_github_tools
from octo_tools.registry import ToolRegistry

from apps.chat_api.store import ChatStore


@lru_cache
def get_settings() -> Settings:
    """Dependency: process-wide settings."""
    return Settings()


def get_store(request: Request) -> ChatStore:
    """Dependency: chat store from app state."""
    return request.app.state.chat_store


def get_llm_router(request: Request) -> LLMRouter:
    """Dependency: LLM router from app state."""
    return request.app.state.llm_router


async def build_github_registry(
    settings: Settings, token: str | None
) -> tuple[ToolRegistry, GitHubClientWrapper | None]:
    """
    Compose a tool registry for one request.

    Without a token the registry is empty and no client is created.
    The caller owns the returned client and must close it. If the
    configured preset or approval policy is rejected, the client is closed
    before the error propagates.
    """
    registry = ToolRegistry()
    if not token:
        return registry, None

    client = GitHubClientWrapper(
        token=token,
        base_url=settings.GITHUB_API_URL,
        timeout_seconds=settings.GITHUB_TIMEOUT_SECONDS,
    )
    try:
        register_github_tools(
            registry,
            require_approval=settings.GITHUB_REQUIRE_APPROVAL,
            preset=settings.GITHUB_TOOL_PRESET,
            client=client,
        )
    except Exception:
        await client.aclose()
        raise
    return registry, client
