"""
Catalogue Endpoints.

- GET /models: Selectable chat models
- GET /tools: GitHub tools under the configured preset and approval policy
"""

from fastapi import APIRouter, Depends

from octo_config.settings import Settings
from octo_tools.adapters.github import create_github_tools
from octo_tools.adapters.github.client import GitHubClientWrapper
from octo_tools.base import tool_input_schema
from octo_llm.router import AVAILABLE_MODELS

from apps.chat_api.deps import get_settings

router = APIRouter()


@router.get("/models")
async def list_models(settings: Settings = Depends(get_settings)):
    return {"default": settings.DEFAULT_MODEL, "models": AVAILABLE_MODELS}


@router.get("/tools")
async def list_tools(settings: Settings = Depends(get_settings)):
    """
    Tool catalogue.

    ``requires_approval`` is null for read tools and a bool for write tools.
    """
    # Composition needs a client but never touches the network.
    client = GitHubClientWrapper(token=settings.GITHUB_TOKEN or "unused")
    try:
        tools = create_github_tools(
            require_approval=settings.GITHUB_REQUIRE_APPROVAL,
            preset=settings.GITHUB_TOOL_PRESET,
            client=client,
        )
    finally:
        await client.aclose()

    return {
        "preset": settings.GITHUB_TOOL_PRESET,
        "tools": [
            {
                "name": name,
                "description": tool.description,
                "requires_approval": tool.metadata.requires_approval,
                "input_schema": tool_input_schema(tool),
            }
            for name, tool in tools.items()
        ],
    }
