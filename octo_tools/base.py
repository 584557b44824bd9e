"""Tool Interface & Metadata.

Every tool exposed to the agent is a small object with a name, an LLM-facing
description, a pydantic input model and an async ``execute``.
"""

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


class ToolMetadata(BaseModel):
    """Tool capability metadata.

    ``requires_approval`` is only set on tools that change remote state;
    read-only tools leave it as ``None``.
    """

    model_config = ConfigDict(frozen=True)

    requires_approval: bool | None = None
    idempotent: bool = False
    capabilities: list[str] = []
    risk_level: str = "low"


class Tool(Protocol):
    """Tool interface."""

    name: str
    description: str
    input_model: type[BaseModel]
    metadata: ToolMetadata

    async def execute(self, ctx: dict, input_data: dict[str, Any]) -> Any:
        """Execute tool action."""
        ...


def tool_input_schema(tool: Tool) -> dict[str, Any]:
    """JSON schema for a tool's input, as declared to LLM providers."""
    schema = tool.input_model.model_json_schema()
    schema.pop("title", None)
    return schema
