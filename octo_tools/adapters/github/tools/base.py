"""Shared shape of GitHub tools.

Every tool closes over the one ``GitHubClientWrapper`` it is constructed with.
Write tools additionally carry a resolved approval flag in their metadata.
"""

from typing import Any, ClassVar

from pydantic import BaseModel

from octo_tools.base import ToolMetadata
from octo_tools.adapters.github.client import GitHubClientWrapper


class GitHubTool:
    """Read-only GitHub tool."""

    name: ClassVar[str]
    description: ClassVar[str]
    input_model: ClassVar[type[BaseModel]]

    metadata = ToolMetadata(
        idempotent=True,
        capabilities=["github.read"],
        risk_level="low",
    )

    def __init__(self, client: GitHubClientWrapper):
        self.client = client

    def parse_input(self, input_data: dict[str, Any]) -> Any:
        """Validate raw tool arguments; raises ``pydantic.ValidationError``."""
        return self.input_model.model_validate(input_data)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class GitHubWriteTool(GitHubTool):
    """GitHub tool that changes remote state."""

    idempotent: ClassVar[bool] = False
    risk_level: ClassVar[str] = "medium"

    def __init__(self, client: GitHubClientWrapper, requires_approval: bool = True):
        super().__init__(client)
        self.metadata = ToolMetadata(
            requires_approval=requires_approval,
            idempotent=self.idempotent,
            capabilities=["github.write"],
            risk_level=self.risk_level,
        )
