"""Tool Registry.

Name-keyed tool lookup with capability and approval filtering.
"""

from typing import Any, Iterator


class ToolRegistry:
    """Tool registry with capability-based lookup."""

    def __init__(self):
        self._tools: dict[str, Any] = {}

    def register(self, tool: Any) -> None:
        """Register a tool (replaces any tool already under the same name)."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Any | None:
        """Get tool by name."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def filter_by_capability(self, capability: str) -> list[Any]:
        """Filter tools by capability tag."""
        return [t for t in self._tools.values() if capability in t.metadata.capabilities]

    def requiring_approval(self) -> list[Any]:
        """Tools whose invocation must be confirmed by a human first."""
        return [t for t in self._tools.values() if t.metadata.requires_approval]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._tools.values())
