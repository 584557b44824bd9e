"""Octo Tool System.

Tool interface, registry, and the GitHub adapter.
"""

from octo_tools.base import Tool, ToolMetadata, tool_input_schema
from octo_tools.registry import ToolRegistry

__all__ = ["Tool", "ToolMetadata", "ToolRegistry", "tool_input_schema"]
