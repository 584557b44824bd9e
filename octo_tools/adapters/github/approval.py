"""Approval policy for mutating GitHub tools.

A policy is either uniform (one flag for every write tool) or per-tool
(explicit flags for some write tools, approval required for the rest).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .presets import ToolName, WRITE_TOOL_NAMES


@dataclass(frozen=True)
class UniformApproval:
    """Same approval requirement for every write tool."""

    required: bool = True


@dataclass(frozen=True)
class PerToolApproval:
    """Per-tool approval requirements; unlisted write tools require approval."""

    overrides: Mapping[ToolName, bool] = field(default_factory=dict)

    def __post_init__(self):
        checked: dict[ToolName, bool] = {}
        for name, required in self.overrides.items():
            tool_name = _write_tool_name(name)
            if not isinstance(required, bool):
                raise ValueError(f"Approval flag for {tool_name.value!r} must be a boolean")
            checked[tool_name] = required
        object.__setattr__(self, "overrides", MappingProxyType(checked))


ApprovalPolicy = UniformApproval | PerToolApproval


def _write_tool_name(name: "str | ToolName") -> ToolName:
    try:
        tool_name = ToolName(name)
    except ValueError:
        raise ValueError(f"Unknown tool name {name!r}") from None
    if tool_name not in WRITE_TOOL_NAMES:
        raise ValueError(f"{tool_name.value!r} is read-only and takes no approval flag")
    return tool_name


def approval_policy_from(value: "bool | Mapping[str, bool] | ApprovalPolicy") -> ApprovalPolicy:
    """Build a policy from the plain ``bool | mapping`` form used in settings and requests."""
    if isinstance(value, (UniformApproval, PerToolApproval)):
        return value
    if isinstance(value, bool):
        return UniformApproval(required=value)
    if isinstance(value, Mapping):
        return PerToolApproval(overrides=value)
    raise TypeError(f"Approval policy must be a bool or a mapping, got {type(value).__name__}")


def resolve_approval(name: "str | ToolName", policy: ApprovalPolicy) -> bool:
    """Resolve whether a write tool requires approval under ``policy``."""
    tool_name = _write_tool_name(name)
    if isinstance(policy, UniformApproval):
        return policy.required
    if isinstance(policy, PerToolApproval):
        return policy.overrides.get(tool_name, True)
    raise TypeError(f"Unsupported approval policy: {policy!r}")
