"""Tool Adapters.

Available adapters:
- github: GitHub REST tools (repositories, pull requests, issues, search, commits)
"""

__all__ = ["github"]
