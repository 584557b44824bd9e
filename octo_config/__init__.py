"""
Octo Configuration Package.

Provides Pydantic Settings loaded from environment variables.
"""

from octo_config.settings import Settings

__all__ = ["Settings"]
