"""
Octo Applications Package.

Contains:
- chat_api: FastAPI chat service
"""

__version__ = "0.1.0"
