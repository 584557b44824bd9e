"""Octo Chat API - FastAPI service for GitHub-aware chats."""
