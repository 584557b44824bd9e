"""
Health Check Endpoints.

- GET /healthz: Liveness probe (API running)
- GET /readyz: Readiness probe (state initialized, LLM keys configured)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from octo_config.settings import Settings

from apps.chat_api.deps import get_settings

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Liveness probe - is the API process running?"""
    return {"status": "healthy", "service": "octo-chat-api"}


@router.get("/readyz")
async def readyz(request: Request, settings: Settings = Depends(get_settings)):
    """
    Readiness probe.

    Returns:
        200 OK if the chat store is up and at least one LLM provider has a key
        503 Service Unavailable otherwise
    """
    checks = {
        "chat_store": "ok" if hasattr(request.app.state, "chat_store") else "missing",
        "anthropic": "ok" if settings.ANTHROPIC_API_KEY else "not_configured",
        "openai": "ok" if settings.OPENAI_API_KEY else "not_configured",
        "github_token": "ok" if settings.GITHUB_TOKEN else "not_configured",
    }
    ready = checks["chat_store"] == "ok" and "ok" in (checks["anthropic"], checks["openai"])
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "unavailable", "checks": checks},
    )
