"""
Octo Chat API - FastAPI Application Entry Point.

This module initializes the FastAPI application with:
- CORS middleware
- Request ID injection and request logging
- OpenTelemetry instrumentation (when enabled)
- Lifespan context management (chat store, LLM router)
- Error mapping for GitHub and LLM failures
- Router mounting
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from octo_llm.client import LLMAuthError, LLMError, LLMRateLimitError
from octo_llm.router import LLMRouter
from octo_obs.logging import get_logger, setup_logging
from octo_obs.tracing import setup_tracing
from octo_tools.adapters.github.exceptions import GitHubAPIError

from apps.chat_api.deps import get_settings
from apps.chat_api.middleware import RequestIDMiddleware, RequestLoggingMiddleware
from apps.chat_api.routers import catalog, chats, health, metrics
from apps.chat_api.store import ChatStore

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Creates the chat store and the LLM router; tool registries are built per
    request because the GitHub token may differ between requests.
    """
    app.state.chat_store = ChatStore()
    app.state.llm_router = LLMRouter(
        anthropic_api_key=settings.ANTHROPIC_API_KEY,
        openai_api_key=settings.OPENAI_API_KEY,
    )
    logger.info(
        "api_startup",
        environment=settings.ENVIRONMENT,
        default_model=settings.DEFAULT_MODEL,
        github_token_configured=bool(settings.GITHUB_TOKEN),
        tool_preset=settings.GITHUB_TOOL_PRESET,
    )

    yield

    logger.info("api_shutdown")


app = FastAPI(
    title="Octo Chat API",
    description="Chat assistant with approval-gated GitHub tools",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

setup_tracing(settings, app)

# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.API_CORS_ORIGINS.split(",") if settings.API_CORS_ORIGINS else ["*"],
    allow_credentials=settings.API_CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Last added runs first: request id is set before the request is logged.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


@app.exception_handler(GitHubAPIError)
async def github_exception_handler(request: Request, exc: GitHubAPIError):
    """Surface GitHub failures with GitHub's status (502 when unknown)."""
    status_code = exc.status_code or 502
    logger.warning("github_error_response", status_code=status_code, error=str(exc))
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


@app.exception_handler(LLMError)
async def llm_exception_handler(request: Request, exc: LLMError):
    """Provider failures: 429 when rate limited, 502 otherwise."""
    status_code = 429 if isinstance(exc, LLMRateLimitError) else 502
    logger.warning(
        "llm_error_response",
        status_code=status_code,
        error=str(exc),
        auth=isinstance(exc, LLMAuthError),
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unhandled exceptions: log with traceback, answer with a generic 500."""
    logger.error("unhandled_exception", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred.",
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(chats.router, prefix="/chats", tags=["chats"])
app.include_router(catalog.router, prefix="", tags=["catalog"])
app.include_router(health.router, prefix="", tags=["health"])
app.include_router(metrics.router, prefix="", tags=["metrics"])


@app.get("/", tags=["root"])
async def root():
    """API information."""
    return {
        "name": "Octo Chat API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/healthz",
        "metrics": "/metrics",
        "endpoints": {
            "chats": "GET/POST /chats",
            "chat": "GET/POST/DELETE /chats/{id}",
            "models": "GET /models",
            "tools": "GET /tools",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "apps.chat_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
