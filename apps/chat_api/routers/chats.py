"""
Chat Endpoints.

- POST /chats: Create a chat
- GET /chats: List chats
- GET /chats/{id}: Chat with messages
- DELETE /chats/{id}: Delete a chat
- POST /chats/{id}: Run one turn (new message and/or approval decisions)
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from octo_agents import build_system_prompt, generate_chat_title, run_chat_turn
from octo_agents.chat_loop import MAX_TITLE_LENGTH
from octo_config.settings import Settings
from octo_llm.client import LLMError
from octo_llm.router import LLMRouter
from octo_obs.logging import get_logger

from apps.chat_api.deps import build_github_registry, get_llm_router, get_settings, get_store
from apps.chat_api.store import Chat, ChatStore

router = APIRouter()
logger = get_logger(__name__)


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================


class CreateChatRequest(BaseModel):
    title: str | None = Field(default=None, max_length=MAX_TITLE_LENGTH)


class ChatSummary(BaseModel):
    id: str
    title: str | None
    created_at: datetime
    updated_at: datetime


class ChatTurnRequest(BaseModel):
    """One chat turn. Send ``message``, ``approvals``, or both."""

    model: str | None = Field(
        default=None, description="<provider>/<model>; defaults to DEFAULT_MODEL"
    )
    message: str | None = Field(default=None, min_length=1)
    github_token: str | None = Field(
        default=None, description="Overrides the server GITHUB_TOKEN for this turn"
    )
    approvals: dict[str, bool] | None = Field(
        default=None, description="Decisions for pending tool calls, keyed by tool call id"
    )


class PendingApprovalOut(BaseModel):
    tool_call_id: str
    tool_name: str
    arguments: dict[str, Any]


class ChatTurnResponse(BaseModel):
    chat_id: str
    title: str | None
    status: str
    text: str
    steps: int
    messages: list[dict[str, Any]]
    pending_approvals: list[PendingApprovalOut]


# ============================================================================
# HELPERS
# ============================================================================


async def _require_chat(store: ChatStore, chat_id: str) -> Chat:
    chat = await store.get(chat_id)
    if chat is None:
        raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
    return chat


async def _title_for(llm_router: LLMRouter, settings: Settings, message: str) -> str:
    """Generate a title, falling back to the message itself if the title model fails."""
    try:
        title_llm = llm_router.for_model(settings.TITLE_MODEL)
        return await generate_chat_title(title_llm, message)
    except LLMError as e:
        logger.warning("chat_title_failed", model=settings.TITLE_MODEL, error=str(e))
        return message.strip()[:MAX_TITLE_LENGTH].strip() or "New chat"


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post("", response_model=ChatSummary, status_code=status.HTTP_201_CREATED)
async def create_chat(
    body: CreateChatRequest | None = None,
    store: ChatStore = Depends(get_store),
) -> Chat:
    chat = await store.create(title=body.title if body else None)
    logger.info("chat_created", chat_id=chat.id)
    return chat


@router.get("", response_model=list[ChatSummary])
async def list_chats(store: ChatStore = Depends(get_store)) -> list[Chat]:
    return await store.list_chats()


@router.get("/{chat_id}", response_model=Chat)
async def get_chat(chat_id: str, store: ChatStore = Depends(get_store)) -> Chat:
    return await _require_chat(store, chat_id)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(chat_id: str, store: ChatStore = Depends(get_store)) -> Response:
    if not await store.delete(chat_id):
        raise HTTPException(status_code=404, detail=f"Chat {chat_id} not found")
    logger.info("chat_deleted", chat_id=chat_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{chat_id}", response_model=ChatTurnResponse)
async def chat_turn(
    chat_id: str,
    body: ChatTurnRequest,
    settings: Settings = Depends(get_settings),
    store: ChatStore = Depends(get_store),
    llm_router: LLMRouter = Depends(get_llm_router),
) -> ChatTurnResponse:
    """
    Run one turn of the chat.

    GitHub tools are composed for this request from the request token (or
    the server token) with the configured approval policy and preset. A turn
    that reaches a gated write tool returns ``awaiting_approval`` with the
    pending calls; resume it by posting ``approvals``.
    """
    chat = await _require_chat(store, chat_id)
    if body.message is None and not body.approvals:
        raise HTTPException(status_code=422, detail="Provide a message or approvals")

    model_id = body.model or settings.DEFAULT_MODEL
    try:
        llm = llm_router.for_model(model_id)
    except LLMError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if body.message is not None and not chat.title and not chat.messages:
        await store.set_title(chat_id, await _title_for(llm_router, settings, body.message))

    token = body.github_token or settings.GITHUB_TOKEN
    registry, client = await build_github_registry(settings, token)
    max_steps = (
        settings.CHAT_MAX_STEPS_WITH_TOOLS if client else settings.CHAT_MAX_STEPS_WITHOUT_TOOLS
    )

    try:
        result = await run_chat_turn(
            llm,
            registry,
            chat.messages,
            user_message=body.message,
            system_prompt=build_system_prompt(),
            approvals=body.approvals,
            max_steps=max_steps,
            max_tokens=settings.CHAT_MAX_TOKENS,
            ctx={"chat_id": chat_id, "model": model_id},
        )
    finally:
        if client is not None:
            await client.aclose()

    await store.append_messages(chat_id, result.messages)
    if result.error is not None:
        logger.warning("chat_turn_partial", chat_id=chat_id, persisted=len(result.messages))
        raise result.error
    chat = await _require_chat(store, chat_id)

    return ChatTurnResponse(
        chat_id=chat_id,
        title=chat.title,
        status=result.status,
        text=result.text,
        steps=result.steps,
        messages=result.messages,
        pending_approvals=[
            PendingApprovalOut(
                tool_call_id=p.tool_call_id, tool_name=p.tool_name, arguments=p.arguments
            )
            for p in result.pending_approvals
        ],
    )
