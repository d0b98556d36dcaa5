"""Chat with the AI co-founder.

    POST /api/chat          -> reply text + canvas objects created from it
    GET  /api/chat/history  -> stored messages of the caller

Production behaviour (one configuration, no variants):

* canvas directives are processed inline, so the response already carries the
  stored shapes;
* the exchange itself (both messages, plus an embedding in the vector index
  when one is configured and ``CHAT_INDEX_CONVERSATIONS`` is on) is written by
  a background task after the response is sent.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from ai_cofounder.api_models import (
    CanvasObjectResponse,
    ChatRequest,
    ChatResponse,
    MessageListResponse,
    MessageResponse,
)
from ai_cofounder.auth import verify_token
from ai_cofounder.dependencies import (
    Settings,
    get_chat_service,
    get_conversation_index,
    get_database,
    get_settings,
)
from ai_cofounder.exceptions import StorageError
from ai_cofounder.metrics import CHAT_COMPLETIONS_TOTAL
from ai_cofounder.prompts import FALLBACK_REPLY_ERROR, FALLBACK_REPLY_UNCONFIGURED
from ai_cofounder.services.canvas_protocol import process_assistant_reply
from ai_cofounder.services.conversation_log import record_exchange
from ai_cofounder.services.database import CofounderDatabase
from ai_cofounder.services.llm import ChatCompletionService
from ai_cofounder.services.vector_index import ConversationIndex

log = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    dependencies=[Depends(verify_token)],
)


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    database: CofounderDatabase = Depends(get_database),
    chat_service: Optional[ChatCompletionService] = Depends(get_chat_service),
    index: Optional[ConversationIndex] = Depends(get_conversation_index),
    settings: Settings = Depends(get_settings),
):
    """Answer the user's message and materialize any canvas shapes it asks for."""
    message = body.message.strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    user_id = str(request.state.user.id)
    bound = log.bind(user_id=user_id, project_id=body.project_id)

    if chat_service is None:
        CHAT_COMPLETIONS_TOTAL.labels(outcome="unconfigured").inc()
        bound.warning("Chat requested but OpenAI is not configured")
        return ChatResponse(response=FALLBACK_REPLY_UNCONFIGURED, success=False)

    try:
        raw_reply = await chat_service.complete(message, body.conversation_history)
    except Exception as exc:
        bound.error("Chat completion failed", error=str(exc), exc_info=True)
        return ChatResponse(response=FALLBACK_REPLY_ERROR, success=False)

    processed = process_assistant_reply(raw_reply, user_id, database, user_request=message)

    background_tasks.add_task(
        record_exchange,
        database,
        user_id,
        message,
        processed.display_text,
        chat_service=chat_service,
        index=index if settings.chat_index_conversations else None,
        project_id=body.project_id,
    )

    return ChatResponse(
        response=processed.display_text,
        success=True,
        canvas_objects=[CanvasObjectResponse.from_record(r) for r in processed.created_shapes],
    )


@router.get("/history", response_model=MessageListResponse)
async def chat_history(
    request: Request,
    database: CofounderDatabase = Depends(get_database),
):
    """Lists the caller's stored chat messages, oldest first."""
    user_id = str(request.state.user.id)
    try:
        rows = database.list_messages(user_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Database error listing messages: {e.detail}")
    return MessageListResponse(
        messages=[
            MessageResponse(
                id=row["id"],
                content=row["content"],
                role=row["role"],
                created_at=str(row.get("created_at")),
            )
            for row in rows
        ]
    )
