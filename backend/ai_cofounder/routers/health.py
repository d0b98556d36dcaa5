"""Liveness of the three backing services.

    GET /api/health -> {"timestamp", "services": {...}, "overall"}

``overall`` is ``healthy`` (HTTP 200) only if every service answered;
``degraded`` (503) if any probe errored; otherwise ``unknown`` (503), e.g.
when a service is not configured at all.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ai_cofounder.api_models import HealthResponse, HealthServices
from ai_cofounder.dependencies import get_chat_service, get_conversation_index, get_optional_database
from ai_cofounder.services.database import CofounderDatabase
from ai_cofounder.services.llm import ChatCompletionService
from ai_cofounder.services.vector_index import ConversationIndex

log = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _probe(name: str, check: Optional[Callable[[], Awaitable[None]]]) -> str:
    if check is None:
        return "unconfigured"
    try:
        await check()
        return "healthy"
    except Exception as e:
        log.warning("Health probe for %s failed: %s", name, e)
        return "error"


@router.get("/health", response_model=HealthResponse)
async def health(
    database: Optional[CofounderDatabase] = Depends(get_optional_database),
    chat_service: Optional[ChatCompletionService] = Depends(get_chat_service),
    index: Optional[ConversationIndex] = Depends(get_conversation_index),
):
    db_check = (lambda: asyncio.to_thread(database.ping)) if database is not None else None
    services = HealthServices(
        supabase=await _probe("supabase", db_check),
        openai=await _probe("openai", chat_service.ping if chat_service else None),
        vector_index=await _probe("vector_index", index.ping if index else None),
    )

    statuses = [services.supabase, services.openai, services.vector_index]
    if all(s == "healthy" for s in statuses):
        overall = "healthy"
    elif any(s == "error" for s in statuses):
        overall = "degraded"
    else:
        overall = "unknown"

    payload = HealthResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        services=services,
        overall=overall,
    )
    return JSONResponse(status_code=200 if overall == "healthy" else 503, content=payload.model_dump())
