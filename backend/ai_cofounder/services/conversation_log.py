"""Background persistence of a finished chat exchange.

Runs after the chat response has been sent (FastAPI ``BackgroundTasks``).
It stores both messages and, when a vector index is configured, embeds and
indexes the exchange for later search. Failures are logged here and never
reach the user.
"""

from __future__ import annotations

from typing import Optional

import structlog

from ai_cofounder.services.database import CofounderDatabase
from ai_cofounder.services.llm import ChatCompletionService
from ai_cofounder.services.vector_index import ConversationIndex

log = structlog.get_logger(__name__)


async def record_exchange(
    database: CofounderDatabase,
    user_id: str,
    message: str,
    reply: str,
    *,
    chat_service: Optional[ChatCompletionService] = None,
    index: Optional[ConversationIndex] = None,
    project_id: Optional[str] = None,
) -> None:
    """Store the exchange; each step fails independently."""
    bound = log.bind(user_id=str(user_id), project_id=project_id)

    try:
        database.create_message(user_id, message, "user")
        database.create_message(user_id, reply, "assistant")
    except Exception as exc:
        bound.error("Failed to store chat messages", error=str(exc), exc_info=True)

    if index is None or chat_service is None:
        return

    try:
        vector = await chat_service.embed(f"{message}\n{reply}")
        point_id = await index.index_exchange(user_id, message, reply, vector, project_id=project_id)
        bound.debug("Indexed chat exchange", point_id=point_id)
    except Exception as exc:
        bound.error("Failed to index chat exchange", error=str(exc), exc_info=True)
