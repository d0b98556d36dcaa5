import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ai_cofounder.api_models import SearchRequest, SearchResponse, SearchResult
from ai_cofounder.auth import verify_token
from ai_cofounder.dependencies import get_chat_service, get_conversation_index
from ai_cofounder.services.llm import ChatCompletionService
from ai_cofounder.services.vector_index import ConversationIndex

log = logging.getLogger(__name__)

router = APIRouter(tags=["Search"], dependencies=[Depends(verify_token)])


@router.post("/search", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    request: Request,
    chat_service: Optional[ChatCompletionService] = Depends(get_chat_service),
    index: Optional[ConversationIndex] = Depends(get_conversation_index),
):
    """Semantic search over the caller's earlier exchanges with the co-founder."""
    query = body.query.strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query is required")
    if chat_service is None or index is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Search is not configured")

    user_id = str(request.state.user.id)
    try:
        vector = await chat_service.embed(query)
        hits = await index.search(vector, user_id, limit=body.limit)
    except Exception as e:
        log.error("Search failed for user %s: %s", user_id, e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    return SearchResponse(results=[SearchResult(**hit) for hit in hits])
